"""File discovery, front matter splitting, and document serialization"""

import logging
import re
from pathlib import Path, PurePosixPath
from typing import Any, Iterable, Optional

import yaml

from mdfolio.core.models import ContentDocument, ParsedFile


logger = logging.getLogger(__name__)

DELIMITER = '---'
MD_EXTENSIONS = {'.md', '.markdown', '.mdx'}
POST_DIRS = ('_posts', '_drafts')
EMBED_KEY = 'layout'
EMBED_HINT_KEYS = {'title', 'date', 'permalink'}

LINE_RE = re.compile(r'[^\n]*\n|[^\n]+\Z')
FENCE_RE = re.compile(r'^ {0,3}(`{3,}|~{3,})(.*)$')


class FrontmatterError(ValueError):
    """Malformed front matter header; line is the 1-based file line when known."""

    def __init__(self, message: str, line: Optional[int] = None):
        super().__init__(message)
        self.line = line


def _lines(text: str) -> list[str]:
    """Split on '\\n' only, keeping line endings, so ''.join() restores text exactly."""
    return LINE_RE.findall(text)


def _is_delimiter(line: str) -> bool:
    return line.lstrip('\ufeff').rstrip() == DELIMITER


def _find_close(lines: list[str], start: int) -> Optional[int]:
    """Index of the delimiter closing the header opened at lines[start], or None."""
    for i in range(start + 1, len(lines)):
        if _is_delimiter(lines[i]):
            return i
    return None


def _load_header(lines: list[str], first_line: int) -> dict[str, Any]:
    """Parse header YAML; first_line is the 1-based file line of the opening delimiter."""
    try:
        fm = yaml.safe_load(''.join(lines)) or {}
    except yaml.YAMLError as e:
        mark = getattr(e, 'problem_mark', None)
        line = first_line + 1 + mark.line if mark is not None else first_line
        raise FrontmatterError(f"Invalid YAML front matter: {e}", line) from e
    if not isinstance(fm, dict):
        raise FrontmatterError(
            f"Invalid YAML front matter: expected a mapping, got {type(fm).__name__}", first_line,
        )
    bad = [k for k in fm if not isinstance(k, str)]
    if bad:
        raise FrontmatterError(
            f"Invalid YAML front matter: keys must be strings, got {bad[0]!r}; quote it", first_line,
        )
    return fm


def split_frontmatter(text: str) -> tuple[Optional[str], dict[str, Any], str]:
    """Return (raw_header, frontmatter, body); raw_header is None when text has no header."""
    lines = _lines(text)
    if not lines or not _is_delimiter(lines[0]):
        return None, {}, text
    close = _find_close(lines, 0)
    if close is None:
        raise FrontmatterError(f"Unterminated front matter: no closing '{DELIMITER}' line", 1)
    fm = _load_header(lines[1:close], 1)
    return ''.join(lines[:close + 1]), fm, ''.join(lines[close + 1:])


def _looks_like_header(lines: list[str], hinted: bool = False) -> bool:
    """True when lines hold a YAML mapping that names a layout.

    hinted also requires a title, date or permalink next to the layout.
    """
    if not lines:
        return False
    try:
        data = yaml.safe_load(''.join(lines))
    except yaml.YAMLError:
        return False
    if not isinstance(data, dict) or EMBED_KEY not in data:
        return False
    return not hinted or any(k in data for k in EMBED_HINT_KEYS)


def _embedded_starts(lines: list[str]) -> list[int]:
    """Indices of body lines that open another front matter header.

    Fenced code is skipped. A delimiter that directly follows a text line may
    be a setext underline, so there the header must carry more than a layout.
    """
    starts: list[int] = []
    fence: Optional[str] = None
    i = 0
    while i < len(lines):
        line = lines[i].rstrip('\n')
        m = FENCE_RE.match(line)
        if fence:
            if m and m.group(1)[0] == fence[0] and len(m.group(1)) >= len(fence) and not m.group(2).strip():
                fence = None
        elif m and not (m.group(1)[0] == '`' and '`' in m.group(2)):
            fence = m.group(1)
        elif _is_delimiter(line):
            close = _find_close(lines, i)
            hinted = i > 0 and bool(lines[i - 1].strip())
            if close is not None and _looks_like_header(lines[i + 1:close], hinted):
                starts.append(i)
                i = close
        i += 1
    return starts


def split_path(path: PurePosixPath, index: int) -> PurePosixPath:
    """Second and later documents of one file get -2, -3, ... before the extension."""
    if index == 0:
        return path
    return path.with_name(f"{path.stem}-{index + 1}{path.suffix}")


def split_documents(text: str, path: str) -> list[ContentDocument]:
    """Split a file into its leading document and any documents concatenated after it."""
    header, frontmatter, _ = split_frontmatter(text)
    lines = _lines(text)
    body_start = len(_lines(header)) if header else 0
    body_lines = lines[body_start:]
    starts = _embedded_starts(body_lines)
    ends = starts + [len(body_lines)]

    documents = [ContentDocument(
        path=path,
        frontmatter=frontmatter,
        header=header,
        body=''.join(body_lines[:ends[0]]),
        offset=body_start,
    )]
    for index, start in enumerate(starts, 1):
        close = _find_close(body_lines, start)
        documents.append(ContentDocument(
            path=path,
            index=index,
            frontmatter=_load_header(body_lines[start + 1:close], body_start + start + 1),
            header=''.join(body_lines[start:close + 1]),
            body=''.join(body_lines[close + 1:ends[index]]),
            offset=body_start + close + 1,
        ))
    return documents


def render_header(frontmatter: dict[str, Any]) -> str:
    """Emit a delimited YAML header, keeping key order and non-ASCII titles readable."""
    if not frontmatter:
        return f"{DELIMITER}\n{DELIMITER}\n"
    dumped = yaml.safe_dump(frontmatter, default_flow_style=False, allow_unicode=True, sort_keys=False)
    return f"{DELIMITER}\n{dumped}{DELIMITER}\n"


def _header_current(doc: ContentDocument) -> bool:
    """True when the raw header still describes doc.frontmatter."""
    if doc.header is None:
        return not doc.frontmatter
    lines = _lines(doc.header)
    try:
        return _load_header(lines[1:-1], 1) == doc.frontmatter
    except FrontmatterError:
        return False


def serialize_document(doc: ContentDocument) -> str:
    """Return header + body, regenerating the header only if the front matter changed."""
    if _header_current(doc):
        return (doc.header or '') + doc.body
    return render_header(doc.frontmatter) + doc.body


def serialize_file(documents: Iterable[ContentDocument]) -> str:
    return ''.join(serialize_document(d) for d in documents)


def _skipped(rel: Path, exclude: set[str], include_drafts: bool) -> bool:
    allowed = set(POST_DIRS) if include_drafts else {'_posts'}
    for part in rel.parts[:-1]:
        if part in exclude or part.startswith('.'):
            return True
        if part.startswith('_') and part not in allowed:
            return True
    return rel.name in exclude or rel.name.startswith('.')


def discover_files(path: Path, exclude: Iterable[str] = (), include_drafts: bool = False) -> list[Path]:
    """Return sorted content files under path, or [path] if a single markdown file."""
    if path.is_file():
        return [path] if path.suffix in MD_EXTENSIONS else []
    excluded = set(exclude)
    return sorted(
        p for p in path.rglob('*')
        if p.is_file() and p.suffix in MD_EXTENSIONS
        and not _skipped(p.relative_to(path), excluded, include_drafts)
    )


def site_root(path: Path) -> Path:
    """Directory that document paths are made relative to."""
    if path.is_dir():
        return path
    for parent in path.parents:
        if parent.name in POST_DIRS:
            return parent.parent
    return path.parent


def parse_file(path: Path, root: Optional[Path] = None) -> ParsedFile:
    """Read one file into its documents; header errors are recorded, not raised."""
    rel = path.relative_to(root or site_root(path)).as_posix()
    raw = path.read_bytes().decode('utf-8')
    try:
        documents = split_documents(raw, rel)
    except FrontmatterError as e:
        logger.warning("%s: %s", rel, e)
        return ParsedFile(path=rel, raw=raw, error=str(e), error_line=e.line)
    logger.debug("Parsed %s into %d document(s)", rel, len(documents))
    return ParsedFile(path=rel, raw=raw, documents=documents)
