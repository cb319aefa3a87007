"""Content integrity checks for single files and whole sites"""

import logging
from collections import defaultdict
from pathlib import PurePosixPath

from mdfolio.config import Settings
from mdfolio.core.extract.blocks import code_blocks
from mdfolio.core.models import CheckReport, ContentDocument, Issue, ParsedFile, Severity
from mdfolio.core.parse import split_path
from mdfolio.core.permalink import parse_post_name, resolve_permalink, unsupported_placeholders
from mdfolio.core.utils.diff import similarity


logger = logging.getLogger(__name__)


def _issue(path: str, code: str, message: str, line: int = None, severity: Severity = Severity.error) -> Issue:
    return Issue(path=path, code=code, severity=severity, message=message, line=line)


def _is_empty(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def check_document(doc: ContentDocument, settings: Settings) -> list[Issue]:
    """Header keys, layout name, permalink shape, and fence balance for one document."""
    issues = []
    header_line = doc.offset - doc.header_lines + 1

    for key in settings.required_keys:
        if _is_empty(doc.frontmatter.get(key)):
            issues.append(_issue(doc.path, 'missing-key', f"front matter has no '{key}'", header_line))

    if settings.layouts and doc.layout and doc.layout not in settings.layouts:
        issues.append(_issue(
            doc.path, 'unknown-layout',
            f"layout '{doc.layout}' is not one of: {', '.join(settings.layouts)}",
            header_line, Severity.warning,
        ))

    if doc.permalink is not None and not str(doc.permalink).startswith('/'):
        issues.append(_issue(
            doc.path, 'invalid-permalink',
            f"permalink '{doc.permalink}' should start with '/'",
            header_line, Severity.warning,
        ))

    unsupported = unsupported_placeholders(doc)
    if unsupported:
        issues.append(_issue(
            doc.path, 'invalid-permalink',
            f"permalink placeholders {', '.join(':' + p for p in unsupported)} have no value for pages and are dropped",
            header_line, Severity.warning,
        ))

    for block in code_blocks(doc, settings.parser_config):
        if not block.closed:
            lang = f" ({block.language})" if block.language else ""
            issues.append(_issue(doc.path, 'unbalanced-fence', f"code fence{lang} is never closed", block.line))
    return issues


def check_embedded(parsed: ParsedFile, settings: Settings) -> list[Issue]:
    """Report documents concatenated after the first one in the same file."""
    if len(parsed.documents) < 2:
        return []
    first = parsed.documents[0]
    severity = Severity.warning if settings.duplicate_policy == 'split' else Severity.error
    issues = []
    for doc in parsed.documents[1:]:
        ratio = similarity(first.body, doc.body)
        issues.append(_issue(
            parsed.path, 'embedded-document',
            f"document #{doc.index + 1} ('{doc.title or 'untitled'}') starts inside the body "
            f"of '{first.title or 'untitled'}' ({ratio:.0%} similar); remove or split it",
            doc.offset - doc.header_lines + 1, severity,
        ))
    return issues


def validate_file(parsed: ParsedFile, settings: Settings) -> list[Issue]:
    """Run every per-file check; a header error short-circuits the rest."""
    if parsed.error:
        return [_issue(parsed.path, 'invalid-frontmatter', parsed.error, parsed.error_line)]

    issues = []
    if not parsed.has_header:
        issues.append(_issue(parsed.path, 'missing-frontmatter', "file does not start with a '---' header", 1))

    name = PurePosixPath(parsed.path)
    if '_posts' in name.parts[:-1] and parse_post_name(parsed.path) is None:
        issues.append(_issue(
            parsed.path, 'invalid-post-name',
            f"post file '{name.name}' is not named YYYY-MM-DD-title{name.suffix}",
            severity=Severity.warning,
        ))

    for doc in parsed.documents:
        if doc.index == 0 and doc.header is None:
            issues.extend(i for i in check_document(doc, settings) if i.code == 'unbalanced-fence')
        else:
            issues.extend(check_document(doc, settings))
    issues.extend(check_embedded(parsed, settings))
    return issues


def check_collisions(files: list[ParsedFile], settings: Settings) -> list[Issue]:
    """Report published documents that resolve to the same URL from different output files.

    Under the split policy embedded documents are resolved at the -2, -3, ...
    paths they will be written to, so copies that keep one explicit permalink
    collide with each other.
    """
    split = settings.duplicate_policy == 'split'
    by_url: dict[str, list[tuple[ContentDocument, str]]] = defaultdict(list)
    for parsed in files:
        for doc in parsed.documents:
            if not doc.published or doc.header is None:
                continue
            target = doc
            if split and doc.index:
                path = split_path(PurePosixPath(doc.path), doc.index).as_posix()
                target = doc.model_copy(update={'path': path})
            url = resolve_permalink(target, settings.permalink_style)
            if url is not None:
                by_url[url].append((doc, target.path))

    issues = []
    for url, entries in sorted(by_url.items()):
        names = list(dict.fromkeys(name for _, name in entries))
        if len(names) < 2:
            continue
        for doc, name in entries:
            others = [n for n in names if n != name]
            issues.append(_issue(
                doc.path, 'permalink-collision',
                f"permalink '{url}' is also used by {', '.join(others)}",
                doc.offset - doc.header_lines + 1,
            ))
    return issues


def validate_site(files: list[ParsedFile], settings: Settings) -> CheckReport:
    """Check every file, then the cross-file URL space."""
    issues = []
    for parsed in files:
        found = validate_file(parsed, settings)
        logger.debug("%s: %d issue(s)", parsed.path, len(found))
        issues.extend(found)
    issues.extend(check_collisions(files, settings))
    issues.sort(key=lambda i: (i.path, i.line or 0, i.code))
    return CheckReport(files=files, issues=issues, fail_on_warnings=settings.fail_on_warnings)
