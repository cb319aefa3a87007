"""Copy content documents into a target static-site generator's layout"""

import logging
from pathlib import Path, PurePosixPath
from typing import Callable, Optional

from pydantic import BaseModel

from mdfolio.config import Settings
from mdfolio.core.models import ContentDocument, Issue, ParsedFile
from mdfolio.core.parse import render_header, serialize_document, split_path
from mdfolio.core.permalink import parse_post_name, post_title
from mdfolio.core.utils.diff import diff_summary
from mdfolio.core.validate import validate_site


logger = logging.getLogger(__name__)


class MigrationError(RuntimeError):
    """Migration refused because the source content has blocking issues."""

    def __init__(self, message: str, issues: list[Issue] = None):
        super().__init__(message)
        self.issues = issues or []


class MigrationResult(BaseModel):
    source: str
    index: int = 0
    destination: Optional[str] = None
    status: str                     # copied, converted, split, skipped
    changes: dict[str, int] = {}    # line diff summary: added, deleted, unchanged
    reason: Optional[str] = None


def jekyll_target(doc: ContentDocument) -> tuple[str, str]:
    """Same relative path, same bytes."""
    return split_path(PurePosixPath(doc.path), doc.index).as_posix(), serialize_document(doc)


def hugo_target(doc: ContentDocument) -> tuple[str, str]:
    """content/ tree: posts flattened under content/posts, permalink renamed to url."""
    src = PurePosixPath(doc.path)
    fm = dict(doc.frontmatter)
    if doc.is_post:
        parsed = parse_post_name(doc.path)
        if 'date' not in fm and parsed:
            fm['date'] = parsed[0]
        dest = PurePosixPath('content', 'posts', f"{post_title(doc)}.md")
    else:
        name = '_index.md' if src.stem == 'index' else f"{src.stem}.md"
        dest = PurePosixPath('content', *src.parts[:-1], name)
    if 'permalink' in fm:
        fm['url'] = fm.pop('permalink')

    header = render_header(fm) if fm or doc.header is not None else ''
    return split_path(dest, doc.index).as_posix(), header + doc.body


TARGETS: dict[str, Callable[[ContentDocument], tuple[str, str]]] = {
    'jekyll': jekyll_target,
    'hugo':   hugo_target,
}


def migrate(
    files: list[ParsedFile],
    settings: Settings,
    output_dir: Path,
    dry_run: bool = False,
    strict: bool = True,
    ) -> list[MigrationResult]:
    """Write each document to output_dir in the configured target layout.

    strict validates first and raises MigrationError before writing anything
    if errors exist. Files holding embedded documents are skipped under the
    'reject' duplicate policy and written one file per document under 'split'.
    """
    if strict:
        report = validate_site(files, settings)
        if report.errors:
            raise MigrationError(
                f"{len(report.errors)} error(s) in source content; fix them or rerun without strict mode",
                report.errors,
            )

    target = TARGETS[settings.target]
    results: list[MigrationResult] = []
    written: dict[str, str] = {}

    for parsed in files:
        if parsed.error:
            logger.warning("Skipping %s: %s", parsed.path, parsed.error)
            results.append(MigrationResult(source=parsed.path, status='skipped', reason=parsed.error))
            continue

        embedded = len(parsed.documents) > 1
        if embedded and settings.duplicate_policy == 'reject':
            reason = f"{len(parsed.documents)} documents in one file; resolve them or use the split policy"
            logger.warning("Skipping %s: %s", parsed.path, reason)
            results.append(MigrationResult(source=parsed.path, status='skipped', reason=reason))
            continue

        for doc in parsed.documents:
            dest, text = target(doc)
            if dest in written:
                reason = f"{dest} was already written from {written[dest]}"
                logger.warning("Skipping %s: %s", doc.path, reason)
                results.append(MigrationResult(source=doc.path, index=doc.index, status='skipped', reason=reason))
                continue
            written[dest] = doc.path

            original = serialize_document(doc)
            if embedded:
                status = 'split'
            else:
                status = 'copied' if text == original else 'converted'

            if not dry_run:
                out_file = output_dir / dest
                out_file.parent.mkdir(parents=True, exist_ok=True)
                out_file.write_text(text, encoding='utf-8', newline='')
                logger.info("Wrote %s", out_file)
            results.append(MigrationResult(
                source=doc.path,
                index=doc.index,
                destination=dest,
                status=status,
                changes=diff_summary(original, text),
            ))
    return results
