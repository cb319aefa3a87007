"""Export pipeline: build and write the site manifest JSON"""

import json
from datetime import date
from pathlib import Path
from typing import Any

from mdfolio.config import Settings
from mdfolio.core.extract.blocks import code_blocks, heading_titles
from mdfolio.core.models import ContentDocument, ParsedFile
from mdfolio.core.parse import serialize_document
from mdfolio.core.permalink import post_date, resolve_permalink
from mdfolio.core.utils.hashing import sha256


MANIFEST_FILE = "manifest.json"


def build_entry(doc: ContentDocument, settings: Settings) -> dict[str, Any]:
    """Build one manifest entry: identity, routing, and a summary of the body."""
    when = post_date(doc) if doc.is_post else None
    return {
        "path": doc.path,
        "index": doc.index,
        "layout": doc.layout,
        "title": doc.title,
        "permalink": resolve_permalink(doc, settings.permalink_style),
        "explicit_permalink": doc.permalink,
        "date": when.isoformat() if isinstance(when, date) else None,
        "published": doc.published,
        "hash": sha256(serialize_document(doc)),
        "headings": heading_titles(doc, settings.parser_config),
        "code_blocks": [
            b.model_dump() for b in code_blocks(doc, settings.parser_config)
        ],
    }


def build_manifest(files: list[ParsedFile], settings: Settings) -> dict[str, Any]:
    """Build the manifest dict: generator settings, documents, and unreadable files.

    Files whose header failed to parse are listed under 'skipped' with the
    parse error so the manifest always accounts for every discovered file.
    """
    return {
        "permalink_style": settings.permalink_style,
        "documents": [
            build_entry(doc, settings)
            for parsed in files
            for doc in parsed.documents
        ],
        "skipped": [
            {"path": parsed.path, "error": parsed.error}
            for parsed in files
            if parsed.error
        ],
    }


def write_manifest(files: list[ParsedFile], settings: Settings, output_dir: Path) -> Path:
    """Write manifest.json into output_dir and return its path."""
    output_dir.mkdir(parents=True, exist_ok=True)
    out_file = output_dir / MANIFEST_FILE
    out_file.write_text(
        json.dumps(build_manifest(files, settings), indent=2, ensure_ascii=False, default=str),
        encoding='utf-8',
    )
    return out_file
