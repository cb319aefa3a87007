"""Unit tests for core/export.py"""

import json

from mdfolio.core.export import MANIFEST_FILE, build_entry, build_manifest, write_manifest
from mdfolio.core.parse import parse_file, split_documents


def test_build_entry_post(settings, post_md):
    doc = split_documents(post_md, "_posts/2016-01-10-swift-optionals.md")[0]
    entry = build_entry(doc, settings)
    assert entry["permalink"] == "/2016/01/10/swift-optionals.html"
    assert entry["explicit_permalink"] is None
    assert entry["date"] == "2016-01-10"
    assert entry["layout"] == "post"
    assert entry["headings"] == ["Unwrapping"]
    assert [b["language"] for b in entry["code_blocks"]] == ["swift", "swift"]
    assert len(entry["hash"]) == 64


def test_build_entry_page(settings, about_md):
    doc = split_documents(about_md, "about.md")[0]
    entry = build_entry(doc, settings)
    assert entry["permalink"] == "/about/"
    assert entry["explicit_permalink"] == "/about/"
    assert entry["date"] is None
    assert entry["published"] is True


def test_build_manifest_lists_skipped_files(write_site, settings, about_md):
    root = write_site({"about.md": about_md, "bad.md": "---\nlayout: page\n"})
    files = [parse_file(root / "about.md", root), parse_file(root / "bad.md", root)]
    manifest = build_manifest(files, settings)
    assert [d["path"] for d in manifest["documents"]] == ["about.md"]
    assert manifest["skipped"][0]["path"] == "bad.md"
    assert manifest["permalink_style"] == "date"


def test_write_manifest(write_site, settings, about_md, duplicated_md, tmp_path):
    """Embedded documents appear as separate entries with their index."""
    root = write_site({"about.md": about_md, "_posts/2016-02-03-custom-operators.md": duplicated_md})
    files = [
        parse_file(root / "_posts/2016-02-03-custom-operators.md", root),
        parse_file(root / "about.md", root),
    ]
    out = write_manifest(files, settings, tmp_path / "dist")
    assert out.name == MANIFEST_FILE
    data = json.loads(out.read_text(encoding="utf-8"))
    assert [(d["path"], d["index"]) for d in data["documents"]] == [
        ("_posts/2016-02-03-custom-operators.md", 0),
        ("_posts/2016-02-03-custom-operators.md", 1),
        ("about.md", 0),
    ]
