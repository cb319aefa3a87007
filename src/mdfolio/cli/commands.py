"""CLI command implementations"""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer
import yaml

from mdfolio.config import CONFIG_FILE, Settings, dump_defaults, load_config
from mdfolio.core.extract.blocks import code_blocks
from mdfolio.core.migrate import MigrationError
from mdfolio.core.permalink import resolve_permalink
from mdfolio.core.pipeline import load_site, run_check, run_export, run_migrate


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail("Invalid configuration", e)


def _path(path: Optional[str], settings: Settings) -> str:
    return path if path is not None else settings.content_dir


def check_cmd(
    path: Annotated[Optional[str], typer.Argument(help="Site root or single file (default: content_dir)")] = None,
    fail_on_warnings: Annotated[bool, typer.Option("--fail-on-warnings", help="Exit 1 on warnings too")] = False,
    style: Annotated[Optional[str], typer.Option("--permalink-style", help="date, pretty, ordinal, none or /template")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print issues as JSON")] = False,
    ):
    """Validate front matter, code fences, embedded documents, and permalink collisions."""
    settings = _settings(overrides={"fail_on_warnings": fail_on_warnings or None, "permalink_style": style})
    try:
        report = run_check(_path(path, settings), settings)
    except RuntimeError as e:
        _fail(str(e))

    if as_json:
        typer.echo(json.dumps([i.model_dump(mode="json") for i in report.issues], indent=2))
    else:
        for issue in report.issues:
            typer.echo(issue.format())
        typer.echo(
            f"Checked {len(report.files)} file(s), {len(report.documents)} document(s): "
            f"{len(report.errors)} error(s), {len(report.warnings)} warning(s)"
        )
    if not report.ok:
        raise typer.Exit(1)


def list_cmd(
    path: Annotated[Optional[str], typer.Argument(help="Site root (default: content_dir)")] = None,
    style: Annotated[Optional[str], typer.Option("--permalink-style", help="date, pretty, ordinal, none or /template")] = None,
    ):
    """List published documents with their resolved URL, layout, and title."""
    settings = _settings(overrides={"permalink_style": style})
    try:
        files = load_site(_path(path, settings), settings)
    except RuntimeError as e:
        _fail(str(e))

    docs = [d for f in files for d in f.documents if d.published and d.header is not None]
    if not docs:
        typer.echo("No documents found.")
        raise typer.Exit(1)
    for doc in docs:
        url = resolve_permalink(doc, settings.permalink_style) or "(no date)"
        typer.echo(f"{url}\t{doc.layout or '-'}\t{doc.title or ''}")


def show_cmd(
    file: Annotated[str, typer.Argument(help="Markdown file to inspect")],
    ):
    """Print a file's front matter and a summary of its documents and code listings."""
    settings = _settings()
    if Path(file).is_dir():
        _fail(f"Not a file: {file}; show inspects one markdown file, use list for a directory")
    try:
        files = load_site(file, settings)
    except RuntimeError as e:
        _fail(str(e))
    if not files:
        _fail(f"Not a markdown file: {file}")

    parsed = files[0]
    if parsed.error:
        _fail(f"Cannot parse {parsed.path}", ValueError(parsed.error))
    for doc in parsed.documents:
        if doc.index:
            typer.echo(f"# embedded document #{doc.index + 1}")
        typer.echo(yaml.safe_dump(doc.frontmatter, sort_keys=False, allow_unicode=True).rstrip())
        blocks = code_blocks(doc, settings.parser_config)
        languages = sorted({b.language for b in blocks if b.language})
        typer.echo(
            f"url: {resolve_permalink(doc, settings.permalink_style)}  "
            f"code blocks: {len(blocks)}" + (f" ({', '.join(languages)})" if languages else "")
        )
    typer.echo(f"{len(parsed.documents)} document(s) in {parsed.path}")


def migrate_cmd(
    path: Annotated[Optional[str], typer.Argument(help="Site root (default: content_dir)")] = None,
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    target: Annotated[Optional[str], typer.Option("--target", help="jekyll or hugo")] = None,
    split: Annotated[bool, typer.Option("--split-duplicates", help="Write embedded documents to their own files")] = False,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Report without writing")] = False,
    strict: Annotated[bool, typer.Option("--strict/--no-strict", help="Refuse to migrate when check finds errors")] = True,
    ):
    """Copy content into the target generator's layout."""
    settings = _settings(overrides={
        "output_dir": out, "target": target,
        "duplicate_policy": "split" if split else None,
    })
    output_dir = Path(settings.output_dir)
    try:
        results = run_migrate(_path(path, settings), settings, output_dir, dry_run=dry_run, strict=strict)
    except MigrationError as e:
        for issue in e.issues:
            typer.echo(issue.format(), err=True)
        _fail("Migration refused", e)
    except RuntimeError as e:
        _fail(str(e))

    for r in results:
        if r.status == "skipped":
            typer.echo(f"  skipped: {r.source} ({r.reason})")
        else:
            c = r.changes
            typer.echo(f"  {r.status}: {r.source} -> {r.destination} (+{c['added']} -{c['deleted']})")
    written = sum(1 for r in results if r.status != "skipped")
    verb = "Would write" if dry_run else "Wrote"
    typer.echo(f"{verb} {written} document(s) to {output_dir}/ ({settings.target})")


def export_cmd(
    path: Annotated[Optional[str], typer.Argument(help="Site root (default: content_dir)")] = None,
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    style: Annotated[Optional[str], typer.Option("--permalink-style", help="date, pretty, ordinal, none or /template")] = None,
    ):
    """Write manifest.json describing every document, its URL, and its code listings."""
    settings = _settings(overrides={"output_dir": out, "permalink_style": style})
    try:
        manifest, count = run_export(_path(path, settings), settings, Path(settings.output_dir))
    except RuntimeError as e:
        _fail(str(e))
    typer.echo(f"Exported {count} document(s) to {manifest}")


def init_cmd(
    force: Annotated[bool, typer.Option("--force", help="Overwrite an existing config.yaml")] = False,
    ):
    """Write a config.yaml populated with the default settings."""
    target = Path(CONFIG_FILE)
    if target.exists() and not force:
        _fail(f"{CONFIG_FILE} already exists; use --force to overwrite")
    target.write_text(dump_defaults(), encoding="utf-8")
    typer.echo(f"Wrote {target}")
