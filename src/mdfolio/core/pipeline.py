"""Pipeline step functions: load, check, migrate, and export orchestration"""

import logging
from pathlib import Path

from mdfolio.config import Settings
from mdfolio.core.export import write_manifest
from mdfolio.core.migrate import MigrationResult, migrate
from mdfolio.core.models import CheckReport, ParsedFile
from mdfolio.core.parse import discover_files, parse_file, site_root
from mdfolio.core.validate import validate_site


logger = logging.getLogger(__name__)


def load_site(path: str, settings: Settings) -> list[ParsedFile]:
    """Discover and parse every content file under path (file or directory)."""
    source = Path(path)
    if not source.exists():
        raise RuntimeError(f"No such file or directory: {path}")
    root = site_root(source)
    files = []
    for p in discover_files(source, settings.exclude, settings.include_drafts):
        try:
            files.append(parse_file(p, root))
        except (OSError, UnicodeDecodeError) as e:
            raise RuntimeError(f"Failed to read {p}: {e}") from e
    logger.info("Loaded %d file(s) from %s", len(files), path)
    return files


def run_check(path: str, settings: Settings) -> CheckReport:
    """Load path and validate every file plus the site-wide URL space."""
    return validate_site(load_site(path, settings), settings)


def run_migrate(
    path: str,
    settings: Settings,
    output_dir: Path,
    dry_run: bool = False,
    strict: bool = True,
    ) -> list[MigrationResult]:
    """Load path and copy it into output_dir in the configured target layout."""
    return migrate(load_site(path, settings), settings, output_dir, dry_run=dry_run, strict=strict)


def run_export(path: str, settings: Settings, output_dir: Path) -> tuple[Path, int]:
    """Write the manifest for path. Returns (manifest_path, document_count)."""
    files = load_site(path, settings)
    manifest = write_manifest(files, settings, output_dir)
    return manifest, sum(len(f.documents) for f in files)
