"""Root test configuration: fixture site location and runtime artifact cleanup"""

import os
import shutil
from pathlib import Path

import pytest


_PROJECT_ROOT = Path(__file__).parent.parent
FIXTURE_SITE = Path(__file__).parent / "fixtures" / "site"

_CLEANUP_FILES = ["config.yaml"]
_CLEANUP_DIRS = ["dist"]


@pytest.fixture(scope="session", autouse=True)
def cleanup_artifacts():
    """Remove config and output directories created during the test session."""
    existing = {name for name in _CLEANUP_FILES + _CLEANUP_DIRS if (_PROJECT_ROOT / name).exists()}
    yield
    for name in _CLEANUP_FILES:
        p = _PROJECT_ROOT / name
        if name not in existing and p.exists():
            p.unlink()
    for name in _CLEANUP_DIRS:
        p = _PROJECT_ROOT / name
        if name not in existing and p.exists():
            shutil.rmtree(p)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Keep MDFOLIO_* variables from the developer's shell out of the tests."""
    for name in list(os.environ):
        if name.startswith("MDFOLIO_"):
            monkeypatch.delenv(name)


@pytest.fixture(name="site_copy")
def site_copy_fixture(tmp_path):
    """A writable copy of the fixture site."""
    dest = tmp_path / "site"
    shutil.copytree(FIXTURE_SITE, dest)
    return dest
