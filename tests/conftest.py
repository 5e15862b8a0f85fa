from __future__ import annotations

from pathlib import Path
import sys


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture
def store_root(tmp_path: Path) -> Path:
    """
    Storage root inside the pytest temp dir. Not created yet: the store does that.
    """
    root = tmp_path / "easydb_store"
    assert not root.exists()
    return root


@pytest.fixture
def settings(store_root: Path):
    from easydb.settings import make_settings

    return make_settings(store_root, ".data")


@pytest.fixture
def store(settings):
    from easydb.disk_store import DiskDocumentStore

    db = DiskDocumentStore(settings)
    yield db
    db.destroy()


@pytest.fixture
def bare_store(store_root: Path):
    """Store with no data-file extension, so leaf files and directories can collide."""
    from easydb.disk_store import DiskDocumentStore
    from easydb.settings import make_settings

    db = DiskDocumentStore(make_settings(store_root, ""))
    yield db
    db.destroy()
