"""Storage fixtures for tests. Every test gets its own empty storage root."""
import io
from pathlib import Path

import pytest

from filestore_api.storage import CountEngine, RegexListingEngine, StorageEngine


@pytest.fixture
def storage_root(tmp_path: Path) -> Path:
    root = tmp_path / "data-storage"
    root.mkdir()
    return root


@pytest.fixture
def storage(storage_root: Path) -> StorageEngine:
    return StorageEngine(storage_root)


@pytest.fixture
def listing(storage_root: Path) -> RegexListingEngine:
    return RegexListingEngine(storage_root, max_workers=4)


@pytest.fixture
def counter(storage_root: Path) -> CountEngine:
    return CountEngine(storage_root)


@pytest.fixture
def store_files(storage: StorageEngine):
    """Save each name with its own name as content."""
    def _store(*names: str) -> None:
        for name in names:
            storage.save(name, io.BytesIO(name.encode()))
    return _store
