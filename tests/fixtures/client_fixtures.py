"""API client fixtures for tests."""
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from filestore_api.config.settings import Settings
from filestore_api.main import create_app


@pytest.fixture
def settings(storage_root: Path) -> Settings:
    return Settings(storage_dir=str(storage_root), count_workers=2, max_page_size=50)


@pytest.fixture
def client(settings: Settings):
    app = create_app(settings=settings)
    with TestClient(app) as client:
        yield client
