from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from objstore.common.config import Settings, get_settings
from objstore.infra.storage import StorageRootResolver
from objstore.main import create_app


@pytest.fixture(autouse=True)
def reset_settings_cache():
    get_settings.cache_clear()  # type: ignore[attr-defined]
    yield
    get_settings.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture()
def storage_root(tmp_path: Path) -> Path:
    root = tmp_path / "storage"
    root.mkdir()
    return root


@pytest.fixture()
def resolver(storage_root: Path) -> StorageRootResolver:
    return StorageRootResolver(storage_root)


@pytest.fixture()
def settings(storage_root: Path) -> Settings:
    return Settings(STORAGE_DIR=str(storage_root), ENABLE_METRICS=False)


@pytest.fixture()
def client(settings: Settings):
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client
