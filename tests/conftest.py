"""Shared fixtures: a throwaway SQLite store, upload directory and app."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterator

import pytest
from fastapi.testclient import TestClient

from neighborswap.application.services.auth_service import AuthService
from neighborswap.application.services.listing_service import ListingDraft, ListingService
from neighborswap.core.app_factory import create_application
from neighborswap.core.config import Settings
from neighborswap.domain.models import ImageUpload, User
from neighborswap.infrastructure.persistence.sqlite import SQLitePersistence
from neighborswap.infrastructure.storage.local import LocalImageStorage

from tests.helpers import PNG_BYTES, TEST_ROUNDS, TEST_SECRET


@pytest.fixture
def persistence(tmp_path: Path) -> Iterator[SQLitePersistence]:
    store = SQLitePersistence(tmp_path / "store.db")
    yield store
    store.close()


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture
def image_store(upload_dir: Path) -> LocalImageStorage:
    return LocalImageStorage(upload_dir)


@pytest.fixture
def auth_service(persistence: SQLitePersistence) -> AuthService:
    return AuthService(persistence, TEST_SECRET, bcrypt_rounds=TEST_ROUNDS)


@pytest.fixture
def listing_service(
    persistence: SQLitePersistence, image_store: LocalImageStorage
) -> ListingService:
    return ListingService(persistence, image_store)


@pytest.fixture
def make_user(persistence: SQLitePersistence):
    counter = {"value": 0}

    def _make(name: str = "Alice") -> User:
        counter["value"] += 1
        return persistence.create_user(
            name=name,
            email=f"user{counter['value']}@example.com",
            phone="555-0100",
            password_hash="not-a-real-hash",
        )

    return _make


@pytest.fixture
def draft():
    def _draft(**overrides: Any) -> ListingDraft:
        values = {
            "name": "Bike",
            "description": "Road bike in good shape",
            "price": "100",
            "category": "Sports",
            "condition": "Good",
        }
        values.update(overrides)
        return ListingDraft(**values)

    return _draft


@pytest.fixture
def png():
    def _png(filename: str = "photo.png", size: int = 0) -> ImageUpload:
        data = PNG_BYTES if not size else b"\x00" * size
        return ImageUpload(filename=filename, content_type="image/png", data=data)

    return _png


@pytest.fixture
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Settings:
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "app.db"))
    monkeypatch.setenv("UPLOAD_DIR", str(tmp_path / "static"))
    monkeypatch.setenv("JWT_SECRET", TEST_SECRET)
    monkeypatch.setenv("BCRYPT_ROUNDS", str(TEST_ROUNDS))
    monkeypatch.setenv("SEED_ENABLED", "true")
    for key in ("JWT_ALGORITHM", "JWT_EXPIRATION_HOURS", "MAX_UPLOAD_BYTES", "MAX_IMAGES_PER_LISTING", "LISTING_RESULT_LIMIT"):
        monkeypatch.delenv(key, raising=False)
    return Settings()


@pytest.fixture
def client(settings: Settings) -> Iterator[TestClient]:
    app = create_application(settings)
    with TestClient(app) as test_client:
        yield test_client
