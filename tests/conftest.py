"""
Shared test configuration.
Builds settings, a migrated temporary SQLite database and services for the tests.
These tests are executed by `pytest` locally and in CI and should remain deterministic.
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from meals_finder_api.app.core.config import Settings  # noqa: E402
from meals_finder_api.app.core.db import init_db  # noqa: E402
from meals_finder_api.app.main import create_app  # noqa: E402
from meals_finder_api.app.services.user_service import DatabaseUserService  # noqa: E402

TEST_SECRET = "test-secret-key"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        secret_key=TEST_SECRET,
        database_url=str(tmp_path / "meals_finder_test.db"),
        access_token_expire_minutes=60 * 24,
        algorithm="HS256",
        log_file="",
        use_fake_user_service=False,
    )


@pytest.fixture
def database(settings: Settings) -> str:
    init_db(settings.database_url)
    return settings.database_url


@pytest.fixture
def service(settings: Settings, database: str) -> DatabaseUserService:
    return DatabaseUserService.from_settings(settings)


@pytest.fixture
def client(settings: Settings) -> Iterator[TestClient]:
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client
