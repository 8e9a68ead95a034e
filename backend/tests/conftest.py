from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from stager.api.deps import get_db, get_settings
from stager.core.config import Settings
from stager.core.db import init_db
from stager.main import app
from tests.utils.workspace import write_workspace


@pytest.fixture
def base_path(tmp_path: Path) -> Path:
    return write_workspace(tmp_path / "base")


@pytest.fixture
def test_settings(base_path: Path, tmp_path: Path) -> Settings:
    return Settings(
        BASE_PATH=base_path,
        ALT_BASE_PATH=tmp_path / "alt",
        DOCUMENT_ROOT=str(tmp_path / "docroot"),
        ENVIRONMENT="local",
        PUBLIC_HOST="files.example.com",
        SQL_ENGINE="sqlite",
        SQL_BATCH_TIMEOUT=30,
    )


@pytest.fixture
def client(test_settings: Settings) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_settings] = lambda: test_settings
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    """In-memory registry database wired into the app."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)

    def _get_db() -> Generator[Session, None, None]:
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    with Session(engine) as session:
        yield session
    app.dependency_overrides.pop(get_db, None)
