import os
from pathlib import Path

# Keep the app off the on-disk settings store before anything imports app.core.config
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from app.db.base import Base
from app.db.session import get_db
from app.models import PacketSettings  # noqa: F401
from app.schemas.log_entry import LogFileContent
from app.services.log_files import LogFileRepository, get_log_file_repository


# In-memory SQLite for tests
TEST_DATABASE_URL = "sqlite://"

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture()
def db_session():
    """Per-test SQLite in-memory session."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def logs_dir(tmp_path):
    """Directory holding a copy of the sample log plus a non-log file."""
    d = tmp_path / "logs"
    d.mkdir()
    (d / "worker.log").write_text((FIXTURES_DIR / "worker.log").read_text(encoding="utf-8"), encoding="utf-8")
    (d / "notes.txt").write_text("not a log file\n", encoding="utf-8")
    return d


@pytest.fixture()
def client(db_session, logs_dir):
    """TestClient with DB and log directory overrides."""
    from app.main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_log_file_repository] = lambda: LogFileRepository(logs_dir)
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def sample_log_file():
    return LogFileContent(
        name="worker.log",
        content=(FIXTURES_DIR / "worker.log").read_text(encoding="utf-8"),
    )
