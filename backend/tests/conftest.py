import os
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import Engine
from sqlalchemy.orm import Session

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from app.db.session import build_engine  # noqa: E402
from app.deps import admin as admin_deps  # noqa: E402
from app.main import app  # noqa: E402
from tests.factories import set_factory_session  # noqa: E402
from tests.utils.db import upgrade_schema  # noqa: E402


@pytest.fixture(scope="session")
def database_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    # Only an explicit test database is used; otherwise fall back to a throwaway SQLite file.
    url = (os.environ.get("TEST_DATABASE_URL") or "").strip()
    if url:
        return url
    return f"sqlite:///{tmp_path_factory.mktemp('db') / 'questionnaires.sqlite3'}"


@pytest.fixture(scope="session")
def prepare_db(database_url: str) -> Iterator[Engine]:
    upgrade_schema(database_url)
    engine = build_engine(database_url)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def db_session(prepare_db: Engine) -> Iterator[Session]:
    connection = prepare_db.connect()
    transaction = connection.begin()
    session = Session(
        bind=connection,
        autoflush=False,
        join_transaction_mode="create_savepoint",
    )
    set_factory_session(session)

    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()
        set_factory_session(None)


@pytest.fixture
def client(db_session: Session) -> Iterator[TestClient]:
    def override_get_db() -> Iterator[Session]:
        yield db_session

    app.dependency_overrides[admin_deps.get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(admin_deps.get_db, None)

