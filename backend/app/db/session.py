from __future__ import annotations

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker

from app.core.config import settings


def enable_sqlite_savepoints(engine: Engine) -> None:
    """Let pysqlite honour SAVEPOINT by emitting BEGIN ourselves."""

    @event.listens_for(engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):  # pragma: no cover - driver hook
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):  # pragma: no cover - driver hook
        conn.exec_driver_sql("BEGIN")


def build_engine(database_url: str) -> Engine:
    if make_url(database_url).get_backend_name() != "sqlite":
        return create_engine(database_url, pool_pre_ping=True, future=True)

    # Request handlers may run on a different thread than the one that opened the connection.
    engine = create_engine(database_url, future=True, connect_args={"check_same_thread": False})
    enable_sqlite_savepoints(engine)
    return engine


engine = build_engine(settings.database_url)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)

__all__ = ["SessionLocal", "build_engine", "enable_sqlite_savepoints", "engine"]
