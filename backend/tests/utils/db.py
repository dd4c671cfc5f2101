from __future__ import annotations

from pathlib import Path

from alembic import command
from alembic.config import Config


def upgrade_schema(database_url: str) -> None:
    alembic_ini = Path(__file__).resolve().parents[2] / "alembic.ini"
    cfg = Config(str(alembic_ini))
    cfg.set_main_option("sqlalchemy.url", database_url)
    # Keep pytest's logging configuration intact.
    cfg.attributes["configure_logger"] = False
    command.upgrade(cfg, "head")


__all__ = ["upgrade_schema"]
