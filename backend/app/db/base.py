from __future__ import annotations

from sqlalchemy import BigInteger, DateTime, Integer, MetaData, String
from sqlalchemy.dialects import mysql
from sqlalchemy.orm import DeclarativeBase

NAMING_CONVENTION = {
    "ix": "idx_%(table_name)s_%(column_0_N_name)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s",
    "pk": "pk_%(table_name)s",
}

# Unsigned BIGINT on MySQL; SQLite only autoincrements INTEGER primary keys.
BigId = BigInteger().with_variant(mysql.BIGINT(unsigned=True), "mysql").with_variant(Integer(), "sqlite")
Timestamp = DateTime().with_variant(mysql.DATETIME(fsp=3), "mysql")

# Natural-key titles compare byte-for-byte on MySQL, matching the importer.
TITLE_MAX_LENGTH = 255
Title = String(TITLE_MAX_LENGTH).with_variant(mysql.VARCHAR(TITLE_MAX_LENGTH, collation="utf8mb4_bin"), "mysql")

# MySQL TEXT holds at most 65535 bytes; Integer columns are signed 32-bit.
TEXT_MAX_BYTES = 65535
INT_MIN = -(2**31)
INT_MAX = 2**31 - 1


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


__all__ = [
    "Base",
    "BigId",
    "INT_MAX",
    "INT_MIN",
    "TEXT_MAX_BYTES",
    "TITLE_MAX_LENGTH",
    "Timestamp",
    "Title",
]
