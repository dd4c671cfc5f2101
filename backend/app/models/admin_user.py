from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Boolean, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, BigId, Timestamp


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AdminUser(Base):
    """Administrator account; credentials are managed by the auth service."""

    __tablename__ = "admin_users"
    __table_args__ = (
        UniqueConstraint("user_id", name="uq_admin_users_user_id"),
        Index("idx_admin_users_is_active", "is_active"),
    )

    id: Mapped[int] = mapped_column(BigId, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64))
    display_name: Mapped[str | None] = mapped_column(String(191), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, server_default="1")
    created_at: Mapped[datetime] = mapped_column(Timestamp, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(Timestamp, default=utcnow, onupdate=utcnow)


__all__ = ["AdminUser"]
