"""Factory exports for tests."""

from .base import SQLAlchemyFactory, set_factory_session
from .admin import AdminUserFactory

__all__ = [
    "SQLAlchemyFactory",
    "set_factory_session",
    "AdminUserFactory",
]
