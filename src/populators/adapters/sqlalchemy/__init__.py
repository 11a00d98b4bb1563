"""SQLAlchemy adapter package for populators."""

from __future__ import annotations

from .engine import StartupError, session_factory, shutdown, startup
from .provider import SqlAlchemyLookupProvider

__all__ = [
    "SqlAlchemyLookupProvider",
    "StartupError",
    "session_factory",
    "shutdown",
    "startup",
]
