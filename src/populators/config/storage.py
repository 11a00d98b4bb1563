"""Database settings for the SQLAlchemy-backed data providers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import env_flag, require_env_var

DATABASE_URI_VAR: Final[str] = "POPULATORS_DATABASE_URI"
SQL_ECHO_VAR: Final[str] = "POPULATORS_SQL_ECHO"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str
    echo: bool = False


def get_database_config() -> DatabaseConfig:
    return DatabaseConfig(uri=require_env_var(DATABASE_URI_VAR), echo=env_flag(SQL_ECHO_VAR))
