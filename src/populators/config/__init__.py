"""Application configuration helpers."""

from __future__ import annotations

from .env import env_flag, optional_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .logging import configure_logging, resolve_log_level
from .storage import DatabaseConfig, get_database_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "configure_logging",
    "env_flag",
    "get_database_config",
    "optional_env_var",
    "require_env_var",
    "require_env_vars",
    "resolve_log_level",
]
