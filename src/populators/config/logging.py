"""Logging setup shared by the entry points."""

from __future__ import annotations

import logging
from typing import Final

from .env import optional_env_var
from .errors import ConfigurationError

LOG_LEVEL_VAR: Final[str] = "POPULATORS_LOG_LEVEL"


def resolve_log_level(default: int = logging.INFO) -> int:
    """Read ``POPULATORS_LOG_LEVEL`` as a level name (``DEBUG``) or number."""

    value = optional_env_var(LOG_LEVEL_VAR)
    if value is None:
        return default
    if value.isdigit():
        return int(value)
    level = logging.getLevelNamesMapping().get(value.upper())
    if level is None:
        raise ConfigurationError(f"{LOG_LEVEL_VAR} is not a logging level: {value!r}")
    return level


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Initialise the root logger once with a terse CLI format.

    ``level`` defaults to ``resolve_log_level()``. Pass ``force=True`` to
    reconfigure during tests.
    """

    logging.basicConfig(
        level=resolve_log_level() if level is None else level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
