"""Configuration error definitions."""

from __future__ import annotations

from populators.domain.errors import ConfigurationError


class MissingConfigurationError(ConfigurationError):
    """Raised when a required setting is absent or blank."""


__all__ = ["ConfigurationError", "MissingConfigurationError"]
