"""Error taxonomy for the population engine.

``ConfigurationError`` signals a wiring defect and aborts the batch. Everything a
rule raises is isolated by the engine; ``RuleFailure`` and ``ProviderFailure``
give those isolated errors a name.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Hashable


class ConfigurationError(RuntimeError):
    """Raised when rules, contexts or batches are wired incorrectly."""


class RuleFailure(Exception):  # noqa: N818
    """An error raised by a rule's ``qualify`` or ``apply`` step."""

    def __init__(self, rule: str, stage: str, cause: BaseException) -> None:
        super().__init__(f"{rule} failed during {stage}: {cause}")
        self.rule = rule
        self.stage = stage
        self.cause = cause


class ProviderFailure(Exception):  # noqa: N818
    """A data provider failed; raised for every request of the poisoned key."""

    def __init__(self, key: Hashable, cause: BaseException) -> None:
        super().__init__(f"Data provider for {key!r} failed: {type(cause).__name__}: {cause}")
        self.key = key
        self.cause = cause
