"""Failure reports produced for isolated rule errors."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from populators.domain.record import Phase


class Stage(StrEnum):
    QUALIFY = "qualify"
    APPLY = "apply"


@dataclass(frozen=True, slots=True, kw_only=True)
class FailureReport:
    """One rule failing for one record. The engine keeps no reference to it."""

    record_id: str | None
    rule: str
    error: BaseException
    phase: Phase
    stage: Stage
    index: int

    @property
    def detail(self) -> str:
        return f"{type(self.error).__name__}: {self.error}"


class FailureSink(Protocol):
    """Receives each failure report as the engine produces it."""

    def __call__(self, report: FailureReport) -> None: ...
