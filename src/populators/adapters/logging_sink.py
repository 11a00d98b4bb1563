"""Failure sink that writes reports to the standard logging system."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from populators.domain.failures import FailureReport


@dataclass(slots=True)
class LoggingFailureSink:
    """Log every isolated rule failure and keep a count per rule."""

    logger: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))
    level: int = logging.WARNING
    counts: dict[str, int] = field(default_factory=dict[str, int])

    def __call__(self, report: FailureReport) -> None:
        self.counts[report.rule] = self.counts.get(report.rule, 0) + 1
        self.logger.log(
            self.level,
            "Populator %s failed during %s %s for record %s (index %d): %s",
            report.rule,
            report.phase,
            report.stage,
            report.record_id or "<new>",
            report.index,
            report.detail,
            exc_info=report.error,
        )
