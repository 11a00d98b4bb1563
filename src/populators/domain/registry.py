"""Explicit mapping from record type to the rule set that populates it."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from populators.domain.engine import PopulationEngine
from populators.domain.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from populators.domain.failures import FailureReport
    from populators.domain.record import Phase, Record
    from populators.domain.ruleset import RuleSet


@dataclass(slots=True)
class RuleSetRegistry:
    """Registry built once at startup and resolved per batch."""

    rule_sets: dict[str, RuleSet] = field(default_factory=dict[str, "RuleSet"])

    def register(self, record_type: str, rule_set: RuleSet) -> RuleSetRegistry:
        if record_type in self.rule_sets:
            raise ConfigurationError(f"A rule set is already registered for {record_type!r}")
        self.rule_sets[record_type] = rule_set
        return self

    def resolve(self, record_type: str) -> RuleSet:
        try:
            return self.rule_sets[record_type]
        except KeyError:
            raise ConfigurationError(f"No rule set registered for {record_type!r}") from None

    def record_types(self) -> Iterator[str]:
        return iter(sorted(self.rule_sets))

    def __contains__(self, record_type: object) -> bool:
        return record_type in self.rule_sets

    def run(
        self,
        record_type: str,
        phase: Phase,
        new_records: Sequence[Record],
        prior_records: Sequence[Record] | None = None,
        *,
        engine: PopulationEngine | None = None,
    ) -> list[FailureReport]:
        """Resolve the rule set for ``record_type`` and run one batch through it."""

        rule_set = self.resolve(record_type)
        active_engine = engine or PopulationEngine()
        return active_engine.run(phase, new_records, prior_records, rule_set=rule_set)
