"""Ordered, immutable rule lists per phase (a populators handler)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from populators.domain.errors import ConfigurationError
from populators.domain.record import Phase
from populators.domain.rules import rule_name, supports

if TYPE_CHECKING:
    from collections.abc import Sequence

    from populators.domain.context import ContextFactory
    from populators.domain.rules import CreatePopulator, UpdatePopulator


@dataclass(frozen=True, slots=True)
class RuleSet:
    """Rules to run for each phase plus the data context to build per batch.

    List order is the only ordering guarantee the engine makes. A rule set holds
    no batch state and is reused for every batch of its record type.
    """

    create: Sequence[CreatePopulator] = ()
    update: Sequence[UpdatePopulator] = ()
    context_factory: ContextFactory | None = None
    name: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "create", tuple(self.create))
        object.__setattr__(self, "update", tuple(self.update))
        _require_support(self.create, Phase.CREATE)
        _require_support(self.update, Phase.UPDATE)

    def rules_for(self, phase: Phase) -> tuple[CreatePopulator, ...] | tuple[UpdatePopulator, ...]:
        if Phase(phase) is Phase.CREATE:
            return tuple(self.create)
        return tuple(self.update)

    def context_type(self) -> ContextFactory | None:
        return self.context_factory


def _require_support(rules: Sequence[object], phase: Phase) -> None:
    unsupported = [rule_name(rule) for rule in rules if not supports(rule, phase)]
    if unsupported:
        raise ConfigurationError(
            f"Rules registered for {phase} do not implement it: {', '.join(unsupported)}"
        )
