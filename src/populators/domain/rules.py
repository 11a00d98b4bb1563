"""Populator contracts.

A populator supports creates by implementing the ``*_on_create`` pair and
updates by implementing the ``*_on_update`` pair; one class may do both.
``qualifies_*`` must not mutate the record. ``apply_*`` mutates the record in
place or returns a mapping of field values for the engine to merge.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from populators.domain.record import Phase

if TYPE_CHECKING:
    from collections.abc import Mapping

    from populators.domain.context import DataContext
    from populators.domain.record import Record


@runtime_checkable
class CreatePopulator(Protocol):
    def qualifies_on_create(self, record: Record, context: DataContext) -> bool: ...

    def apply_on_create(
        self, record: Record, context: DataContext
    ) -> Mapping[str, object] | None: ...


@runtime_checkable
class UpdatePopulator(Protocol):
    def qualifies_on_update(self, record: Record, prior: Record, context: DataContext) -> bool: ...

    def apply_on_update(
        self, record: Record, prior: Record, context: DataContext
    ) -> Mapping[str, object] | None: ...


type Populator = CreatePopulator | UpdatePopulator


def supports(rule: object, phase: Phase) -> bool:
    """Whether ``rule`` implements the operation pair for ``phase``."""

    if Phase(phase) is Phase.CREATE:
        return isinstance(rule, CreatePopulator)
    return isinstance(rule, UpdatePopulator)


def rule_name(rule: object) -> str:
    """Identity used for a rule in failure reports and logs."""

    name = getattr(rule, "name", None)
    if isinstance(name, str) and name:
        return name
    return type(rule).__name__
