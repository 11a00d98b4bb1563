"""Record shape handled by the engine plus the field predicates rules rely on."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


class Phase(StrEnum):
    """Lifecycle moment a batch is processed in."""

    CREATE = "create"
    UPDATE = "update"


@dataclass(slots=True)
class Record:
    """A caller-owned record about to be created or updated.

    ``id`` is ``None`` for records that have not been inserted yet. Rules mutate
    ``fields`` in place; the engine never copies a record.
    """

    fields: dict[str, object] = field(default_factory=dict[str, object])
    id: str | None = None
    record_type: str | None = None

    def get(self, name: str, default: object = None) -> object:
        return self.fields.get(name, default)

    def set(self, name: str, value: object) -> None:
        self.fields[name] = value

    def update(self, values: Mapping[str, object]) -> None:
        self.fields.update(values)

    def copy(self) -> Record:
        """Return a shallow snapshot, e.g. to serve as a prior state."""

        return Record(fields=dict(self.fields), id=self.id, record_type=self.record_type)

    def __getitem__(self, name: str) -> object:
        return self.fields[name]

    def __setitem__(self, name: str, value: object) -> None:
        self.fields[name] = value

    def __contains__(self, name: object) -> bool:
        return name in self.fields


def field_is_null(record: Record, name: str) -> bool:
    """True when ``name`` is missing from ``record`` or holds ``None``."""

    return record.get(name) is None


def field_is_not_null(record: Record, name: str) -> bool:
    return not field_is_null(record, name)


def field_changed(new: Record, prior: Record, name: str) -> bool:
    """True iff ``name`` holds a different value in ``new`` than in ``prior``.

    Only meaningful for updates; a create has no prior state to compare with.
    """

    return new.get(name) != prior.get(name)


def any_field_changed(new: Record, prior: Record, names: Iterable[str]) -> bool:
    return any(field_changed(new, prior, name) for name in names)
