"""Data providers that look up related rows with SQLAlchemy Core."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import select

from .engine import session_factory as default_session_factory

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable, Mapping, Sequence

    from sqlalchemy import Table
    from sqlalchemy.orm import Session

    from populators.domain.record import Record

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SqlAlchemyLookupProvider:
    """Fetch rows of ``table`` referenced by ``source_field`` across a batch.

    The distinct non-null values of ``source_field`` on the new records (and on
    the prior records when ``include_prior`` is set) are matched against
    ``key_column`` in a single ``IN`` query. The result maps each matched key to
    the row as a plain mapping, so rules never hold on to a session.
    """

    table: Table
    key_column: str
    source_field: str
    include_prior: bool = False
    session_factory: Callable[[], Session] | None = None

    def __call__(
        self,
        new_records: Sequence[Record],
        prior_records: Sequence[Record],
        /,
    ) -> Mapping[Hashable, object]:
        keys = self._collect_keys(new_records, prior_records)
        if not keys:
            return {}

        column = self.table.c[self.key_column]
        stmt = select(self.table).where(column.in_(sorted(keys, key=repr)))
        factory = self.session_factory or default_session_factory()
        with factory() as session:
            rows = session.execute(stmt).mappings().all()

        log.debug(
            "Looked up %d of %d %s row(s) by %s",
            len(rows),
            len(keys),
            self.table.name,
            self.key_column,
        )
        return {row[self.key_column]: dict(row) for row in rows}

    def _collect_keys(
        self,
        new_records: Sequence[Record],
        prior_records: Sequence[Record],
    ) -> set[Hashable]:
        records = [*new_records, *prior_records] if self.include_prior else list(new_records)
        keys: set[Hashable] = set()
        for record in records:
            value = record.get(self.source_field)
            if value is not None:
                keys.add(value)  # type: ignore[arg-type]
        return keys
