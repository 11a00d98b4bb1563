"""Orchestrator running a batch of records through a rule set.

Records are processed record-major: every rule sees a record in rule-set order,
and sees the mutations of the rules before it. A rule's ``apply`` runs only
after its own ``qualifies`` returned true for that record.

Errors raised by a rule are isolated per (record, rule): they become a
``FailureReport`` and the loop continues with the next rule. A
``ConfigurationError`` is a wiring defect and aborts the whole run. There is no
rollback; a record keeps whatever earlier rules wrote to it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from populators.domain.context import NullDataContext
from populators.domain.errors import ConfigurationError, RuleFailure
from populators.domain.failures import FailureReport, Stage
from populators.domain.record import Phase
from populators.domain.rules import rule_name

if TYPE_CHECKING:
    from collections.abc import Sequence

    from populators.domain.context import DataContext
    from populators.domain.failures import FailureSink
    from populators.domain.record import Record
    from populators.domain.rules import Populator
    from populators.domain.ruleset import RuleSet

log = getLogger(__name__)


@dataclass(slots=True)
class PopulationEngine:
    """Drive one batch at a time through a ``RuleSet``.

    ``sink`` receives every failure report as it happens, in addition to the
    list returned by ``run``. Errors raised by the sink are logged and do not
    interrupt the batch.
    """

    sink: FailureSink | None = None

    def run(
        self,
        phase: Phase,
        new_records: Sequence[Record],
        prior_records: Sequence[Record] | None = None,
        *,
        rule_set: RuleSet,
    ) -> list[FailureReport]:
        """Populate ``new_records`` in place and return the isolated failures."""

        phase = Phase(phase)
        priors = _validate_batch(phase, new_records, prior_records)
        context = _build_context(rule_set, new_records, priors)
        rules = rule_set.rules_for(phase)

        reports: list[FailureReport] = []
        for index, record in enumerate(new_records):
            prior = priors[index] if phase is Phase.UPDATE else None
            for rule in rules:
                report = self._run_rule(phase, rule, record, prior, context, index)
                if report is None:
                    continue
                reports.append(report)
                self._notify(report)

        log.debug(
            "Ran %d %s rule(s) over %d record(s): %d failure(s)",
            len(rules),
            phase,
            len(new_records),
            len(reports),
        )
        return reports

    def _run_rule(
        self,
        phase: Phase,
        rule: Populator,
        record: Record,
        prior: Record | None,
        context: DataContext,
        index: int,
    ) -> FailureReport | None:
        stage = Stage.QUALIFY
        try:
            if not _qualifies(phase, rule, record, prior, context):
                return None
            stage = Stage.APPLY
            changes = _apply(phase, rule, record, prior, context)
        except ConfigurationError:
            raise
        except Exception as exc:  # noqa: BLE001
            name = rule_name(rule)
            log.debug("Rule %s failed during %s for record %s: %s", name, stage, record.id, exc)
            return FailureReport(
                record_id=record.id,
                rule=name,
                error=exc,
                phase=phase,
                stage=stage,
                index=index,
            )

        if isinstance(changes, Mapping):
            record.update(changes)
        return None

    def _notify(self, report: FailureReport) -> None:
        # A failing sink loses that notification only; the report stays in the result.
        if self.sink is None:
            return
        try:
            self.sink(report)
        except Exception:
            log.exception(
                "Failure sink raised for rule %s on record %s", report.rule, report.record_id
            )


def populate(
    phase: Phase,
    new_records: Sequence[Record],
    prior_records: Sequence[Record] | None = None,
    *,
    rule_set: RuleSet,
    sink: FailureSink | None = None,
) -> list[FailureReport]:
    """Run a single batch with a throwaway engine."""

    return PopulationEngine(sink=sink).run(phase, new_records, prior_records, rule_set=rule_set)


def raise_for_failures(reports: Sequence[FailureReport]) -> None:
    """Raise ``RuleFailure`` for the first report, for callers that block on any failure."""

    if not reports:
        return
    first = reports[0]
    raise RuleFailure(first.rule, first.stage, first.error) from first.error


def _qualifies(
    phase: Phase,
    rule: Populator,
    record: Record,
    prior: Record | None,
    context: DataContext,
) -> bool:
    if phase is Phase.CREATE:
        return bool(rule.qualifies_on_create(record, context))  # type: ignore[union-attr]
    return bool(rule.qualifies_on_update(record, prior, context))  # type: ignore[union-attr]


def _apply(
    phase: Phase,
    rule: Populator,
    record: Record,
    prior: Record | None,
    context: DataContext,
) -> Mapping[str, object] | None:
    if phase is Phase.CREATE:
        return rule.apply_on_create(record, context)  # type: ignore[union-attr]
    return rule.apply_on_update(record, prior, context)  # type: ignore[union-attr]


def _validate_batch(
    phase: Phase,
    new_records: Sequence[Record],
    prior_records: Sequence[Record] | None,
) -> tuple[Record, ...]:
    priors = tuple(prior_records or ())
    if phase is Phase.CREATE:
        if priors:
            raise ConfigurationError("Create batches must not carry prior records")
        return priors

    if prior_records is None:
        raise ConfigurationError("Update batches require prior records")
    if len(priors) != len(new_records):
        raise ConfigurationError(
            f"Update batch is misaligned: {len(new_records)} new record(s) "
            f"but {len(priors)} prior record(s)"
        )
    for index, (new, prior) in enumerate(zip(new_records, priors, strict=True)):
        if new.id is not None and prior.id is not None and new.id != prior.id:
            raise ConfigurationError(
                f"Update batch is misaligned at index {index}: {new.id!r} != {prior.id!r}"
            )
    return priors


def _build_context(
    rule_set: RuleSet,
    new_records: Sequence[Record],
    prior_records: Sequence[Record],
) -> DataContext:
    factory = rule_set.context_type()
    if factory is None:
        return NullDataContext(new_records, prior_records)
    return factory(new_records, prior_records)
