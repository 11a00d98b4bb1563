"""Record population engine.

Rules ("populators") run against every record of a batch in rule-set order,
reading auxiliary data through a per-batch ``DataContext`` that fetches each
dataset at most once. Rule errors are isolated into ``FailureReport`` values.
"""

from __future__ import annotations

from .context import ContextFactory, DataContext, DataProvider, NullDataContext
from .engine import PopulationEngine, populate, raise_for_failures
from .errors import ConfigurationError, ProviderFailure, RuleFailure
from .failures import FailureReport, FailureSink, Stage
from .record import (
    Phase,
    Record,
    any_field_changed,
    field_changed,
    field_is_not_null,
    field_is_null,
)
from .registry import RuleSetRegistry
from .rules import CreatePopulator, Populator, UpdatePopulator, rule_name, supports
from .ruleset import RuleSet

__all__ = [
    "ConfigurationError",
    "ContextFactory",
    "CreatePopulator",
    "DataContext",
    "DataProvider",
    "FailureReport",
    "FailureSink",
    "NullDataContext",
    "Phase",
    "PopulationEngine",
    "Populator",
    "ProviderFailure",
    "Record",
    "RuleFailure",
    "RuleSet",
    "RuleSetRegistry",
    "Stage",
    "UpdatePopulator",
    "any_field_changed",
    "field_changed",
    "field_is_not_null",
    "field_is_null",
    "populate",
    "raise_for_failures",
    "rule_name",
    "supports",
]
