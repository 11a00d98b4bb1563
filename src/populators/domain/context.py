"""Per-batch cache of auxiliary data shared by every rule of a run.

A ``DataContext`` maps keys to ``DataProvider`` callables and memoizes each
provider's result the first time a rule asks for it. Within one context a
provider runs at most once, and never if nobody requests its key. Providers that
raise are memoized as failures: later requests for the same key raise a fresh
``ProviderFailure`` without calling the provider again.

Contexts are single-use. The engine builds one immediately before the record
loop and drops it afterwards. Access is sequential; a caller that parallelizes
rules must guard the check/fetch/store step in ``get`` per key.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Mapping, Sequence
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, ClassVar, Protocol

from populators.domain.errors import ConfigurationError, ProviderFailure

if TYPE_CHECKING:
    from collections.abc import Iterator

    from populators.domain.record import Record

log = getLogger(__name__)


class DataProvider(Protocol):
    """Computes one named auxiliary dataset for a whole batch."""

    def __call__(
        self,
        new_records: Sequence[Record],
        prior_records: Sequence[Record],
        /,
    ) -> Mapping[Hashable, object]: ...


type ContextFactory = Callable[[Sequence[Record], Sequence[Record]], DataContext]


@dataclass(frozen=True, slots=True)
class _Failed:
    error: BaseException


class DataContext:
    """Lazy, memoized lookup of batch-scoped auxiliary data.

    Subclasses usually declare their keys as a ``StrEnum`` and register a
    provider per key in the class-level ``providers`` mapping::

        class OrderContext(DataContext):
            class Key(StrEnum):
                ACCOUNTS = "accounts"

            providers = {Key.ACCOUNTS: fetch_accounts}

    Providers passed to the constructor override class-level ones with the
    same key.
    """

    providers: ClassVar[Mapping[str, DataProvider]] = {}

    def __init__(
        self,
        new_records: Sequence[Record],
        prior_records: Sequence[Record] = (),
        *,
        providers: Mapping[str, DataProvider] | None = None,
    ) -> None:
        self._new_records = tuple(new_records)
        self._prior_records = tuple(prior_records)
        self._providers: dict[str, DataProvider] = {**type(self).providers, **(providers or {})}
        self._memo: dict[str, Mapping[Hashable, object] | _Failed] = {}
        self.fetch_count = 0

    def get(self, key: str) -> Mapping[Hashable, object]:
        """Return the dataset registered under ``key``, fetching it on first use."""

        try:
            cached = self._memo[key]
        except KeyError:
            cached = self._fetch(key)

        if isinstance(cached, _Failed):
            raise ProviderFailure(key, cached.error) from cached.error
        return cached

    def is_loaded(self, key: str) -> bool:
        """Whether ``key`` has been fetched (successfully or not) in this context."""

        return key in self._memo

    def keys(self) -> Iterator[str]:
        return iter(self._providers)

    def __contains__(self, key: object) -> bool:
        return key in self._providers

    def _fetch(self, key: str) -> Mapping[Hashable, object] | _Failed:
        provider = self._providers.get(key)
        if provider is None:
            raise ConfigurationError(
                f"No data provider registered for key {key!r} on {type(self).__name__}"
            )

        log.debug(
            "Fetching %r for %d record(s) via %s",
            key,
            len(self._new_records),
            type(self).__name__,
        )
        self.fetch_count += 1
        result: Mapping[Hashable, object] | _Failed
        try:
            result = provider(self._new_records, self._prior_records)
        except Exception as exc:  # noqa: BLE001
            log.warning("Data provider for %r failed: %s", key, exc)
            result = _Failed(exc)
        self._memo[key] = result
        return result


class NullDataContext(DataContext):
    """Context used when a rule set configures none; every request is a wiring bug."""

    def get(self, key: str) -> Mapping[Hashable, object]:
        raise ConfigurationError(
            f"Rule requested context key {key!r} but the rule set configures no data context"
        )
