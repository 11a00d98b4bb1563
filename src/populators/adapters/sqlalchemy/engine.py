"""Process-wide SQLAlchemy engine and session factory for data providers."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from populators.config import get_database_config

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the SQLAlchemy adapter is used before ``startup()``."""


@dataclass(slots=True)
class _AdapterState:
    _engine: Engine | None = None
    _session_factory: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine | None:
        return self._engine

    @engine.setter
    def engine(self, value: Engine | None) -> None:
        self._session_factory = None
        self._engine = value

    @property
    def session_factory(self) -> sessionmaker[Session]:
        if self._engine is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call populators.adapters.sqlalchemy."
                "startup() before building data providers."
            )
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._session_factory


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> Engine:
    """Initialise the engine used by providers built without a session factory.

    Falls back to ``POPULATORS_DATABASE_URI`` when neither ``engine`` nor
    ``database_uri`` is given.
    """

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    if engine is None:
        if database_uri is None:
            config = get_database_config()
            engine = create_engine(config.uri, echo=config.echo)
        else:
            engine = create_engine(database_uri)

    log.info("Starting SQLAlchemy adapter on %s", engine.url.render_as_string(hide_password=True))
    _STATE.engine = engine
    return engine


def shutdown() -> None:
    """Dispose the engine and forget it."""

    engine = _STATE.engine
    _STATE.engine = None
    if engine is not None:
        engine.dispose()


def session_factory() -> sessionmaker[Session]:
    return _STATE.session_factory
