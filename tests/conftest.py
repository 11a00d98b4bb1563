from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import Column, Integer, MetaData, String, Table, create_engine, insert
from sqlalchemy.orm import Session, sessionmaker

from populators.adapters.sqlalchemy import shutdown

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture
def account_table() -> Table:
    metadata = MetaData()
    return Table(
        "account",
        metadata,
        Column("id", String, primary_key=True),
        Column("name", String, nullable=False),
        Column("region", String),
        Column("tier", Integer),
    )


@pytest.fixture
def sqlite_engine(account_table: Table) -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:")
    account_table.metadata.create_all(engine)
    with engine.begin() as connection:
        connection.execute(
            insert(account_table),
            [
                {"id": "acc-1", "name": "Acme", "region": "EMEA", "tier": 1},
                {"id": "acc-2", "name": "Globex", "region": "APAC", "tier": 2},
                {"id": "acc-3", "name": "Initech", "region": None, "tier": 3},
            ],
        )
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session_factory(sqlite_engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=sqlite_engine)


@pytest.fixture(autouse=True)
def _reset_sqlalchemy_adapter() -> Iterator[None]:
    yield
    shutdown()
