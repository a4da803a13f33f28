from __future__ import annotations

import os
import uuid
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.pool import StaticPool

from profilesync.adapters.sqlalchemy import SqlAlchemyProfileGateway, shutdown, startup
from profilesync.adapters.sqlalchemy.migrations import upgrade, upgrade_head
from tests.helpers.profiles import FakeClock, InMemoryProfileGateway

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Iterator


def _memory_engine() -> Engine:
    return create_engine(
        "sqlite+pysqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = _memory_engine()
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def partial_sqlite_engine() -> Iterator[Engine]:
    """Database migrated up to social links only: the goal table does not exist."""

    engine = _memory_engine()
    upgrade(engine=engine, revision="0002")
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sqlite_gateway(sqlite_engine: Engine, clock: FakeClock) -> SqlAlchemyProfileGateway:
    return SqlAlchemyProfileGateway(sqlite_engine, clock=clock)


@pytest.fixture
def owner_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def fake_gateway(owner_id: uuid.UUID, clock: FakeClock) -> InMemoryProfileGateway:
    gateway = InMemoryProfileGateway(clock=clock)
    gateway.create_profile(owner_id, "creator")
    return gateway


@pytest.fixture
def started_adapter(sqlite_engine: Engine) -> Iterator[Engine]:
    startup(engine=sqlite_engine, force=True, migrate=False)
    try:
        yield sqlite_engine
    finally:
        shutdown()
