"""Process-wide engine lifecycle for the SQLAlchemy adapter."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy import create_engine

from profilesync.adapters.sqlalchemy.gateway import SqlAlchemyProfileGateway
from profilesync.adapters.sqlalchemy.migrations import upgrade_head
from profilesync.config import get_database_config

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the SQLAlchemy adapter is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    _engine: Engine | None = None

    @property
    def engine(self) -> Engine | None:
        return self._engine

    @engine.setter
    def engine(self, value: Engine | None) -> None:
        self._engine = value

    def require_engine(self) -> Engine:
        if self._engine is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call profilesync.adapters.sqlalchemy."
                "lifecycle.startup() before requesting a gateway."
            )
        return self._engine


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
    migrate: bool = True,
) -> Engine:
    """Initialise the SQLAlchemy engine and bring the schema to head."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    resolved_engine = engine or create_engine(database_uri or get_database_config().uri)
    if migrate:
        upgrade_head(engine=resolved_engine)

    if _STATE.engine is not None and _STATE.engine is not resolved_engine:
        _STATE.engine.dispose()
    _STATE.engine = resolved_engine
    log.debug("SQLAlchemy adapter started on %s", resolved_engine.url)
    return resolved_engine


def configured_engine() -> Engine | None:
    """Return the engine currently managed by the adapter (if any)."""

    return _STATE.engine


def is_started() -> bool:
    """Return whether the adapter has been initialised."""

    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and reset state (primarily for tests)."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None


def build_gateway() -> SqlAlchemyProfileGateway:
    """Return a gateway bound to the managed engine."""

    return SqlAlchemyProfileGateway(_STATE.require_engine())
