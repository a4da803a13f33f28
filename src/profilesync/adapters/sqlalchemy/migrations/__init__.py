"""Alembic migration helpers for profilesync."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Final

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext

from profilesync.config import get_database_config

MIGRATIONS_PATH: Final[Path] = Path(__file__).resolve().parent
HEAD: Final[str] = "head"

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


def _build_config() -> Config:
    """Return an Alembic Config pointing at the bundled migration scripts."""

    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_PATH))
    config.set_main_option("version_locations", str(MIGRATIONS_PATH / "versions"))
    return config


def upgrade(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    revision: str = HEAD,
) -> None:
    """Upgrade the database schema to ``revision``.

    Stopping short of head leaves later collections absent, which the sync
    engine tolerates.
    """

    config = _build_config()
    if engine is not None:
        with engine.begin() as connection:
            config.attributes["connection"] = connection
            command.upgrade(config, revision)
        return
    config.set_main_option("sqlalchemy.url", database_uri or get_database_config().uri)
    command.upgrade(config, revision)


def upgrade_head(*, engine: Engine | None = None, database_uri: str | None = None) -> None:
    """Upgrade the database schema to the latest revision."""

    upgrade(engine=engine, database_uri=database_uri, revision=HEAD)


def current_revision(engine: Engine) -> str | None:
    """Return the revision the database is stamped with, or ``None`` if unmigrated."""

    with engine.connect() as connection:
        return MigrationContext.configure(connection).get_current_revision()
