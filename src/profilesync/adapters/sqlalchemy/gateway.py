"""SQLAlchemy implementation of the profile persistence gateway.

Each gateway call runs in its own transaction. Replacing a collection deletes
and re-inserts inside one transaction, so readers never observe it empty.
"""

from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from dataclasses import fields, replace
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, insert, inspect, select, update
from sqlalchemy.exc import (
    DBAPIError,
    DisconnectionError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from profilesync.adapters.sqlalchemy.mappings import (
    ORDER_COLUMN_BY_COLLECTION,
    TABLE_BY_COLLECTION,
    profile_table,
)
from profilesync.domain.errors import (
    MissingCollectionFault,
    ProfileNotFoundFault,
    TransientIOFault,
    UnexpectedFault,
)
from profilesync.domain.model import RECORD_TYPE_BY_COLLECTION, ProfileRecord, Theme
from profilesync.domain.ports import LoadedCollection
from profilesync.domain.transformers import utcnow

if TYPE_CHECKING:
    from collections.abc import Callable, Collection, Iterator, Mapping, Sequence
    from datetime import datetime

    from sqlalchemy import Connection, RowMapping, Table
    from sqlalchemy.engine import Engine

    from profilesync.domain.model import CollectionName, CollectionRecord

log = logging.getLogger(__name__)

_TRANSIENT_ERRORS = (OperationalError, InterfaceError, DisconnectionError, PoolTimeoutError)
_UNDEFINED_TABLE_PGCODE = "42P01"


def _is_missing_table(exc: SQLAlchemyError) -> bool:
    original = getattr(exc, "orig", None)
    if getattr(original, "pgcode", None) == _UNDEFINED_TABLE_PGCODE:
        return True
    message = str(original or exc).lower()
    return "no such table" in message or ("relation" in message and "does not exist" in message)


@contextmanager
def _translated_errors(collection: CollectionName | None) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        if collection is not None and _is_missing_table(exc):
            raise MissingCollectionFault(collection) from exc
        if isinstance(exc, _TRANSIENT_ERRORS) or (
            isinstance(exc, DBAPIError) and exc.connection_invalidated
        ):
            raise TransientIOFault(f"Storage unavailable: {exc}") from exc
        raise UnexpectedFault(f"Storage error: {exc}") from exc


def _record_from_row[TRecord](record_type: type[TRecord], row: RowMapping) -> TRecord:
    names = {item.name for item in fields(record_type)}  # pyright: ignore[reportArgumentType]
    return record_type(**{name: row[name] for name in names if name in row})


class SqlAlchemyProfileGateway:
    def __init__(
        self,
        engine: Engine,
        *,
        id_factory: Callable[[], uuid.UUID] = uuid.uuid4,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.engine = engine
        self._id_factory = id_factory
        self._clock = clock

    # Profile -----------------------------------------------------------------

    def create_profile(self, owner_id: uuid.UUID, username: str) -> ProfileRecord:
        now = self._clock()
        with self._transaction() as connection:
            connection.execute(
                insert(profile_table).values(
                    id=self._id_factory(),
                    owner_id=owner_id,
                    username=username,
                    theme=Theme.DEFAULT,
                    show_social_links=True,
                    show_payment_methods=True,
                    show_goals=True,
                    show_about=True,
                    created_at=now,
                    updated_at=now,
                )
            )
        log.info("Created profile %s for owner %s", username, owner_id)
        return self.load_profile(owner_id)

    def load_profile(self, owner_id: uuid.UUID) -> ProfileRecord:
        with self._transaction() as connection:
            statement = select(profile_table).where(profile_table.c.owner_id == owner_id)
            row = connection.execute(statement).mappings().one_or_none()
        if row is None:
            raise ProfileNotFoundFault(owner_id)
        return _record_from_row(ProfileRecord, row)

    def update_scalar_fields(self, owner_id: uuid.UUID, fields: Mapping[str, object]) -> None:
        if not fields:
            return
        with self._transaction() as connection:
            result = connection.execute(
                update(profile_table)
                .where(profile_table.c.owner_id == owner_id)
                .values(**fields, updated_at=self._clock())
            )
        if result.rowcount == 0:
            raise ProfileNotFoundFault(owner_id)

    # Collections -------------------------------------------------------------

    def load_collection(
        self, owner_id: uuid.UUID, name: CollectionName
    ) -> LoadedCollection[CollectionRecord]:
        table = TABLE_BY_COLLECTION[name]
        record_type = RECORD_TYPE_BY_COLLECTION[name]
        order_column = table.c[ORDER_COLUMN_BY_COLLECTION[name]]
        try:
            with self._transaction(name) as connection:
                self._require_table(connection, name, table)
                rows = (
                    connection.execute(
                        select(table)
                        .where(table.c.owner_id == owner_id)
                        .order_by(order_column, table.c.created_at)
                    )
                    .mappings()
                    .all()
                )
        except MissingCollectionFault:
            return LoadedCollection.absent()
        return LoadedCollection(rows=tuple(_record_from_row(record_type, row) for row in rows))

    def replace_collection(
        self,
        owner_id: uuid.UUID,
        name: CollectionName,
        records: Sequence[CollectionRecord],
    ) -> list[CollectionRecord]:
        table = TABLE_BY_COLLECTION[name]
        committed = [self._stamped(replace(record, id=self._id_factory())) for record in records]
        with self._transaction(name) as connection:
            self._require_table(connection, name, table)
            connection.execute(delete(table).where(table.c.owner_id == owner_id))
            if committed:
                connection.execute(
                    insert(table), [self._values(owner_id, record) for record in committed]
                )
        log.debug("Replaced %s for owner %s (%d rows)", name, owner_id, len(committed))
        return committed

    def upsert_collection(
        self,
        owner_id: uuid.UUID,
        name: CollectionName,
        records: Sequence[CollectionRecord],
    ) -> list[CollectionRecord]:
        table = TABLE_BY_COLLECTION[name]
        committed: list[CollectionRecord] = []
        with self._transaction(name) as connection:
            self._require_table(connection, name, table)
            for record in records:
                if record.id is None:
                    stored = self._stamped(replace(record, id=self._id_factory()))
                    connection.execute(insert(table).values(self._values(owner_id, stored)))
                else:
                    stored = self._stamped(record)
                    self._update_or_insert(connection, table, owner_id, stored)
                committed.append(stored)
        return committed

    def delete_rows(self, name: CollectionName, ids: Collection[uuid.UUID]) -> int:
        if not ids:
            return 0
        table = TABLE_BY_COLLECTION[name]
        with self._transaction(name) as connection:
            self._require_table(connection, name, table)
            result = connection.execute(delete(table).where(table.c.id.in_(list(ids))))
        return result.rowcount

    # Helpers -----------------------------------------------------------------

    @contextmanager
    def _transaction(self, collection: CollectionName | None = None) -> Iterator[Connection]:
        with _translated_errors(collection), self.engine.begin() as connection:
            yield connection

    @staticmethod
    def _require_table(connection: Connection, name: CollectionName, table: Table) -> None:
        if not inspect(connection).has_table(table.name):
            raise MissingCollectionFault(name)

    def _update_or_insert(
        self,
        connection: Connection,
        table: Table,
        owner_id: uuid.UUID,
        record: CollectionRecord,
    ) -> None:
        values = self._values(owner_id, record)
        changes = {
            key: value
            for key, value in values.items()
            if key not in {"id", "owner_id", "created_at"}
        }
        result = connection.execute(
            update(table)
            .where(table.c.id == record.id)
            .where(table.c.owner_id == owner_id)
            .values(changes)
        )
        if result.rowcount == 0:
            connection.execute(insert(table).values(values))

    def _stamped[TRecord: CollectionRecord](self, record: TRecord) -> TRecord:
        now = self._clock()
        return replace(
            record,
            created_at=record.created_at or now,
            updated_at=record.updated_at or now,
        )

    @staticmethod
    def _values(owner_id: uuid.UUID, record: CollectionRecord) -> dict[str, Any]:
        values: dict[str, Any] = {item.name: getattr(record, item.name) for item in fields(record)}
        values["owner_id"] = owner_id
        return values

