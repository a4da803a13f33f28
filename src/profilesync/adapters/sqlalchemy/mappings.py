"""SQLAlchemy table metadata for profile storage."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Final

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    TypeDecorator,
    Uuid,
)

from profilesync.domain.model import CollectionName, Platform, Theme, WalletMethodType

if TYPE_CHECKING:
    from enum import StrEnum

    from sqlalchemy.engine import Engine

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


def _enum_values(enum_cls: type[StrEnum]) -> list[str]:
    return [member.value for member in enum_cls]


def _enum_type(enum_cls: type[StrEnum]) -> Enum:
    return Enum(enum_cls, native_enum=False, length=16, values_callable=_enum_values)


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

profile_table = Table(
    "profile",
    metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("owner_id", UUIDColumnType, nullable=False, unique=True),
    Column("username", String, nullable=False, unique=True),
    Column("display_name", String, nullable=True),
    Column("bio", Text, nullable=True),
    Column("avatar_url", String, nullable=True),
    Column("banner_url", String, nullable=True),
    Column("location", String, nullable=True),
    Column("theme", _enum_type(Theme), nullable=False),
    Column("show_social_links", Boolean, nullable=False, default=True),
    Column("show_payment_methods", Boolean, nullable=False, default=True),
    Column("show_goals", Boolean, nullable=False, default=True),
    Column("show_about", Boolean, nullable=False, default=True),
    Column("created_at", UTCDateTime, nullable=False),
    Column("updated_at", UTCDateTime, nullable=False),
)

wallet_method_table = Table(
    "wallet_method",
    metadata,
    Column("id", UUIDColumnType, primary_key=True),
    Column("owner_id", UUIDColumnType, nullable=False),
    Column("type", _enum_type(WalletMethodType), nullable=False),
    Column("platform", String, nullable=False),
    Column("name", String, nullable=False),
    Column("handle", String, nullable=True),
    Column("url", String, nullable=True),
    Column("details", JSON, nullable=False),
    Column("enabled", Boolean, nullable=False),
    Column("order_index", Integer, nullable=False),
    Column("created_at", UTCDateTime, nullable=False),
    Column("updated_at", UTCDateTime, nullable=False),
    Index(None, "owner_id"),
)

# wallet_method_id columns are weak references: no foreign key on purpose.
social_link_table = Table(
    "social_link",
    metadata,
    Column("id", UUIDColumnType, primary_key=True),
    Column("owner_id", UUIDColumnType, nullable=False),
    Column("platform", _enum_type(Platform), nullable=False),
    Column("label", String, nullable=False),
    Column("url", String, nullable=False),
    Column("photo_url", String, nullable=True),
    Column("photo_caption", String, nullable=True),
    Column("wallet_method_id", UUIDColumnType, nullable=True),
    Column("enabled", Boolean, nullable=False),
    Column("display_order", Integer, nullable=False),
    Column("created_at", UTCDateTime, nullable=False),
    Column("updated_at", UTCDateTime, nullable=False),
    Index(None, "owner_id"),
)

goal_table = Table(
    "goal",
    metadata,
    Column("id", UUIDColumnType, primary_key=True),
    Column("owner_id", UUIDColumnType, nullable=False),
    Column("title", String, nullable=False),
    Column("description", Text, nullable=False),
    Column("target_amount", Integer, nullable=False),
    Column("current_amount", Integer, nullable=False),
    Column("wallet_method_id", UUIDColumnType, nullable=True),
    Column("is_active", Boolean, nullable=False),
    Column("order_index", Integer, nullable=False),
    Column("created_at", UTCDateTime, nullable=False),
    Column("updated_at", UTCDateTime, nullable=False),
    Index(None, "owner_id"),
)

TABLE_BY_COLLECTION: Final[dict[CollectionName, Table]] = {
    CollectionName.WALLET_METHODS: wallet_method_table,
    CollectionName.SOCIAL_LINKS: social_link_table,
    CollectionName.GOALS: goal_table,
}

ORDER_COLUMN_BY_COLLECTION: Final[dict[CollectionName, str]] = {
    CollectionName.WALLET_METHODS: "order_index",
    CollectionName.SOCIAL_LINKS: "display_order",
    CollectionName.GOALS: "order_index",
}


def create_all_tables(engine: Engine) -> None:
    """Create every table directly, bypassing migrations (scratch databases only)."""

    metadata.create_all(engine)
