"""Port for the relational storage behind a profile."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Collection, Mapping, Sequence
    from uuid import UUID

    from profilesync.domain.model import CollectionName, CollectionRecord, ProfileRecord


@dataclass(slots=True, frozen=True)
class LoadedCollection[TRecord]:
    """Rows of one collection, in storage order.

    ``missing`` distinguishes "the collection does not exist" from "the
    collection is empty"; both carry no rows.
    """

    rows: tuple[TRecord, ...] = field(default_factory=tuple)
    missing: bool = False

    @classmethod
    def absent(cls) -> LoadedCollection[TRecord]:
        return cls(rows=(), missing=True)


@runtime_checkable
class ProfileGateway(Protocol):
    """CRUD boundary the sync engine needs from storage.

    Write operations against a collection that does not exist raise
    ``MissingCollectionFault``; connectivity problems raise ``TransientIOFault``.
    """

    def create_profile(self, owner_id: UUID, username: str) -> ProfileRecord: ...

    def load_profile(self, owner_id: UUID) -> ProfileRecord: ...

    def load_collection(
        self, owner_id: UUID, name: CollectionName
    ) -> LoadedCollection[CollectionRecord]: ...

    def replace_collection(
        self,
        owner_id: UUID,
        name: CollectionName,
        records: Sequence[CollectionRecord],
    ) -> list[CollectionRecord]: ...

    def upsert_collection(
        self,
        owner_id: UUID,
        name: CollectionName,
        records: Sequence[CollectionRecord],
    ) -> list[CollectionRecord]: ...

    def delete_rows(self, name: CollectionName, ids: Collection[UUID]) -> int: ...

    def update_scalar_fields(self, owner_id: UUID, fields: Mapping[str, object]) -> None: ...
