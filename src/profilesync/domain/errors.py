"""Fault taxonomy for draft synchronization.

``MissingCollectionFault`` is recoverable and absorbed by the reconciler.
Every other fault reaches the caller, which owns reporting and retry.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID

    from profilesync.domain.model import CollectionName


class ProfileSyncFault(Exception):
    """Base class for every fault raised by the sync engine."""


class MissingCollectionFault(ProfileSyncFault):
    """The storage backing a collection does not exist."""

    def __init__(self, collection: CollectionName) -> None:
        super().__init__(f"Collection '{collection}' does not exist in storage")
        self.collection = collection


class ValidationFault(ProfileSyncFault):
    """A value could not be converted for storage."""

    def __init__(self, field: str, value: object, reason: str) -> None:
        super().__init__(f"Invalid value for {field}: {value!r} ({reason})")
        self.field = field
        self.value = value
        self.reason = reason


class TransientIOFault(ProfileSyncFault):
    """Storage or network is temporarily unavailable."""


class UnexpectedFault(ProfileSyncFault):
    """Any other storage failure."""


class ProfileNotFoundFault(UnexpectedFault):
    def __init__(self, owner_id: UUID) -> None:
        super().__init__(f"No profile for owner {owner_id}")
        self.owner_id = owner_id


class UploadFault(ProfileSyncFault):
    """The image-upload collaborator rejected or failed an upload."""
