"""Value types shared by the reconciler, the refresh loader and the editor."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Final

from profilesync.domain.model import CollectionName

if TYPE_CHECKING:
    from profilesync.domain.errors import ValidationFault
    from profilesync.domain.model import CollectionRecord, Goal, SocialLink, WalletMethod

SCALAR_TARGET: Final[str] = "fields"

# Wallet methods go first: social links and goals may point at them.
RECONCILE_ORDER: Final[tuple[CollectionName, ...]] = (
    CollectionName.WALLET_METHODS,
    CollectionName.SOCIAL_LINKS,
    CollectionName.GOALS,
)


class SyncStatus(StrEnum):
    """States of one update cycle."""

    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    PARTIAL_FAILURE = "partial_failure"
    FATAL = "fatal"


@dataclass(slots=True, kw_only=True)
class ProfileUpdate:
    """A partial update: changed scalar fields plus complete next arrays.

    ``None`` means "collection not touched"; an empty list means "remove all".
    Keys of ``fields`` outside the editable profile fields are dropped from the
    optimistic draft with a warning and rejected at write time with a
    ``ValidationFault``.
    """

    fields: dict[str, object] = field(default_factory=dict[str, object])
    wallet_methods: list[WalletMethod] | None = None
    social_links: list[SocialLink] | None = None
    goals: list[Goal] | None = None

    def collection(
        self, name: CollectionName
    ) -> list[WalletMethod] | list[SocialLink] | list[Goal] | None:
        match name:
            case CollectionName.WALLET_METHODS:
                return self.wallet_methods
            case CollectionName.SOCIAL_LINKS:
                return self.social_links
            case CollectionName.GOALS:
                return self.goals

    def touched_collections(self) -> tuple[CollectionName, ...]:
        return tuple(name for name in RECONCILE_ORDER if self.collection(name) is not None)

    @property
    def is_empty(self) -> bool:
        return not self.fields and not self.touched_collections()

    def describe(self) -> str:
        touched = self.touched_collections()
        parts = [f"{name}={len(self.collection(name) or ())}" for name in touched]
        if self.fields:
            parts.append(f"fields={sorted(self.fields)}")
        return ", ".join(parts) or "nothing"


@dataclass(slots=True)
class SyncOutcome:
    """What one reconciliation pass committed, skipped and rejected."""

    committed: dict[CollectionName, list[CollectionRecord]] = field(
        default_factory=dict[CollectionName, "list[CollectionRecord]"]
    )
    fields_committed: bool = False
    skipped: list[CollectionName] = field(default_factory=list[CollectionName])
    rejected: dict[str, ValidationFault] = field(default_factory=dict[str, "ValidationFault"])

    @property
    def status(self) -> SyncStatus:
        if self.skipped or self.rejected:
            return SyncStatus.PARTIAL_FAILURE
        return SyncStatus.SUCCESS

    def raise_for_rejections(self) -> None:
        """Surface the first rejected write, in reconciliation order."""

        for fault in self.rejected.values():
            raise fault
