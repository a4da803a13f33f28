"""Reload canonical profile state after a reconciliation pass."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, cast

from profilesync.domain.model import CollectionName
from profilesync.domain.transformers import draft_from_records

if TYPE_CHECKING:
    from uuid import UUID

    from profilesync.domain.draft_store import DraftStore
    from profilesync.domain.model import (
        CollectionRecord,
        GoalRecord,
        ProfileDraft,
        SocialLinkRecord,
        WalletMethodRecord,
    )
    from profilesync.domain.ports import ProfileGateway

log = logging.getLogger(__name__)


@dataclass(slots=True)
class RefreshLoader:
    gateway: ProfileGateway

    def load(self, owner_id: UUID) -> ProfileDraft:
        """Fetch scalar fields and every collection; missing collections load empty."""

        profile = self.gateway.load_profile(owner_id)
        wallet_methods = self._rows(owner_id, CollectionName.WALLET_METHODS)
        social_links = self._rows(owner_id, CollectionName.SOCIAL_LINKS)
        goals = self._rows(owner_id, CollectionName.GOALS)
        return draft_from_records(
            profile,
            wallet_methods=cast("tuple[WalletMethodRecord, ...]", wallet_methods),
            social_links=cast("tuple[SocialLinkRecord, ...]", social_links),
            goals=cast("tuple[GoalRecord, ...]", goals),
        )

    def refresh(self, owner_id: UUID, store: DraftStore) -> ProfileDraft:
        """Load canonical state and overwrite the store with it."""

        draft = self.load(owner_id)
        store.absorb(draft)
        log.debug(
            "Refreshed owner %s: wallet_methods=%d, social_links=%d, goals=%d",
            owner_id,
            len(draft.wallet_methods),
            len(draft.social_links),
            len(draft.goals),
        )
        return draft

    def _rows(self, owner_id: UUID, name: CollectionName) -> tuple[CollectionRecord, ...]:
        loaded = self.gateway.load_collection(owner_id, name)
        if loaded.missing:
            log.warning("Collection %s is missing; loading it empty", name)
        return loaded.rows
