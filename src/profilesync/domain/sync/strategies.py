"""Collection sync strategies.

Full-Replace rewrites a whole collection; it suits collections whose row ids
nobody else depends on between edits. Upsert-Preserve keeps the ids of rows
that survive an edit, because social links anchor photo stories and wallet
references that must not flicker or orphan.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, cast

from profilesync.domain.errors import MissingCollectionFault
from profilesync.domain.identity import find_match, normalize_platform
from profilesync.domain.model import CollectionName, SocialLink, SocialLinkRecord
from profilesync.domain.transformers import (
    goal_to_record,
    social_link_to_record,
    wallet_method_to_record,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence
    from datetime import datetime
    from uuid import UUID

    from profilesync.domain.model import CollectionRecord
    from profilesync.domain.ports import ProfileGateway

log = logging.getLogger(__name__)


class CollectionSyncStrategy(Protocol):
    """Persist the complete next array of one collection."""

    def __call__(
        self,
        gateway: ProfileGateway,
        owner_id: UUID,
        name: CollectionName,
        items: Sequence[object],
        *,
        now: datetime,
    ) -> list[CollectionRecord]: ...


type ToRecord = Callable[..., CollectionRecord]


@dataclass(slots=True, frozen=True)
class FullReplace:
    """Delete every persisted row of the collection, then insert the new array.

    All items are converted before the gateway is touched, so a value that
    fails validation leaves storage as it was.
    """

    to_record: ToRecord

    def __call__(
        self,
        gateway: ProfileGateway,
        owner_id: UUID,
        name: CollectionName,
        items: Sequence[object],
        *,
        now: datetime,
    ) -> list[CollectionRecord]:
        records = [self.to_record(item, index=index, now=now) for index, item in enumerate(items)]
        committed = gateway.replace_collection(owner_id, name, records)
        log.info("Replaced %s for owner %s with %d rows", name, owner_id, len(committed))
        return committed


@dataclass(slots=True, frozen=True)
class UpsertPreserve:
    """Match social links to persisted rows by natural key and keep their ids."""

    def __call__(
        self,
        gateway: ProfileGateway,
        owner_id: UUID,
        name: CollectionName,
        items: Sequence[object],
        *,
        now: datetime,
    ) -> list[CollectionRecord]:
        loaded = gateway.load_collection(owner_id, name)
        if loaded.missing:
            raise MissingCollectionFault(name)
        persisted = cast("tuple[SocialLinkRecord, ...]", loaded.rows)
        links = cast("Sequence[SocialLink]", items)

        batch = self._plan_batch(links, persisted, now=now)
        committed = gateway.upsert_collection(owner_id, name, batch) if batch else []

        incoming_urls = {link.url or "" for link in links}
        orphan_ids = [
            record.id
            for record in persisted
            if record.id is not None and record.url not in incoming_urls
        ]
        if orphan_ids:
            deleted = gateway.delete_rows(name, orphan_ids)
            log.info("Pruned %d orphaned %s for owner %s", deleted, name, owner_id)

        preserved = sum(1 for record in batch if record.id is not None)
        log.info(
            "Upserted %s for owner %s: preserved=%d, created=%d",
            name,
            owner_id,
            preserved,
            len(batch) - preserved,
        )
        return committed

    @staticmethod
    def _plan_batch(
        links: Sequence[SocialLink],
        persisted: Sequence[SocialLinkRecord],
        *,
        now: datetime,
    ) -> list[SocialLinkRecord]:
        claimed: set[UUID] = set()
        batch: list[SocialLinkRecord] = []
        for index, link in enumerate(links):
            platform = normalize_platform(link.platform)
            unclaimed = (record for record in persisted if record.id not in claimed)
            existing = find_match(platform, link.url or "", unclaimed)
            if existing is not None and existing.id is not None:
                claimed.add(existing.id)
            batch.append(
                social_link_to_record(
                    link, platform=platform, index=index, now=now, existing=existing
                )
            )
        return batch


def default_strategies() -> Mapping[CollectionName, CollectionSyncStrategy]:
    return {
        CollectionName.WALLET_METHODS: FullReplace(wallet_method_to_record),
        CollectionName.SOCIAL_LINKS: UpsertPreserve(),
        CollectionName.GOALS: FullReplace(goal_to_record),
    }
