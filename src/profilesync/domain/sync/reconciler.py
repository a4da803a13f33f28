"""Reconcile a partial profile update against storage.

One call walks the touched collections in a fixed order (wallet methods,
social links, goals) and then writes scalar fields. Outcomes per target:

- ``MissingCollectionFault``: logged, target skipped, pass continues
- ``ValidationFault``: target rejected, pass continues, caller is told later
- anything else: the pass stops and the error propagates
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, cast

from profilesync.domain.errors import MissingCollectionFault, ValidationFault
from profilesync.domain.model import CollectionName
from profilesync.domain.sync.contracts import SCALAR_TARGET, ProfileUpdate, SyncOutcome
from profilesync.domain.sync.strategies import default_strategies
from profilesync.domain.transformers import scalar_fields_to_storage, utcnow

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence
    from datetime import datetime
    from uuid import UUID

    from profilesync.domain.model import CollectionRecord, WalletMethod
    from profilesync.domain.ports import ProfileGateway
    from profilesync.domain.sync.strategies import CollectionSyncStrategy

log = logging.getLogger(__name__)


@dataclass(slots=True)
class Reconciler:
    gateway: ProfileGateway
    strategies: Mapping[CollectionName, CollectionSyncStrategy] = field(
        default_factory=default_strategies
    )
    clock: Callable[[], datetime] = utcnow

    def reconcile(self, owner_id: UUID, update: ProfileUpdate) -> SyncOutcome:
        """Run one reconciliation pass and report what happened."""

        now = self.clock()
        outcome = SyncOutcome()
        pending = update

        for name in update.touched_collections():
            items = pending.collection(name) or []
            try:
                committed = self.strategies[name](self.gateway, owner_id, name, items, now=now)
            except MissingCollectionFault:
                log.warning("Collection %s is missing for owner %s; skipped", name, owner_id)
                outcome.skipped.append(name)
                continue
            except ValidationFault as fault:
                log.warning("Rejected %s for owner %s: %s", name, owner_id, fault)
                outcome.rejected[name] = fault
                continue

            outcome.committed[name] = committed
            if name is CollectionName.WALLET_METHODS:
                pending = rewire_wallet_references(
                    pending,
                    before=cast("Sequence[WalletMethod]", items),
                    after=committed,
                )

        if update.fields:
            try:
                storage_fields = scalar_fields_to_storage(update.fields)
            except ValidationFault as fault:
                log.warning("Rejected profile fields for owner %s: %s", owner_id, fault)
                outcome.rejected[SCALAR_TARGET] = fault
            else:
                self.gateway.update_scalar_fields(owner_id, storage_fields)
                outcome.fields_committed = True

        log.info(
            "Reconciled owner %s (%s): status=%s, skipped=%s, rejected=%s",
            owner_id,
            update.describe(),
            outcome.status,
            [str(name) for name in outcome.skipped],
            sorted(outcome.rejected),
        )
        return outcome


def rewire_wallet_references(
    update: ProfileUpdate,
    *,
    before: Sequence[WalletMethod],
    after: Sequence[CollectionRecord],
) -> ProfileUpdate:
    """Point same-request references at the ids storage just assigned.

    Full-Replace gives every wallet method a new id. Links and goals in the same
    update that referenced a previous id follow the method at the same position.
    References to ids not in ``before`` are left alone.
    """

    id_map: dict[UUID, UUID] = {}
    for old, new in zip(before, after, strict=False):
        if old.id is not None and new.id is not None and old.id != new.id:
            id_map[old.id] = new.id
    if not id_map:
        return update

    social_links = update.social_links
    if social_links is not None:
        social_links = [
            replace(link, wallet_method_id=id_map[link.wallet_method_id])
            if link.wallet_method_id in id_map
            else link
            for link in social_links
        ]
    goals = update.goals
    if goals is not None:
        goals = [
            replace(goal, wallet_method_id=id_map[goal.wallet_method_id])
            if goal.wallet_method_id in id_map
            else goal
            for goal in goals
        ]
    return replace(update, social_links=social_links, goals=goals)
