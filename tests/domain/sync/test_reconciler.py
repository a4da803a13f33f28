from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, cast

import pytest

from profilesync.domain.errors import TransientIOFault, ValidationFault
from profilesync.domain.model import (
    CollectionName,
    GoalRecord,
    SocialLinkRecord,
    Theme,
    WalletMethodRecord,
)
from profilesync.domain.sync import (
    SCALAR_TARGET,
    ProfileUpdate,
    Reconciler,
    SyncStatus,
    rewire_wallet_references,
)
from tests.helpers.profiles import make_goal, make_social_link, make_wallet_method

if TYPE_CHECKING:
    from tests.helpers.profiles import FakeClock, InMemoryProfileGateway

WALLETS = CollectionName.WALLET_METHODS
LINKS = CollectionName.SOCIAL_LINKS
GOALS = CollectionName.GOALS


@pytest.fixture
def reconciler(fake_gateway: InMemoryProfileGateway, clock: FakeClock) -> Reconciler:
    return Reconciler(fake_gateway, clock=clock)


def test_reconcile_walks_collections_in_fixed_order(
    reconciler: Reconciler, fake_gateway: InMemoryProfileGateway, owner_id: uuid.UUID
) -> None:
    update = ProfileUpdate(
        goals=[make_goal()],
        social_links=[make_social_link()],
        wallet_methods=[make_wallet_method()],
        fields={"display_name": "Creator"},
    )

    outcome = reconciler.reconcile(owner_id, update)

    writes = [call for call in fake_gateway.calls if call[0] != "load_collection"]
    assert writes == [
        ("replace_collection", WALLETS),
        ("upsert_collection", LINKS),
        ("replace_collection", GOALS),
        ("update_scalar_fields", None),
        ("load_profile", None),
    ]
    assert outcome.status is SyncStatus.SUCCESS
    assert outcome.fields_committed
    assert set(outcome.committed) == {WALLETS, LINKS, GOALS}


def test_reconcile_leaves_untouched_collections_alone(
    reconciler: Reconciler, fake_gateway: InMemoryProfileGateway, owner_id: uuid.UUID
) -> None:
    reconciler.reconcile(owner_id, ProfileUpdate(goals=[make_goal()]))
    fake_gateway.calls.clear()

    outcome = reconciler.reconcile(owner_id, ProfileUpdate(fields={"bio": "Hello"}))

    assert fake_gateway.calls == [("update_scalar_fields", None), ("load_profile", None)]
    assert outcome.committed == {}
    assert len(fake_gateway.stored(owner_id, GOALS)) == 1
    assert fake_gateway.profiles[owner_id].bio == "Hello"


def test_missing_collection_is_skipped_and_rest_commits(
    reconciler: Reconciler,
    fake_gateway: InMemoryProfileGateway,
    owner_id: uuid.UUID,
    caplog: pytest.LogCaptureFixture,
) -> None:
    fake_gateway.mark_missing(GOALS)

    outcome = reconciler.reconcile(
        owner_id,
        ProfileUpdate(
            wallet_methods=[make_wallet_method()],
            goals=[make_goal()],
            fields={"theme": "theme3"},
        ),
    )

    assert outcome.skipped == [GOALS]
    assert outcome.status is SyncStatus.PARTIAL_FAILURE
    assert len(fake_gateway.stored(owner_id, WALLETS)) == 1
    assert fake_gateway.profiles[owner_id].theme is Theme.THEME3
    assert "goals is missing" in caplog.text


def test_validation_fault_only_blocks_its_target(
    reconciler: Reconciler, fake_gateway: InMemoryProfileGateway, owner_id: uuid.UUID
) -> None:
    reconciler.reconcile(owner_id, ProfileUpdate(goals=[make_goal("Existing")]))

    outcome = reconciler.reconcile(
        owner_id,
        ProfileUpdate(
            social_links=[make_social_link()],
            goals=[make_goal("Broken", None)],
            fields={"location": "Melbourne"},
        ),
    )

    assert set(outcome.rejected) == {GOALS}
    assert outcome.rejected[GOALS].field == "goals[0].target"
    assert outcome.status is SyncStatus.PARTIAL_FAILURE
    stored_goals = cast("list[GoalRecord]", fake_gateway.stored(owner_id, GOALS))
    assert [goal.title for goal in stored_goals] == ["Existing"]
    assert len(fake_gateway.stored(owner_id, LINKS)) == 1
    assert fake_gateway.profiles[owner_id].location == "Melbourne"

    with pytest.raises(ValidationFault):
        outcome.raise_for_rejections()


def test_invalid_scalar_field_is_rejected_after_collections(
    reconciler: Reconciler, fake_gateway: InMemoryProfileGateway, owner_id: uuid.UUID
) -> None:
    outcome = reconciler.reconcile(
        owner_id,
        ProfileUpdate(wallet_methods=[make_wallet_method()], fields={"theme": "neon"}),
    )

    assert set(outcome.rejected) == {SCALAR_TARGET}
    assert not outcome.fields_committed
    assert len(fake_gateway.stored(owner_id, WALLETS)) == 1
    assert fake_gateway.profiles[owner_id].theme is Theme.DEFAULT


def test_unexpected_fault_aborts_the_pass(
    reconciler: Reconciler, fake_gateway: InMemoryProfileGateway, owner_id: uuid.UUID
) -> None:
    fake_gateway.fail_on("upsert_collection", TransientIOFault("connection reset"))

    with pytest.raises(TransientIOFault):
        reconciler.reconcile(
            owner_id,
            ProfileUpdate(
                wallet_methods=[make_wallet_method()],
                social_links=[make_social_link()],
                goals=[make_goal()],
                fields={"bio": "never written"},
            ),
        )

    assert len(fake_gateway.stored(owner_id, WALLETS)) == 1
    assert fake_gateway.stored(owner_id, GOALS) == []
    assert fake_gateway.profiles[owner_id].bio is None


def test_same_request_references_follow_new_wallet_ids(
    reconciler: Reconciler, fake_gateway: InMemoryProfileGateway, owner_id: uuid.UUID
) -> None:
    first = reconciler.reconcile(owner_id, ProfileUpdate(wallet_methods=[make_wallet_method()]))
    old_id = first.committed[WALLETS][0].id
    assert old_id is not None

    outcome = reconciler.reconcile(
        owner_id,
        ProfileUpdate(
            wallet_methods=[make_wallet_method(id=old_id, name="PayPal renamed")],
            social_links=[make_social_link(wallet_method_id=old_id)],
            goals=[make_goal(wallet_method_id=old_id)],
        ),
    )

    new_id = outcome.committed[WALLETS][0].id
    assert new_id not in {None, old_id}
    link = cast("list[SocialLinkRecord]", fake_gateway.stored(owner_id, LINKS))[0]
    goal = cast("list[GoalRecord]", fake_gateway.stored(owner_id, GOALS))[0]
    assert link.wallet_method_id == new_id
    assert goal.wallet_method_id == new_id


def test_references_outside_the_update_are_not_rewired(
    reconciler: Reconciler, fake_gateway: InMemoryProfileGateway, owner_id: uuid.UUID
) -> None:
    first = reconciler.reconcile(owner_id, ProfileUpdate(wallet_methods=[make_wallet_method()]))
    old_id = first.committed[WALLETS][0].id
    reconciler.reconcile(owner_id, ProfileUpdate(goals=[make_goal(wallet_method_id=old_id)]))

    reconciler.reconcile(
        owner_id, ProfileUpdate(wallet_methods=[make_wallet_method(id=old_id)])
    )

    goal = cast("list[GoalRecord]", fake_gateway.stored(owner_id, GOALS))[0]
    wallets = cast("list[WalletMethodRecord]", fake_gateway.stored(owner_id, WALLETS))
    assert goal.wallet_method_id == old_id
    assert wallets[0].id != old_id


def test_rewire_ignores_unrelated_references() -> None:
    unrelated = uuid.uuid4()
    update = ProfileUpdate(goals=[make_goal(wallet_method_id=unrelated)])
    before = [make_wallet_method(id=uuid.uuid4())]
    after = [WalletMethodRecord(id=uuid.uuid4())]

    rewired = rewire_wallet_references(update, before=before, after=after)

    assert rewired.goals is not None
    assert rewired.goals[0].wallet_method_id == unrelated
