from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, cast

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from profilesync.adapters.sqlalchemy import SqlAlchemyProfileGateway
from profilesync.adapters.sqlalchemy.gateway import _translated_errors  # pyright: ignore[reportPrivateUsage]
from profilesync.domain.editor import ProfileEditor
from profilesync.domain.errors import (
    MissingCollectionFault,
    ProfileNotFoundFault,
    TransientIOFault,
    UnexpectedFault,
)
from profilesync.domain.model import (
    CollectionName,
    Goal,
    GoalRecord,
    Platform,
    SocialLink,
    SocialLinkRecord,
    Theme,
    WalletMethodRecord,
    WalletMethodType,
)
from profilesync.domain.sync import ProfileUpdate, Reconciler, RefreshLoader
from tests.helpers.profiles import BASE_TIME, make_goal, make_social_link, make_wallet_method

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from profilesync.domain.model import CollectionRecord
    from tests.helpers.profiles import FakeClock

WALLETS = CollectionName.WALLET_METHODS
LINKS = CollectionName.SOCIAL_LINKS
GOALS = CollectionName.GOALS


@pytest.fixture
def profile_owner(sqlite_gateway: SqlAlchemyProfileGateway, owner_id: uuid.UUID) -> uuid.UUID:
    sqlite_gateway.create_profile(owner_id, "creator")
    return owner_id


def _rows(
    gateway: SqlAlchemyProfileGateway, owner_id: uuid.UUID, name: CollectionName
) -> tuple[CollectionRecord, ...]:
    return gateway.load_collection(owner_id, name).rows


def _goal(title: str, order_index: int) -> GoalRecord:
    return GoalRecord(
        title=title,
        target_amount=1000,
        order_index=order_index,
        created_at=BASE_TIME,
        updated_at=BASE_TIME,
    )


def test_create_and_load_profile(
    sqlite_gateway: SqlAlchemyProfileGateway, owner_id: uuid.UUID
) -> None:
    created = sqlite_gateway.create_profile(owner_id, "creator")

    assert created.owner_id == owner_id
    assert created.username == "creator"
    assert created.theme is Theme.DEFAULT
    assert created.show_goals is True
    assert created.created_at is not None
    assert created.created_at.tzinfo is not None


def test_load_unknown_profile_raises(sqlite_gateway: SqlAlchemyProfileGateway) -> None:
    with pytest.raises(ProfileNotFoundFault):
        sqlite_gateway.load_profile(uuid.uuid4())


def test_duplicate_username_is_an_unexpected_fault(
    sqlite_gateway: SqlAlchemyProfileGateway, profile_owner: uuid.UUID
) -> None:
    with pytest.raises(UnexpectedFault) as excinfo:
        sqlite_gateway.create_profile(uuid.uuid4(), "creator")

    assert isinstance(excinfo.value.__cause__, IntegrityError)


def test_update_scalar_fields_round_trips_enums(
    sqlite_gateway: SqlAlchemyProfileGateway, profile_owner: uuid.UUID
) -> None:
    before = sqlite_gateway.load_profile(profile_owner)

    sqlite_gateway.update_scalar_fields(
        profile_owner, {"display_name": "Creator", "theme": Theme.THEME1, "show_about": False}
    )

    after = sqlite_gateway.load_profile(profile_owner)
    assert after.display_name == "Creator"
    assert after.theme is Theme.THEME1
    assert after.show_about is False
    assert after.created_at == before.created_at
    assert after.updated_at is not None
    assert before.updated_at is not None
    assert after.updated_at > before.updated_at


def test_update_scalar_fields_for_unknown_owner_raises(
    sqlite_gateway: SqlAlchemyProfileGateway,
) -> None:
    with pytest.raises(ProfileNotFoundFault):
        sqlite_gateway.update_scalar_fields(uuid.uuid4(), {"bio": "nobody"})


def test_replace_collection_assigns_ids_and_orders_rows(
    sqlite_gateway: SqlAlchemyProfileGateway, profile_owner: uuid.UUID
) -> None:
    committed = sqlite_gateway.replace_collection(
        profile_owner, GOALS, [_goal("Second", 1), _goal("First", 0)]
    )

    assert all(record.id is not None for record in committed)
    loaded = cast("tuple[GoalRecord, ...]", _rows(sqlite_gateway, profile_owner, GOALS))
    assert [goal.title for goal in loaded] == ["First", "Second"]
    assert {goal.id for goal in loaded} == {record.id for record in committed}


def test_replace_collection_only_touches_the_owner(
    sqlite_gateway: SqlAlchemyProfileGateway, profile_owner: uuid.UUID
) -> None:
    other_owner = uuid.uuid4()
    sqlite_gateway.create_profile(other_owner, "other")
    sqlite_gateway.replace_collection(other_owner, GOALS, [_goal("Theirs", 0)])

    sqlite_gateway.replace_collection(profile_owner, GOALS, [])

    assert len(sqlite_gateway.load_collection(other_owner, GOALS).rows) == 1


def test_replace_collection_rolls_back_when_insert_fails(
    sqlite_gateway: SqlAlchemyProfileGateway, profile_owner: uuid.UUID
) -> None:
    sqlite_gateway.replace_collection(profile_owner, GOALS, [_goal("Keep", 0)])
    broken = GoalRecord(title=None, order_index=0)  # pyright: ignore[reportArgumentType]

    with pytest.raises(UnexpectedFault):
        sqlite_gateway.replace_collection(profile_owner, GOALS, [broken])

    loaded = cast("tuple[GoalRecord, ...]", _rows(sqlite_gateway, profile_owner, GOALS))
    assert [goal.title for goal in loaded] == ["Keep"]


def test_wallet_method_details_survive_storage(
    sqlite_gateway: SqlAlchemyProfileGateway, profile_owner: uuid.UUID
) -> None:
    record = WalletMethodRecord(
        type=WalletMethodType.BANK,
        name="Bank",
        details={"bsb": "062-000", "account": "12345678"},
    )

    sqlite_gateway.replace_collection(profile_owner, WALLETS, [record])

    loaded = cast("tuple[WalletMethodRecord, ...]", _rows(sqlite_gateway, profile_owner, WALLETS))
    assert loaded[0].type is WalletMethodType.BANK
    assert loaded[0].details == {"bsb": "062-000", "account": "12345678"}


def test_upsert_collection_updates_in_place_and_inserts_new_rows(
    sqlite_gateway: SqlAlchemyProfileGateway, profile_owner: uuid.UUID, clock: FakeClock
) -> None:
    [existing] = sqlite_gateway.upsert_collection(
        profile_owner,
        LINKS,
        [SocialLinkRecord(platform=Platform.INSTAGRAM, label="a", url="https://instagram.com/a")],
    )
    assert isinstance(existing, SocialLinkRecord)
    assert existing.id is not None

    edited = SocialLinkRecord(
        id=existing.id,
        platform=Platform.INSTAGRAM,
        label="renamed",
        url="https://instagram.com/a",
        created_at=clock(),
        updated_at=clock(),
    )
    added = SocialLinkRecord(platform=Platform.TIKTOK, url="https://tiktok.com/@a", display_order=1)
    committed = sqlite_gateway.upsert_collection(profile_owner, LINKS, [edited, added])

    assert committed[0].id == existing.id
    assert committed[1].id is not None
    loaded = cast("tuple[SocialLinkRecord, ...]", _rows(sqlite_gateway, profile_owner, LINKS))
    assert [link.label for link in loaded] == ["renamed", ""]
    assert loaded[0].created_at == existing.created_at


def test_delete_rows_reports_count(
    sqlite_gateway: SqlAlchemyProfileGateway, profile_owner: uuid.UUID
) -> None:
    committed = sqlite_gateway.replace_collection(
        profile_owner, GOALS, [_goal("One", 0), _goal("Two", 1)]
    )
    ids = [record.id for record in committed if record.id is not None]

    assert sqlite_gateway.delete_rows(GOALS, [ids[0], uuid.uuid4()]) == 1
    assert sqlite_gateway.delete_rows(GOALS, []) == 0
    assert len(sqlite_gateway.load_collection(profile_owner, GOALS).rows) == 1


def test_partial_schema_reports_missing_collection(
    partial_sqlite_engine: Engine, owner_id: uuid.UUID
) -> None:
    gateway = SqlAlchemyProfileGateway(partial_sqlite_engine)
    gateway.create_profile(owner_id, "creator")

    loaded = gateway.load_collection(owner_id, GOALS)

    assert loaded.missing
    assert loaded.rows == ()
    assert not gateway.load_collection(owner_id, LINKS).missing
    with pytest.raises(MissingCollectionFault) as excinfo:
        gateway.replace_collection(owner_id, GOALS, [_goal("Nope", 0)])
    assert excinfo.value.collection is GOALS


def test_reconcile_against_partial_schema_skips_missing_goals(
    partial_sqlite_engine: Engine, owner_id: uuid.UUID
) -> None:
    gateway = SqlAlchemyProfileGateway(partial_sqlite_engine)
    gateway.create_profile(owner_id, "creator")

    outcome = Reconciler(gateway).reconcile(
        owner_id,
        ProfileUpdate(
            wallet_methods=[make_wallet_method()],
            social_links=[make_social_link()],
            goals=[make_goal()],
            fields={"bio": "still saved"},
        ),
    )
    draft = RefreshLoader(gateway).load(owner_id)

    assert outcome.skipped == [GOALS]
    assert len(draft.wallet_methods) == 1
    assert len(draft.social_links) == 1
    assert draft.goals == []
    assert draft.bio == "still saved"


def test_social_link_ids_are_stable_across_repeated_syncs(
    sqlite_gateway: SqlAlchemyProfileGateway, profile_owner: uuid.UUID
) -> None:
    reconciler = Reconciler(sqlite_gateway)
    links = [
        make_social_link("ig", "https://instagram.com/a"),
        make_social_link("x", "https://x.com/a"),
    ]

    reconciler.reconcile(profile_owner, ProfileUpdate(social_links=links))
    first = RefreshLoader(sqlite_gateway).load(profile_owner).social_links
    reconciler.reconcile(profile_owner, ProfileUpdate(social_links=first))
    second = RefreshLoader(sqlite_gateway).load(profile_owner).social_links

    assert [link.id for link in second] == [link.id for link in first]


def test_connectivity_errors_become_transient_faults() -> None:
    error = OperationalError("SELECT 1", {}, Exception("database is locked"))

    with pytest.raises(TransientIOFault), _translated_errors(None):
        raise error


def test_missing_table_errors_name_the_collection() -> None:
    error = OperationalError("SELECT 1", {}, Exception("no such table: goal"))

    with pytest.raises(MissingCollectionFault), _translated_errors(GOALS):
        raise error


def test_editor_relabel_keeps_link_identity_and_leaves_goals_alone(
    sqlite_gateway: SqlAlchemyProfileGateway, profile_owner: uuid.UUID, clock: FakeClock
) -> None:
    editor = ProfileEditor.open(profile_owner, sqlite_gateway, clock=clock)
    editor.update(
        ProfileUpdate(
            social_links=[SocialLink(platform="Twitter", username="a", url="https://x.com/a")],
            goals=[Goal(title="New studio", target=1000, current=250)],
        )
    )

    (link,) = cast("tuple[SocialLinkRecord, ...]", _rows(sqlite_gateway, profile_owner, LINKS))
    (goal,) = cast("tuple[GoalRecord, ...]", _rows(sqlite_gateway, profile_owner, GOALS))
    assert link.platform is Platform.TWITTER
    assert (goal.target_amount, goal.current_amount) == (100000, 25000)
    assert editor.draft.goals[0].target == 1000
    assert editor.draft.goals[0].current == 250

    relabelled = editor.draft.social_links[0]
    relabelled.username = "studio"
    editor.update(ProfileUpdate(social_links=[relabelled]))

    (after,) = cast("tuple[SocialLinkRecord, ...]", _rows(sqlite_gateway, profile_owner, LINKS))
    assert after.id == link.id
    assert after.label == "studio"
    assert after.created_at == link.created_at
    assert after.updated_at is not None
    assert link.updated_at is not None
    assert after.updated_at > link.updated_at
    assert _rows(sqlite_gateway, profile_owner, GOALS) == (goal,)
