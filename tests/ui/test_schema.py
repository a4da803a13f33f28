from __future__ import annotations

import uuid

import pytest
from pydantic import ValidationError

from profilesync.domain.model import Goal, ProfileDraft, SocialLink, WalletDetails, WalletMethod
from profilesync.ui.schema import ProfileUpdatePayload, ProfileView


def test_update_payload_distinguishes_untouched_from_cleared() -> None:
    payload = ProfileUpdatePayload.model_validate({"wallet_methods": [], "fields": {"bio": "Hi"}})

    update = payload.to_domain()

    assert update.wallet_methods == []
    assert update.social_links is None
    assert update.goals is None
    assert update.touched_collections() == ("wallet_methods",)


def test_update_payload_builds_domain_objects() -> None:
    wallet_id = uuid.uuid4()
    payload = ProfileUpdatePayload.model_validate(
        {
            "wallet_methods": [
                {"id": str(wallet_id), "type": "bank", "name": "Bank", "details": {"bsb": "062"}}
            ],
            "social_links": [{"platform": "IG", "url": "https://instagram.com/a"}],
            "goals": [{"title": "Mic", "target": "120.5", "wallet_method_id": str(wallet_id)}],
        }
    )

    update = payload.to_domain()

    assert update.wallet_methods == [
        WalletMethod(id=wallet_id, type="bank", name="Bank", details=WalletDetails(bsb="062"))
    ]
    assert update.social_links == [SocialLink(platform="IG", url="https://instagram.com/a")]
    assert update.goals == [Goal(title="Mic", target=120.5, wallet_method_id=wallet_id)]


def test_update_payload_rejects_unknown_keys() -> None:
    with pytest.raises(ValidationError):
        ProfileUpdatePayload.model_validate({"goals": [{"title": "Mic", "amount": 3}]})


def test_profile_view_serialises_draft() -> None:
    owner_id = uuid.uuid4()
    draft = ProfileDraft(
        owner_id=owner_id,
        username="creator",
        wallet_methods=[WalletMethod(name="PayID", details=WalletDetails(email="a@b.c"))],
        goals=[Goal(title="Mic", target=12.35, current=1.01)],
    )

    view = ProfileView.from_domain(draft)

    dumped = view.model_dump(mode="json")
    assert dumped["owner_id"] == str(owner_id)
    assert dumped["wallet_methods"][0]["details"] == {"email": "a@b.c"}
    assert dumped["goals"][0]["target"] == 12.35
