"""Draft-side aggregate: what the editor reads and writes.

Values here are UI-native. Money is in major units (dollars) and enum-like
fields may still hold raw user input until they pass the transformers.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Final

from profilesync.domain.model.enums import CollectionName, Platform, Theme, WalletMethodType

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import datetime
    from uuid import UUID


SCALAR_FIELDS: Final[frozenset[str]] = frozenset(
    {
        "display_name",
        "bio",
        "avatar_url",
        "banner_url",
        "location",
        "theme",
        "show_social_links",
        "show_payment_methods",
        "show_goals",
        "show_about",
    }
)


@dataclass(kw_only=True, slots=True)
class WalletDetails:
    email: str | None = None
    phone: str | None = None
    bsb: str | None = None
    account: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, object] | None) -> WalletDetails:
        if not data:
            return cls()
        known = {item.name for item in fields(cls)}
        return cls(**{key: str(value) for key, value in data.items() if key in known and value})

    def to_dict(self) -> dict[str, str]:
        values = {item.name: getattr(self, item.name) for item in fields(self)}
        return {key: value for key, value in values.items() if value}


@dataclass(kw_only=True)
class WalletMethod:
    id: UUID | None = None
    type: WalletMethodType | str = WalletMethodType.EXTERNAL
    platform: str = "custom"
    name: str = ""
    handle: str | None = None
    url: str | None = None
    details: WalletDetails = field(default_factory=WalletDetails)
    enabled: bool = True
    order_index: int = 0


@dataclass(kw_only=True)
class SocialLink:
    """A social profile link.

    ``platform`` keeps whatever the user typed; ``normalized_platform`` is
    resolved once when the link enters the draft store or comes back from storage.
    """

    id: UUID | None = None
    platform: str = ""
    normalized_platform: Platform | None = None
    username: str = ""
    url: str = ""
    photo_url: str | None = None
    photo_caption: str | None = None
    wallet_method_id: UUID | None = None


@dataclass(kw_only=True)
class Goal:
    id: UUID | None = None
    title: str = ""
    description: str = ""
    target: float | None = None
    current: float | None = 0.0
    wallet_method_id: UUID | None = None
    active: bool = True


@dataclass(kw_only=True)
class ProfileDraft:
    owner_id: UUID
    username: str = ""

    display_name: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    banner_url: str | None = None
    location: str | None = None
    theme: Theme | str = Theme.DEFAULT

    show_social_links: bool = True
    show_payment_methods: bool = True
    show_goals: bool = True
    show_about: bool = True

    created_at: datetime | None = None
    updated_at: datetime | None = None

    wallet_methods: list[WalletMethod] = field(default_factory=list["WalletMethod"])
    social_links: list[SocialLink] = field(default_factory=list["SocialLink"])
    goals: list[Goal] = field(default_factory=list["Goal"])

    def collection(
        self, name: CollectionName
    ) -> list[WalletMethod] | list[SocialLink] | list[Goal]:
        match name:
            case CollectionName.WALLET_METHODS:
                return self.wallet_methods
            case CollectionName.SOCIAL_LINKS:
                return self.social_links
            case CollectionName.GOALS:
                return self.goals

    def scalar_fields(self) -> dict[str, object]:
        return {name: getattr(self, name) for name in sorted(SCALAR_FIELDS)}

    def wallet_method(self, wallet_method_id: UUID | None) -> WalletMethod | None:
        """Follow a weak reference; dangling or empty ids resolve to ``None``."""

        if wallet_method_id is None:
            return None
        for method in self.wallet_methods:
            if method.id == wallet_method_id:
                return method
        return None
