"""Storage-native rows exchanged with the persistence gateway.

Money is in integer minor units and enums are already resolved. Field names
match storage columns; ``owner_id`` is supplied by the gateway call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from profilesync.domain.model.enums import CollectionName, Platform, Theme, WalletMethodType

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID


@dataclass(kw_only=True, slots=True)
class ProfileRecord:
    owner_id: UUID
    username: str
    display_name: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    banner_url: str | None = None
    location: str | None = None
    theme: Theme = Theme.DEFAULT
    show_social_links: bool = True
    show_payment_methods: bool = True
    show_goals: bool = True
    show_about: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(kw_only=True, slots=True)
class WalletMethodRecord:
    id: UUID | None = None
    type: WalletMethodType = WalletMethodType.EXTERNAL
    platform: str = "custom"
    name: str = ""
    handle: str | None = None
    url: str | None = None
    details: dict[str, str] = field(default_factory=dict[str, str])
    enabled: bool = True
    order_index: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(kw_only=True, slots=True)
class SocialLinkRecord:
    id: UUID | None = None
    platform: Platform = Platform.CUSTOM
    label: str = ""
    url: str = ""
    photo_url: str | None = None
    photo_caption: str | None = None
    wallet_method_id: UUID | None = None
    enabled: bool = True
    display_order: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(kw_only=True, slots=True)
class GoalRecord:
    id: UUID | None = None
    title: str = ""
    description: str = ""
    target_amount: int = 0
    current_amount: int = 0
    wallet_method_id: UUID | None = None
    is_active: bool = True
    order_index: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


type CollectionRecord = WalletMethodRecord | SocialLinkRecord | GoalRecord

RECORD_TYPE_BY_COLLECTION: Final[dict[CollectionName, type[CollectionRecord]]] = {
    CollectionName.WALLET_METHODS: WalletMethodRecord,
    CollectionName.SOCIAL_LINKS: SocialLinkRecord,
    CollectionName.GOALS: GoalRecord,
}
