"""Pydantic models for the JSON the CLI reads and prints."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from typing import Any
from uuid import UUID  # noqa: TC003

from pydantic import BaseModel, ConfigDict, Field

from profilesync.domain.model import (
    Goal,
    ProfileDraft,
    SocialLink,
    WalletDetails,
    WalletMethod,
)
from profilesync.domain.sync import ProfileUpdate


class PayloadModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


class WalletMethodPayload(PayloadModel):
    id: UUID | None = None
    type: str = "external"
    platform: str = "custom"
    name: str = ""
    handle: str | None = None
    url: str | None = None
    details: dict[str, str] = Field(default_factory=dict)
    enabled: bool = True
    order_index: int = 0

    def to_domain(self) -> WalletMethod:
        return WalletMethod(
            id=self.id,
            type=self.type,
            platform=self.platform,
            name=self.name,
            handle=self.handle,
            url=self.url,
            details=WalletDetails.from_mapping(self.details),
            enabled=self.enabled,
            order_index=self.order_index,
        )

    @classmethod
    def from_domain(cls, method: WalletMethod) -> WalletMethodPayload:
        return cls(
            id=method.id,
            type=str(method.type),
            platform=method.platform,
            name=method.name,
            handle=method.handle,
            url=method.url,
            details=method.details.to_dict(),
            enabled=method.enabled,
            order_index=method.order_index,
        )


class SocialLinkPayload(PayloadModel):
    id: UUID | None = None
    platform: str = ""
    username: str = ""
    url: str = ""
    photo_url: str | None = None
    photo_caption: str | None = None
    wallet_method_id: UUID | None = None

    def to_domain(self) -> SocialLink:
        return SocialLink(
            id=self.id,
            platform=self.platform,
            username=self.username,
            url=self.url,
            photo_url=self.photo_url,
            photo_caption=self.photo_caption,
            wallet_method_id=self.wallet_method_id,
        )

    @classmethod
    def from_domain(cls, link: SocialLink) -> SocialLinkPayload:
        return cls(
            id=link.id,
            platform=link.platform,
            username=link.username,
            url=link.url,
            photo_url=link.photo_url,
            photo_caption=link.photo_caption,
            wallet_method_id=link.wallet_method_id,
        )


class GoalPayload(PayloadModel):
    """Goal amounts are in major units (dollars), as the editor shows them."""

    id: UUID | None = None
    title: str = ""
    description: str = ""
    target: float | None = None
    current: float | None = 0.0
    wallet_method_id: UUID | None = None
    active: bool = True

    def to_domain(self) -> Goal:
        return Goal(
            id=self.id,
            title=self.title,
            description=self.description,
            target=self.target,
            current=self.current,
            wallet_method_id=self.wallet_method_id,
            active=self.active,
        )

    @classmethod
    def from_domain(cls, goal: Goal) -> GoalPayload:
        return cls(
            id=goal.id,
            title=goal.title,
            description=goal.description,
            target=goal.target,
            current=goal.current,
            wallet_method_id=goal.wallet_method_id,
            active=goal.active,
        )


class ProfileUpdatePayload(PayloadModel):
    """An update file: omitted collections are left untouched, ``[]`` clears one."""

    fields: dict[str, Any] = Field(default_factory=dict)
    wallet_methods: list[WalletMethodPayload] | None = None
    social_links: list[SocialLinkPayload] | None = None
    goals: list[GoalPayload] | None = None

    def to_domain(self) -> ProfileUpdate:
        return ProfileUpdate(
            fields=dict(self.fields),
            wallet_methods=(
                None
                if self.wallet_methods is None
                else [method.to_domain() for method in self.wallet_methods]
            ),
            social_links=(
                None
                if self.social_links is None
                else [link.to_domain() for link in self.social_links]
            ),
            goals=None if self.goals is None else [goal.to_domain() for goal in self.goals],
        )


class ProfileView(BaseModel):
    owner_id: UUID
    username: str
    display_name: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    banner_url: str | None = None
    location: str | None = None
    theme: str
    show_social_links: bool
    show_payment_methods: bool
    show_goals: bool
    show_about: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None
    wallet_methods: list[WalletMethodPayload]
    social_links: list[SocialLinkPayload]
    goals: list[GoalPayload]

    @classmethod
    def from_domain(cls, draft: ProfileDraft) -> ProfileView:
        return cls(
            owner_id=draft.owner_id,
            username=draft.username,
            display_name=draft.display_name,
            bio=draft.bio,
            avatar_url=draft.avatar_url,
            banner_url=draft.banner_url,
            location=draft.location,
            theme=str(draft.theme),
            show_social_links=draft.show_social_links,
            show_payment_methods=draft.show_payment_methods,
            show_goals=draft.show_goals,
            show_about=draft.show_about,
            created_at=draft.created_at,
            updated_at=draft.updated_at,
            wallet_methods=[WalletMethodPayload.from_domain(m) for m in draft.wallet_methods],
            social_links=[SocialLinkPayload.from_domain(link) for link in draft.social_links],
            goals=[GoalPayload.from_domain(goal) for goal in draft.goals],
        )
