"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class CollectionName(StrEnum):
    WALLET_METHODS = "wallet_methods"
    SOCIAL_LINKS = "social_links"
    GOALS = "goals"


class WalletMethodType(StrEnum):
    EXTERNAL = "external"
    PAYID = "payid"
    BANK = "bank"


class Platform(StrEnum):
    """Closed set of social platforms known to storage."""

    INSTAGRAM = "instagram"
    TWITTER = "twitter"
    YOUTUBE = "youtube"
    TIKTOK = "tiktok"
    ONLYFANS = "onlyfans"
    TWITCH = "twitch"
    DISCORD = "discord"
    LINKEDIN = "linkedin"
    CUSTOM = "custom"


class Theme(StrEnum):
    DEFAULT = "default"
    THEME1 = "theme1"
    THEME2 = "theme2"
    THEME3 = "theme3"


class ImageKind(StrEnum):
    AVATAR = "avatar"
    BANNER = "banner"
    SOCIAL_PHOTO = "social_photo"
