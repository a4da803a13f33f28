"""Identity resolution for social links.

Platform names arrive as free text ("IG", " X.com "). They are resolved once
against a closed alias table; storage only ever sees ``Platform`` members.
Draft rows are matched to persisted rows on the natural key
``(normalized platform, url)``.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from profilesync.domain.model import Platform, SocialLinkRecord

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

PLATFORM_ALIASES: Final[Mapping[str, Platform]] = MappingProxyType(
    {
        "instagram": Platform.INSTAGRAM,
        "ig": Platform.INSTAGRAM,
        "twitter": Platform.TWITTER,
        "x": Platform.TWITTER,
        "x.com": Platform.TWITTER,
        "youtube": Platform.YOUTUBE,
        "yt": Platform.YOUTUBE,
        "tiktok": Platform.TIKTOK,
        "onlyfans": Platform.ONLYFANS,
        "of": Platform.ONLYFANS,
        "twitch": Platform.TWITCH,
        "discord": Platform.DISCORD,
        "linkedin": Platform.LINKEDIN,
    }
)

type NaturalKey = tuple[Platform, str]


def normalize_platform(raw: str | None) -> Platform:
    """Map user input to a known platform; anything unrecognised is ``CUSTOM``."""

    if not raw:
        return Platform.CUSTOM
    return PLATFORM_ALIASES.get(raw.strip().lower(), Platform.CUSTOM)


def natural_key(record: SocialLinkRecord) -> NaturalKey:
    return record.platform, record.url


def find_match(
    platform: Platform,
    url: str,
    persisted: Iterable[SocialLinkRecord],
) -> SocialLinkRecord | None:
    """Return the first persisted row with the same platform and url.

    Urls are compared verbatim: ``https://x.com/a`` and ``https://x.com/a/``
    are different keys.
    """

    wanted: NaturalKey = (platform, url)
    for record in persisted:
        if natural_key(record) == wanted:
            return record
    return None
