"""Heuristics for the first-run editor experience."""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from datetime import datetime

    from profilesync.domain.model import ProfileDraft

DEFAULT_NEW_PROFILE_WINDOW: Final[timedelta] = timedelta(minutes=60)


def _blank(value: str | None) -> bool:
    return not (value or "").strip()


def is_new_profile(
    draft: ProfileDraft,
    *,
    now: datetime,
    window: timedelta = DEFAULT_NEW_PROFILE_WINDOW,
) -> bool:
    """A profile is new if it was created recently and still holds almost nothing."""

    if draft.created_at is None:
        return False
    recently_created = draft.created_at > now - window
    has_minimal_data = (
        not draft.wallet_methods
        and not draft.social_links
        and _blank(draft.bio)
        and _blank(draft.avatar_url)
        and _blank(draft.banner_url)
    )
    return recently_created and has_minimal_data
