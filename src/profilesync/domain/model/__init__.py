"""Public domain model surface."""

from __future__ import annotations

from profilesync.domain.model.enums import (
    CollectionName,
    ImageKind,
    Platform,
    Theme,
    WalletMethodType,
)
from profilesync.domain.model.profile import (
    SCALAR_FIELDS,
    Goal,
    ProfileDraft,
    SocialLink,
    WalletDetails,
    WalletMethod,
)
from profilesync.domain.model.records import (
    RECORD_TYPE_BY_COLLECTION,
    CollectionRecord,
    GoalRecord,
    ProfileRecord,
    SocialLinkRecord,
    WalletMethodRecord,
)

__all__ = [  # noqa: RUF022
    # draft
    "ProfileDraft",
    "WalletMethod",
    "WalletDetails",
    "SocialLink",
    "Goal",
    "SCALAR_FIELDS",
    # storage records
    "ProfileRecord",
    "WalletMethodRecord",
    "SocialLinkRecord",
    "GoalRecord",
    "CollectionRecord",
    "RECORD_TYPE_BY_COLLECTION",
    # enums
    "CollectionName",
    "ImageKind",
    "Platform",
    "Theme",
    "WalletMethodType",
]
