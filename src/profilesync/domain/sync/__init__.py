"""Draft synchronization: strategies, reconciler and refresh loader."""

from __future__ import annotations

from .contracts import RECONCILE_ORDER, SCALAR_TARGET, ProfileUpdate, SyncOutcome, SyncStatus
from .reconciler import Reconciler, rewire_wallet_references
from .refresh import RefreshLoader
from .strategies import CollectionSyncStrategy, FullReplace, UpsertPreserve, default_strategies

__all__ = [
    "RECONCILE_ORDER",
    "SCALAR_TARGET",
    "CollectionSyncStrategy",
    "FullReplace",
    "ProfileUpdate",
    "Reconciler",
    "RefreshLoader",
    "SyncOutcome",
    "SyncStatus",
    "UpsertPreserve",
    "default_strategies",
    "rewire_wallet_references",
]
