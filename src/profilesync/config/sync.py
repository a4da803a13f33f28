"""Synchronization defaults for editor sessions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from .env import env_int

DEFAULT_BACKGROUND_WORKERS = 2
DEFAULT_NEW_PROFILE_WINDOW_MINUTES = 60


@dataclass(frozen=True, slots=True)
class SyncConfig:
    background_workers: int = DEFAULT_BACKGROUND_WORKERS
    new_profile_window: timedelta = timedelta(minutes=DEFAULT_NEW_PROFILE_WINDOW_MINUTES)


def get_sync_config() -> SyncConfig:
    workers = env_int(
        "PROFILESYNC_BACKGROUND_WORKERS", DEFAULT_BACKGROUND_WORKERS, minimum=1
    )
    window = env_int(
        "PROFILESYNC_NEW_PROFILE_WINDOW_MINUTES",
        DEFAULT_NEW_PROFILE_WINDOW_MINUTES,
        minimum=0,
    )
    return SyncConfig(background_workers=workers, new_profile_window=timedelta(minutes=window))
