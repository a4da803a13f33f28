"""Editing session: the entry point UI components call with their updates.

Every cycle follows the same path::

    IDLE -> SUBMITTING -> SUCCESS | PARTIAL_FAILURE | FATAL -> IDLE

The optimistic draft is applied first. SUCCESS and PARTIAL_FAILURE end with a
refresh from storage; FATAL keeps the optimistic draft and re-raises.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Literal

from profilesync.config.sync import SyncConfig
from profilesync.domain.draft_store import DraftStore
from profilesync.domain.model import ImageKind
from profilesync.domain.onboarding import is_new_profile
from profilesync.domain.sync import ProfileUpdate, Reconciler, RefreshLoader, SyncStatus
from profilesync.domain.transformers import utcnow

if TYPE_CHECKING:
    from collections.abc import Callable
    from concurrent.futures import Future
    from datetime import datetime
    from types import TracebackType
    from uuid import UUID

    from profilesync.domain.model import ProfileDraft
    from profilesync.domain.ports import ImageUploader, ProfileGateway
    from profilesync.domain.sync import SyncOutcome

log = logging.getLogger(__name__)

_IMAGE_FIELDS = {ImageKind.AVATAR: "avatar_url", ImageKind.BANNER: "banner_url"}


class ProfileEditor:
    def __init__(
        self,
        *,
        store: DraftStore,
        gateway: ProfileGateway,
        config: SyncConfig | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.store = store
        self.config = config or SyncConfig()
        self.clock = clock
        self.reconciler = Reconciler(gateway, clock=clock)
        self.loader = RefreshLoader(gateway)
        self._executor: ThreadPoolExecutor | None = None
        self._executor_lock = threading.Lock()
        self._last_outcome: SyncOutcome | None = None

    @classmethod
    def open(
        cls,
        owner_id: UUID,
        gateway: ProfileGateway,
        *,
        config: SyncConfig | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> ProfileEditor:
        """Load the owner's profile and start a session on it."""

        draft = RefreshLoader(gateway).load(owner_id)
        log.info("Opened editor for owner %s", owner_id)
        return cls(store=DraftStore(draft), gateway=gateway, config=config, clock=clock)

    @property
    def owner_id(self) -> UUID:
        return self.store.owner_id

    @property
    def draft(self) -> ProfileDraft:
        return self.store.snapshot()

    @property
    def last_outcome(self) -> SyncOutcome | None:
        return self._last_outcome

    def update(self, update: ProfileUpdate) -> SyncOutcome:
        """Apply ``update`` optimistically and synchronise it before returning."""

        self.store.apply(update)
        return self._synchronise(update)

    def submit(self, update: ProfileUpdate) -> Future[SyncOutcome]:
        """Apply ``update`` optimistically and synchronise it in the background.

        Calls are not serialised; when several overlap, the last refresh wins.
        """

        self.store.apply(update)
        return self._pool().submit(self._synchronise, update)

    def reload(self) -> ProfileDraft:
        return self.loader.refresh(self.owner_id, self.store)

    def is_new_profile(self) -> bool:
        return is_new_profile(self.draft, now=self.clock(), window=self.config.new_profile_window)

    def upload_image(
        self,
        uploader: ImageUploader,
        *,
        content: bytes,
        filename: str,
        kind: ImageKind,
        link_index: int | None = None,
    ) -> str:
        """Upload an image and store the returned URL on the profile verbatim."""

        links = self.draft.social_links
        if kind is ImageKind.SOCIAL_PHOTO:
            if link_index is None:
                raise ValueError("link_index is required for social photos")
            if not 0 <= link_index < len(links):
                raise IndexError(f"No social link at index {link_index}")

        url = uploader(content=content, filename=filename, owner_id=self.owner_id, kind=kind)
        log.info("Uploaded %s for owner %s", kind, self.owner_id)

        if kind is ImageKind.SOCIAL_PHOTO and link_index is not None:
            links[link_index].photo_url = url
            self.update(ProfileUpdate(social_links=links))
        else:
            self.update(ProfileUpdate(fields={_IMAGE_FIELDS[kind]: url}))
        return url

    def close(self) -> None:
        with self._executor_lock:
            if self._executor is not None:
                self._executor.shutdown(wait=True)
                self._executor = None

    def __enter__(self) -> ProfileEditor:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        self.close()
        return False

    def _synchronise(self, update: ProfileUpdate) -> SyncOutcome:
        log.info("%s owner %s: %s", SyncStatus.SUBMITTING, self.owner_id, update.describe())
        try:
            outcome = self.reconciler.reconcile(self.owner_id, update)
        except Exception:
            log.warning(
                "%s owner %s: keeping optimistic draft for retry", SyncStatus.FATAL, self.owner_id
            )
            raise
        self._last_outcome = outcome
        self.loader.refresh(self.owner_id, self.store)
        log.info("%s owner %s", outcome.status, self.owner_id)
        outcome.raise_for_rejections()
        return outcome

    def _pool(self) -> ThreadPoolExecutor:
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.config.background_workers,
                    thread_name_prefix="profilesync",
                )
            return self._executor
