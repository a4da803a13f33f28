"""In-memory home of the profile draft the editor works on."""

from __future__ import annotations

import copy
import logging
import threading
from typing import TYPE_CHECKING

from profilesync.domain.identity import normalize_platform
from profilesync.domain.model import SCALAR_FIELDS, CollectionName, SocialLink

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence
    from uuid import UUID

    from profilesync.domain.model import Goal, ProfileDraft, WalletMethod
    from profilesync.domain.sync import ProfileUpdate

type DraftListener = Callable[[ProfileDraft], None]

log = logging.getLogger(__name__)


class DraftStore:
    """Holds the latest draft, optimistic or canonical.

    Local mutations never fail and never wait on storage. A refresh that lands
    later simply overwrites whatever is there ("last refresh wins").
    """

    def __init__(self, draft: ProfileDraft) -> None:
        self._draft = copy.deepcopy(draft)
        self._lock = threading.RLock()
        self._listeners: list[DraftListener] = []
        self._version = 0

    @property
    def owner_id(self) -> UUID:
        return self._draft.owner_id

    @property
    def version(self) -> int:
        return self._version

    def snapshot(self) -> ProfileDraft:
        with self._lock:
            return copy.deepcopy(self._draft)

    def replace_collection(
        self,
        name: CollectionName,
        items: Sequence[WalletMethod] | Sequence[SocialLink] | Sequence[Goal],
    ) -> None:
        copied = [copy.deepcopy(item) for item in items]
        for item in copied:
            if isinstance(item, SocialLink):
                item.normalized_platform = normalize_platform(item.platform)
        with self._lock:
            setattr(self._draft, name.value, copied)
            self._changed()

    def merge_scalar_fields(self, fields: Mapping[str, object]) -> None:
        with self._lock:
            for name, value in fields.items():
                if name not in SCALAR_FIELDS:
                    log.warning(
                        "Ignoring unknown profile field %s in draft; storage will reject it", name
                    )
                    continue
                setattr(self._draft, name, value)
            self._changed()

    def apply(self, update: ProfileUpdate) -> None:
        """Apply an update optimistically, before any storage call."""

        with self._lock:
            for name in CollectionName:
                items = update.collection(name)
                if items is not None:
                    self.replace_collection(name, items)
            if update.fields:
                self.merge_scalar_fields(update.fields)

    def absorb(self, draft: ProfileDraft) -> None:
        """Overwrite the draft with canonical state from storage."""

        if draft.owner_id != self._draft.owner_id:
            raise ValueError(
                f"Cannot absorb draft of owner {draft.owner_id} into store of {self.owner_id}"
            )
        with self._lock:
            self._draft = copy.deepcopy(draft)
            self._changed()

    def subscribe(self, listener: DraftListener) -> Callable[[], None]:
        """Register ``listener`` for every change; returns an unsubscribe callback."""

        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _changed(self) -> None:
        self._version += 1
        listeners = list(self._listeners)
        snapshot = copy.deepcopy(self._draft)
        for listener in listeners:
            try:
                listener(snapshot)
            except Exception:
                log.exception("Draft listener %r failed", listener)
