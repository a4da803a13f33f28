"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from profilesync.adapters.sqlalchemy import build_gateway, configured_engine, is_started, startup
from profilesync.adapters.sqlalchemy.migrations import HEAD, current_revision, upgrade
from profilesync.adapters.uploads import HttpImageUploader
from profilesync.config import get_sync_config
from profilesync.domain.editor import ProfileEditor
from profilesync.domain.sync import RefreshLoader

if TYPE_CHECKING:
    from uuid import UUID

    from profilesync.config import SyncConfig
    from profilesync.domain.model import ImageKind, ProfileDraft
    from profilesync.domain.ports import ImageUploader, ProfileGateway
    from profilesync.domain.sync import ProfileUpdate, SyncOutcome


log = getLogger(__name__)


def _default_gateway() -> ProfileGateway:
    if not is_started():
        startup()
    return build_gateway()


def migrate(*, revision: str = HEAD) -> str | None:
    """Upgrade the configured database to ``revision`` and return where it landed."""

    engine = configured_engine() or startup(migrate=False)
    upgrade(engine=engine, revision=revision)
    reached = current_revision(engine)
    log.info("Database schema at revision %s", reached)
    return reached


def create_profile(
    *,
    owner_id: UUID,
    username: str,
    gateway: ProfileGateway | None = None,
) -> ProfileDraft:
    effective_gateway = gateway or _default_gateway()
    effective_gateway.create_profile(owner_id, username)
    return RefreshLoader(effective_gateway).load(owner_id)


def load_profile(owner_id: UUID, *, gateway: ProfileGateway | None = None) -> ProfileDraft:
    return RefreshLoader(gateway or _default_gateway()).load(owner_id)


def open_editor(
    owner_id: UUID,
    *,
    gateway: ProfileGateway | None = None,
    config: SyncConfig | None = None,
) -> ProfileEditor:
    """Start an editing session on the owner's stored profile."""

    return ProfileEditor.open(
        owner_id,
        gateway or _default_gateway(),
        config=config or get_sync_config(),
    )


def apply_update(
    owner_id: UUID,
    update: ProfileUpdate,
    *,
    gateway: ProfileGateway | None = None,
) -> tuple[SyncOutcome, ProfileDraft]:
    """Run one synchronous update cycle and return the outcome with the refreshed draft."""

    with open_editor(owner_id, gateway=gateway) as editor:
        outcome = editor.update(update)
        log.info(
            "Update for owner %s finished with %s (skipped=%s)",
            owner_id,
            outcome.status,
            [str(name) for name in outcome.skipped],
        )
        return outcome, editor.draft


def upload_profile_image(
    owner_id: UUID,
    *,
    content: bytes,
    filename: str,
    kind: ImageKind,
    link_index: int | None = None,
    uploader: ImageUploader | None = None,
    gateway: ProfileGateway | None = None,
) -> str:
    with open_editor(owner_id, gateway=gateway) as editor:
        return editor.upload_image(
            uploader or HttpImageUploader(),
            content=content,
            filename=filename,
            kind=kind,
            link_index=link_index,
        )
