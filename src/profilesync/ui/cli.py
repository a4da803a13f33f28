from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING
from uuid import UUID

from dotenv import load_dotenv

from profilesync.adapters.sqlalchemy.migrations import HEAD
from profilesync.app import (
    apply_update,
    create_profile,
    load_profile,
    migrate,
    upload_profile_image,
)
from profilesync.config import configure_logging
from profilesync.domain.errors import ValidationFault
from profilesync.domain.model import ImageKind
from profilesync.ui.schema import ProfileUpdatePayload, ProfileView

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from profilesync.domain.model import ProfileDraft
    from profilesync.domain.sync import ProfileUpdate

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manage creator payment profiles")
    subparsers = parser.add_subparsers(dest="command", required=True)

    migrate_cmd = subparsers.add_parser("migrate", help="Upgrade the database schema")
    migrate_cmd.add_argument(
        "--revision",
        type=str,
        default=HEAD,
        help="Target Alembic revision (default: %(default)s)",
    )

    profile = subparsers.add_parser("profile", help="Profile commands")
    profile_sub = profile.add_subparsers(dest="profile_command", required=True)

    profile_create = profile_sub.add_parser("create", help="Create an empty profile")
    profile_create.add_argument("--owner-id", type=str, required=True, help="Owner id (UUID)")
    profile_create.add_argument("--username", type=str, required=True, help="Public username")

    profile_show = profile_sub.add_parser("show", help="Print the stored profile as JSON")
    profile_show.add_argument("--owner-id", type=str, required=True, help="Owner id (UUID)")

    profile_update = profile_sub.add_parser("update", help="Apply an update file")
    profile_update.add_argument("--owner-id", type=str, required=True, help="Owner id (UUID)")
    profile_update.add_argument(
        "--file",
        type=Path,
        required=True,
        help="JSON file with changed fields and complete next collections",
    )

    upload = subparsers.add_parser("upload", help="Upload a profile image")
    upload.add_argument("--owner-id", type=str, required=True, help="Owner id (UUID)")
    upload.add_argument(
        "--kind",
        type=str,
        required=True,
        choices=[kind.value for kind in ImageKind],
        help="Which image slot the upload fills",
    )
    upload.add_argument("--file", type=Path, required=True, help="Image file to upload")
    upload.add_argument(
        "--link-index",
        type=int,
        help="Position of the social link whose photo is replaced (social_photo only)",
    )

    return parser.parse_args(list(argv))


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid UUID: {value}") from exc


def _read_update(path: Path) -> ProfileUpdate:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ValueError(f"Cannot read update file {path}: {exc}") from exc
    return ProfileUpdatePayload.model_validate_json(raw).to_domain()


def _print_draft(draft: ProfileDraft) -> None:
    sys.stdout.write(ProfileView.from_domain(draft).model_dump_json(indent=2))
    sys.stdout.write("\n")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    update: ProfileUpdate | None = None
    owner_id: UUID | None = None
    try:
        parsed_args = _parse_args(args_list)
        if parsed_args.command != "migrate":
            owner_id = _parse_uuid(parsed_args.owner_id)
        if parsed_args.command == "profile" and parsed_args.profile_command == "update":
            update = _read_update(parsed_args.file)
        if parsed_args.command == "upload":
            kind = ImageKind(parsed_args.kind)
            if kind is ImageKind.SOCIAL_PHOTO and parsed_args.link_index is None:
                raise ValueError("--link-index is required for social_photo uploads")  # noqa: TRY301
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "migrate":
            migrate(revision=parsed_args.revision)
        elif owner_id is None:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
        elif parsed_args.command == "profile" and parsed_args.profile_command == "create":
            draft = create_profile(owner_id=owner_id, username=parsed_args.username)
            log.info("Created profile %s for owner %s", draft.username, owner_id)
        elif parsed_args.command == "profile" and parsed_args.profile_command == "show":
            _print_draft(load_profile(owner_id))
        elif update is not None:
            _, draft = apply_update(owner_id, update)
            _print_draft(draft)
        elif parsed_args.command == "upload":
            url = upload_profile_image(
                owner_id,
                content=parsed_args.file.read_bytes(),
                filename=parsed_args.file.name,
                kind=ImageKind(parsed_args.kind),
                link_index=parsed_args.link_index,
            )
            log.info("Stored %s image at %s", parsed_args.kind, url)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except ValidationFault:
        log.exception("Rejected profile update")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
