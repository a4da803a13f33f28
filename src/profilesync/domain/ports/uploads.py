"""Port for the image-upload collaborator."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from uuid import UUID

    from profilesync.domain.model import ImageKind


@runtime_checkable
class ImageUploader(Protocol):
    """Store an image somewhere and return an opaque URL for it.

    Implementations raise ``UploadFault`` on failure. Callers never interpret
    the returned URL.
    """

    def __call__(
        self,
        *,
        content: bytes,
        filename: str,
        owner_id: UUID,
        kind: ImageKind,
    ) -> str: ...
