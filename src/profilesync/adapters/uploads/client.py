"""HTTP client for the image-upload service."""

from __future__ import annotations

import asyncio
import mimetypes
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from profilesync.adapters.http_resilience import ResilientClient
from profilesync.config import UploadConfig, get_upload_config
from profilesync.domain.errors import UploadFault
from profilesync.domain.ports import ImageUploader

from .schema import ErrorResponse, UploadResponse

if TYPE_CHECKING:
    from collections.abc import Callable
    from uuid import UUID

    from profilesync.config import ResilienceConfig
    from profilesync.domain.model import ImageKind

log = getLogger(__name__)

_DEFAULT_CONTENT_TYPE = "application/octet-stream"


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def _object_path(owner_id: UUID, kind: ImageKind, filename: str) -> str:
    return f"{owner_id}/{kind}/{filename}"


@dataclass(slots=True)
class HttpImageUploader:
    config: UploadConfig = field(default_factory=get_upload_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def __call__(
        self,
        *,
        content: bytes,
        filename: str,
        owner_id: UUID,
        kind: ImageKind,
    ) -> str:
        return asyncio.run(
            self._upload(content=content, filename=filename, owner_id=owner_id, kind=kind)
        )

    async def _upload(
        self,
        *,
        content: bytes,
        filename: str,
        owner_id: UUID,
        kind: ImageKind,
    ) -> str:
        content_type = mimetypes.guess_type(filename)[0] or _DEFAULT_CONTENT_TYPE
        files = {"file": (filename, content, content_type)}
        data = {
            "owner_id": str(owner_id),
            "kind": str(kind),
            "path": _object_path(owner_id, kind, filename),
        }

        async with self.client_factory(self.config.resilience()) as client:
            try:
                response = await client.post(self.config.upload_path, files=files, data=data)
            except httpx.HTTPError as exc:
                log.warning(f"Upload of {filename} for {owner_id} failed: {exc}")
                raise UploadFault(f"Upload request failed: {exc}") from exc

        return self._parse(response)

    @staticmethod
    def _parse(response: httpx.Response) -> str:
        if response.is_error:
            detail = response.reason_phrase
            try:
                error_payload = ErrorResponse.model_validate(response.json())
            except (ValueError, ValidationError):
                pass
            else:
                detail = error_payload.message or error_payload.error
            log.error(f"Upload service returned {response.status_code}: {detail}")
            raise UploadFault(f"Upload rejected ({response.status_code}): {detail}")

        try:
            payload = UploadResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise UploadFault("Unexpected upload service response payload") from exc
        return payload.url


if TYPE_CHECKING:
    _uploader_check: ImageUploader = HttpImageUploader()
