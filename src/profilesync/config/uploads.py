"""Image-upload service configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from .env import require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_UPLOAD_PATH = "/upload"


@dataclass(frozen=True, slots=True)
class UploadConfig:
    """Holds the upload service endpoint and credentials."""

    base_url: str
    token: str
    upload_path: str = DEFAULT_UPLOAD_PATH
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None

    def resilience(self) -> ResilienceConfig:
        return ResilienceConfig(
            name="uploads",
            base_url=self.base_url,
            retry=self.retry,
            ratelimit=self.ratelimit,
            default_headers={"Authorization": f"Bearer {self.token}"},
        )


def get_upload_config() -> UploadConfig:
    values = require_env_vars(("PROFILESYNC_UPLOAD_URL", "PROFILESYNC_UPLOAD_TOKEN"))
    upload_path = os.getenv("PROFILESYNC_UPLOAD_PATH") or DEFAULT_UPLOAD_PATH
    return UploadConfig(
        base_url=values["PROFILESYNC_UPLOAD_URL"],
        token=values["PROFILESYNC_UPLOAD_TOKEN"],
        upload_path=upload_path,
    )
