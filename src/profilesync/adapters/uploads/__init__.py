"""Public interface for the image-upload adapter."""

from __future__ import annotations

from .client import HttpImageUploader
from .schema import ErrorResponse, UploadResponse

__all__ = ["ErrorResponse", "HttpImageUploader", "UploadResponse"]
