"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import LoadedCollection, ProfileGateway
from .uploads import ImageUploader

__all__ = [
    "ImageUploader",
    "LoadedCollection",
    "ProfileGateway",
]
