"""Pydantic models describing the upload service payloads."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class UploadBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class UploadResponse(UploadBaseModel):
    url: str = Field(validation_alias=AliasChoices("url", "publicUrl", "public_url"))

    @field_validator("url")
    @classmethod
    def _require_non_blank(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("upload service returned an empty url")
        return stripped


class ErrorResponse(UploadBaseModel):
    error: str
    message: str | None = None
