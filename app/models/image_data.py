from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class UploadedImage(BaseModel):
    """Transient upload as received from the client; never persisted as-is."""

    data: bytes = Field(repr=False)
    mime_type: str
    filename: str | None = None

    @field_validator("mime_type")
    @classmethod
    def _bare_mime_type(cls, value: str) -> str:
        # "IMAGE/SVG+XML; charset=utf-8" -> "image/svg+xml"
        return value.split(";", 1)[0].strip().lower()

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def is_vector(self) -> bool:
        return self.mime_type == "image/svg+xml"


class ImageData(BaseModel):
    width: int = Field(..., ge=1)
    height: int = Field(..., ge=1)
    mime_type: str
    resolution: str | None = None  # e.g., "1024x768"
