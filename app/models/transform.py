from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class OutputFormat(str, Enum):
    JPEG = "jpeg"
    PNG = "png"
    GIF = "gif"
    SVG = "svg"

    @classmethod
    def parse(cls, value: str | None) -> "OutputFormat":
        """Map a caller-supplied format string onto the closed set.

        ``jpg`` is accepted as an alias for ``jpeg``; anything else outside
        the set raises ``ValueError``.
        """
        if value is None or not value.strip():
            return cls.JPEG
        normalized = value.strip().lower()
        if normalized == "jpg":
            normalized = "jpeg"
        return cls(normalized)

    @property
    def extension(self) -> str:
        return self.value

    @property
    def media_type(self) -> str:
        return _MEDIA_TYPES[self]

    @property
    def is_raster(self) -> bool:
        return self is not OutputFormat.SVG


_MEDIA_TYPES = {
    OutputFormat.JPEG: "image/jpeg",
    OutputFormat.PNG: "image/png",
    OutputFormat.GIF: "image/gif",
    OutputFormat.SVG: "image/svg+xml",
}


class TransformRequest(BaseModel):
    width: int | None = Field(default=None, ge=1)
    height: int | None = Field(default=None, ge=1)
    format: OutputFormat = OutputFormat.JPEG
    watermark: bool = False

    @property
    def has_bounds(self) -> bool:
        return self.width is not None or self.height is not None
