from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class UploadResult(BaseModel):
    """Body returned by ``POST /upload``."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    image_id: str = Field(..., alias="imageId")
    url: str


class ErrorResponse(BaseModel):
    error: str
