"""Upload endpoint: multipart image in, generated id and download URL out."""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from pydantic import ValidationError

from app.models import OutputFormat, TransformRequest, UploadedImage, UploadResult
from app.services.errors import ImageProcessingError, ImageServiceError, InvalidDimension, UnsupportedFormat
from app.services.uploads import UploadService

router = APIRouter()
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def get_upload_service(request: Request) -> UploadService:
    return request.app.state.upload_service


def read_upload(image: UploadFile | None, max_bytes: int) -> UploadedImage | None:
    """Read at most ``max_bytes + 1`` so oversized uploads are detected without buffering them fully."""
    if image is None or not image.filename:
        return None
    data = image.file.read(max_bytes + 1)
    return UploadedImage(
        data=data,
        mime_type=image.content_type or "application/octet-stream",
        filename=image.filename,
    )


def build_transform(
    width: int | None,
    height: int | None,
    fmt: str | None,
    watermark: bool,
) -> TransformRequest:
    try:
        output_format = OutputFormat.parse(fmt)
    except ValueError as exc:
        raise UnsupportedFormat(f"Unsupported output format: {fmt}") from exc
    try:
        return TransformRequest(width=width, height=height, format=output_format, watermark=watermark)
    except ValidationError as exc:
        raise InvalidDimension() from exc


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.post("/upload", response_model=UploadResult)
def upload_image(
    image: Optional[UploadFile] = File(None),
    width: Optional[int] = Form(None),
    height: Optional[int] = Form(None),
    format: Optional[str] = Form("jpeg"),  # pylint: disable=redefined-builtin
    watermark: bool = Form(False),
    service: UploadService = Depends(get_upload_service),
):
    """Validate, optionally transform, and store one image.

    Declared as a plain ``def`` so Pillow work runs in the threadpool.
    """
    try:
        upload = service.validate(read_upload(image, service.max_upload_bytes))
        transform = build_transform(width, height, format, watermark)
        return service.handle_upload(upload, transform)
    except ImageServiceError as exc:
        if exc.status_code < 500:
            logger.info("Rejected upload: %s", exc.message)
        raise
    except Exception as exc:
        raise ImageProcessingError() from exc
