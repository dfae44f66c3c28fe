"""Upload pipeline: validate, transform or pass through, then persist."""
from __future__ import annotations

import logging

from app.config import Settings
from app.models import OutputFormat, TransformRequest, UploadedImage, UploadResult
from app.services.errors import FileTooLarge, InvalidFileType, MissingFile, UnsupportedFormat
from app.services.image_processor import ImageProcessor
from app.services.storage import ImageStore

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/svg+xml"})


class UploadService:
    """Runs one upload end to end; exactly one file is written on success."""

    def __init__(self, settings: Settings, store: ImageStore, processor: ImageProcessor) -> None:
        self._max_upload_bytes = settings.max_upload_bytes
        self._store = store
        self._processor = processor

    @property
    def max_upload_bytes(self) -> int:
        return self._max_upload_bytes

    def validate(self, upload: UploadedImage | None) -> UploadedImage:
        if upload is None:
            raise MissingFile()
        if upload.mime_type not in ALLOWED_MIME_TYPES:
            raise InvalidFileType()
        if upload.size > self._max_upload_bytes:
            raise FileTooLarge(f"File exceeds the {self._max_upload_bytes} byte limit")
        return upload

    def handle_upload(self, upload: UploadedImage | None, request: TransformRequest) -> UploadResult:
        upload = self.validate(upload)
        image_id = self._store.new_id()

        if upload.is_vector:
            if request.format is not OutputFormat.SVG:
                logger.warning(
                    "SVG upload %s requested format=%s; storing original bytes as svg",
                    image_id,
                    request.format.value,
                )
            self._store.save(image_id, OutputFormat.SVG, upload.data)
            logger.info("Stored %s as svg passthrough (%d bytes)", image_id, upload.size)
        else:
            if request.format is OutputFormat.SVG:
                raise UnsupportedFormat("Raster images cannot be stored as svg")
            encoded, meta = self._processor.process(upload.data, request)
            self._store.save(image_id, request.format, encoded)
            logger.info("Stored %s as %s (%s)", image_id, request.format.value, meta.resolution)

        return UploadResult(image_id=image_id, url=f"/download/{image_id}")
