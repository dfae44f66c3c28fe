"""Exception hierarchy shared by the upload and retrieval paths.

Every error carries the HTTP status it maps to and a ``message`` that is
safe to show to the caller. Server-side failures keep their cause chained
(``raise ... from exc``) for the logs, never for the response body.
"""
from __future__ import annotations


class ImageServiceError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class UploadRejected(ImageServiceError):
    """Client input that fails validation before any processing happens."""

    status_code = 400
    default_message = "Invalid upload"


class MissingFile(UploadRejected):
    default_message = "No image file provided"


class InvalidFileType(UploadRejected):
    default_message = "Invalid file type"


class FileTooLarge(UploadRejected):
    default_message = "File too large"


class UnsupportedFormat(UploadRejected):
    default_message = "Unsupported output format"


class InvalidDimension(UploadRejected):
    default_message = "Width and height must be positive integers"


class ImageNotFound(ImageServiceError):
    status_code = 404
    default_message = "Image not found"


class ImageProcessingError(ImageServiceError):
    default_message = "Error processing image"


class StorageError(ImageServiceError):
    default_message = "Error storing image"
