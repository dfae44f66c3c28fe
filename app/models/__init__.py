from .image_data import ImageData, UploadedImage
from .transform import OutputFormat, TransformRequest
from .upload import ErrorResponse, UploadResult

__all__ = [
    "ImageData",
    "UploadedImage",
    "OutputFormat",
    "TransformRequest",
    "ErrorResponse",
    "UploadResult",
]
