"""Download endpoint: stream a stored image back by id."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import FileResponse

from app.models import OutputFormat
from app.services.errors import ImageServiceError, StorageError
from app.services.storage import ImageStore

router = APIRouter()
logger = logging.getLogger(__name__)


def get_image_store(request: Request) -> ImageStore:
    return request.app.state.image_store


@router.get("/download/{image_id}")
def download_image(image_id: str, store: ImageStore = Depends(get_image_store)):
    try:
        path = store.resolve(image_id)
    except ImageServiceError as exc:
        if exc.status_code >= 500:
            raise StorageError("Error downloading image") from exc
        raise
    except Exception as exc:
        raise StorageError("Error downloading image") from exc

    media_type = OutputFormat(path.suffix.lstrip(".")).media_type
    return FileResponse(path, media_type=media_type, filename=path.name, content_disposition_type="inline")
