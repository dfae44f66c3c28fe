from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.config import Settings, get_settings
from app.handlers import download_handler, upload_handler
from app.services.errors import ImageServiceError
from app.services.image_processor import ImageProcessor
from app.services.storage import ImageStore
from app.services.uploads import UploadService

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Error handlers
# ---------------------------------------------------------------------------


async def _service_error_handler(request: Request, exc: ImageServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = ", ".join(str(err["loc"][-1]) for err in exc.errors())
    return JSONResponse(status_code=400, content={"error": f"Invalid request fields: {fields}"})


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    store = ImageStore(settings.upload_dir)
    store.ensure_root()
    processor = ImageProcessor(settings)

    app = FastAPI(title="Image Resizer API")
    app.state.settings = settings
    app.state.image_store = store
    app.state.upload_service = UploadService(settings, store, processor)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ImageServiceError, _service_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)

    app.include_router(upload_handler.router)
    app.include_router(download_handler.router)
    app.mount("/uploads", StaticFiles(directory=store.root), name="uploads")

    @app.get("/healthz")
    async def healthz():
        return {"status": "ok"}

    return app


if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    _settings = get_settings()
    logger.info("Server running on port %s", _settings.port)
    uvicorn.run("app.main:create_app", factory=True, host=_settings.host, port=_settings.port)
