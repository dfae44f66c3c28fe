"""Shared fixtures: an isolated app per test backed by a temporary upload dir."""
from __future__ import annotations

import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from app.config import Settings
from app.main import create_app
from app.services.image_processor import ImageProcessor
from app.services.storage import ImageStore
from app.services.uploads import UploadService

SVG_BYTES = (
    b'<svg xmlns="http://www.w3.org/2000/svg" width="10" height="10">'
    b'<rect width="10" height="10" fill="red"/></svg>'
)


def make_image(fmt: str = "JPEG", size=(64, 48), color=(0, 0, 0)) -> bytes:
    """Encode a solid-colour image in memory."""
    img = Image.new("RGB", size, color)
    if fmt == "GIF":
        img = img.convert("P")
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


def open_image(data: bytes) -> Image.Image:
    img = Image.open(io.BytesIO(data))
    img.load()
    return img


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(upload_dir=tmp_path / "uploads")


@pytest.fixture
def store(settings) -> ImageStore:
    store = ImageStore(settings.upload_dir)
    store.ensure_root()
    return store


@pytest.fixture
def processor(settings) -> ImageProcessor:
    return ImageProcessor(settings)


@pytest.fixture
def service(settings, store, processor) -> UploadService:
    return UploadService(settings, store, processor)


@pytest.fixture
def client(settings) -> TestClient:
    return TestClient(create_app(settings))


@pytest.fixture
def stored_files(settings):
    """Callable listing the files currently in the upload directory."""
    return lambda: sorted(p.name for p in settings.upload_dir.iterdir())
