#!/usr/bin/env python
"""Script to run the upload pipeline against a local image file."""
from __future__ import annotations

import argparse
import mimetypes
from pathlib import Path

from app.config import get_settings
from app.models import OutputFormat, TransformRequest, UploadedImage
from app.services.image_processor import ImageProcessor
from app.services.storage import ImageStore
from app.services.uploads import UploadService


def main() -> None:
    parser = argparse.ArgumentParser(description="Resize/watermark an image and store it like POST /upload")
    parser.add_argument("input", type=Path)
    parser.add_argument("--width", type=int)
    parser.add_argument("--height", type=int)
    parser.add_argument("--format", default="jpeg", choices=[fmt.value for fmt in OutputFormat] + ["jpg"])
    parser.add_argument("--watermark", action="store_true")
    parser.add_argument("--upload-dir", type=Path, default=None)
    args = parser.parse_args()

    settings = get_settings()
    if args.upload_dir is not None:
        settings = settings.model_copy(update={"upload_dir": args.upload_dir})

    store = ImageStore(settings.upload_dir)
    store.ensure_root()
    service = UploadService(settings, store, ImageProcessor(settings))

    mime_type, _ = mimetypes.guess_type(args.input.name)
    upload = UploadedImage(
        data=args.input.read_bytes(),
        mime_type=mime_type or "application/octet-stream",
        filename=args.input.name,
    )
    transform = TransformRequest(
        width=args.width,
        height=args.height,
        format=OutputFormat.parse(args.format),
        watermark=args.watermark,
    )
    result = service.handle_upload(upload, transform)
    print("Stored image:")
    print(result.model_dump_json(by_alias=True, indent=2))


if __name__ == "__main__":
    main()
