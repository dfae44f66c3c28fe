"""Raster transforms using Pillow: resize, watermark and encode.

The processor is stateless apart from the encoder and watermark settings it
is constructed with. It works on raw bytes in and raw bytes out so callers
never handle Pillow objects.
"""
from __future__ import annotations

import io
import logging
from typing import Tuple

from PIL import Image, ImageDraw, ImageFont, UnidentifiedImageError

from app.config import Settings
from app.models import ImageData, OutputFormat, TransformRequest
from app.services.errors import ImageProcessingError, UnsupportedFormat

logger = logging.getLogger(__name__)

_WATERMARK_FILL = (255, 255, 255, 128)  # white, 50% alpha

# Modes PNG can store as-is; GIF quantizes any of these itself.
_PNG_MODES = frozenset({"1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA"})


def _load_font(size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    try:
        return ImageFont.truetype("arial.ttf", size)
    except OSError:
        return ImageFont.load_default(size=size)


def _storable_mode(img: Image.Image) -> Image.Image:
    """Convert colour spaces such as CMYK or YCbCr to RGB(A) before a PNG/GIF save."""
    if img.mode in _PNG_MODES:
        return img
    return img.convert("RGBA" if img.has_transparency_data else "RGB")


def fit_inside(
    size: Tuple[int, int],
    width: int | None,
    height: int | None,
) -> Tuple[int, int]:
    """Return the size that fits ``size`` inside the given bounds.

    Aspect ratio is preserved and the result never exceeds the original, so
    bounds larger than the image leave it untouched. A missing bound is
    derived from the other one.
    """
    orig_w, orig_h = size
    scales = []
    if width is not None:
        scales.append(width / orig_w)
    if height is not None:
        scales.append(height / orig_h)
    if not scales:
        return size
    scale = min(scales)
    if scale >= 1:
        return size
    return max(1, round(orig_w * scale)), max(1, round(orig_h * scale))


class ImageProcessor:  # pylint: disable=too-few-public-methods
    """Applies a ``TransformRequest`` to raster image bytes."""

    def __init__(self, settings: Settings) -> None:
        self._jpeg_quality = settings.jpeg_quality
        self._png_compress_level = settings.png_compress_level
        self._watermark_text = settings.watermark_text
        self._watermark_box = (settings.watermark_box_width, settings.watermark_box_height)
        self._font = _load_font(settings.watermark_font_size)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def process(self, data: bytes, request: TransformRequest) -> Tuple[bytes, ImageData]:
        """Decode, transform and re-encode ``data``.

        Resize and watermark are skipped entirely when the output is GIF.
        Returns the encoded bytes and the output dimensions.
        """
        if not request.format.is_raster:
            raise UnsupportedFormat("Raster images cannot be stored as svg")

        try:
            with Image.open(io.BytesIO(data)) as src:
                src.load()
                img = src.copy()
        except (UnidentifiedImageError, OSError) as exc:
            raise ImageProcessingError() from exc

        if request.format is not OutputFormat.GIF:
            if request.has_bounds:
                img = self._resize(img, request.width, request.height)
            if request.watermark:
                img = self._apply_watermark(img)

        encoded = self._encode(img, request.format)
        width, height = img.size
        meta = ImageData(
            width=width,
            height=height,
            mime_type=request.format.media_type,
            resolution=f"{width}x{height}",
        )
        return encoded, meta

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _resize(img: Image.Image, width: int | None, height: int | None) -> Image.Image:
        target = fit_inside(img.size, width, height)
        if target == img.size:
            return img
        logger.debug("Resizing %s -> %s", img.size, target)
        return img.resize(target, Image.Resampling.LANCZOS)

    def _apply_watermark(self, img: Image.Image) -> Image.Image:
        base = img.convert("RGBA")
        overlay = Image.new("RGBA", base.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(overlay)

        # Text is centred in a fixed box anchored at the bottom-right corner;
        # anything outside the image is clipped by the overlay bounds.
        box_w, box_h = self._watermark_box
        left, top, right, bottom = draw.textbbox((0, 0), self._watermark_text, font=self._font)
        x = base.width - box_w + (box_w - (right - left)) / 2 - left
        y = base.height - box_h + (box_h - (bottom - top)) / 2 - top
        draw.text((x, y), self._watermark_text, font=self._font, fill=_WATERMARK_FILL)

        return Image.alpha_composite(base, overlay)

    def _encode(self, img: Image.Image, fmt: OutputFormat) -> bytes:
        buffer = io.BytesIO()
        try:
            if fmt is OutputFormat.JPEG:
                if img.mode != "RGB":
                    img = img.convert("RGB")  # JPEG has no alpha channel
                img.save(buffer, format="JPEG", quality=self._jpeg_quality)
            elif fmt is OutputFormat.PNG:
                img = _storable_mode(img)
                img.save(buffer, format="PNG", compress_level=self._png_compress_level)
            else:
                img = _storable_mode(img)
                img.save(buffer, format="GIF")
        except (OSError, ValueError) as exc:
            raise ImageProcessingError() from exc
        return buffer.getvalue()
