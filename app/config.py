from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from a .env file if present (local dev only)
load_dotenv()


class Settings(BaseSettings):
    """Application configuration loaded from environment variables or .env file."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Server
    host: str = Field("0.0.0.0", description="Interface uvicorn binds to.")
    port: int = Field(3001, description="Listening port (PORT).")
    log_level: str = Field("INFO")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    # Storage
    upload_dir: Path = Field(Path("uploads"), description="Flat directory holding stored images.")
    max_upload_bytes: int = Field(5 * 1024 * 1024, ge=1, description="Upload size ceiling in bytes.")

    # Encoding
    jpeg_quality: int = Field(80, ge=1, le=100)
    png_compress_level: int = Field(9, ge=0, le=9)

    # Watermark
    watermark_text: str = Field("Image Resizer")
    watermark_font_size: int = Field(24, ge=1)
    watermark_box_width: int = Field(200, ge=1)
    watermark_box_height: int = Field(50, ge=1)


@lru_cache()
def get_settings() -> Settings:  # pragma: no cover
    """Return a cached Settings instance so it is only parsed once."""

    return Settings()
