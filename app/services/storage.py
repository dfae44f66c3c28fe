"""Local filesystem store for processed images.

Objects are stored flat under the configured upload directory using the
following key pattern:

    {image_id}.{ext}

``image_id`` is ``uuid4().hex``. Lookups probe the known extensions for an
id directly instead of listing the directory, so retrieval cost does not
grow with the number of stored files.
"""
from __future__ import annotations

import logging
import os
import re
import tempfile
import uuid
from pathlib import Path

from app.models import OutputFormat
from app.services.errors import ImageNotFound, StorageError

logger = logging.getLogger(__name__)

_IMAGE_ID_RE = re.compile(r"^[0-9a-f]{32}$")


class ImageStore:
    """Writes and resolves ``{image_id}.{ext}`` files in one flat directory."""

    # Probe order for resolve(); ids are written once so at most one matches.
    _EXTENSIONS = tuple(fmt.extension for fmt in OutputFormat)

    def __init__(self, root: Path, staging: Path | None = None) -> None:
        self._root = Path(root)
        # Sibling of root so in-progress writes are never reachable via /uploads.
        self._staging = Path(staging) if staging is not None else self._root.parent / f".{self._root.name}-staging"

    @property
    def root(self) -> Path:
        return self._root

    @property
    def staging(self) -> Path:
        return self._staging

    def ensure_root(self) -> None:
        self._root.mkdir(parents=True, exist_ok=True)
        self._staging.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # Public helpers
    # ------------------------------------------------------------------

    @staticmethod
    def new_id() -> str:
        return uuid.uuid4().hex

    @staticmethod
    def is_valid_id(image_id: str) -> bool:
        return bool(_IMAGE_ID_RE.match(image_id))

    def path_for(self, image_id: str, fmt: OutputFormat) -> Path:
        return self._root / f"{image_id}.{fmt.extension}"

    def save(self, image_id: str, fmt: OutputFormat, data: bytes) -> Path:
        """Write ``data`` atomically and return the final path.

        Bytes go to a temporary file in the staging directory, outside the
        served root, and are renamed into place. Partial writes are never
        resolvable or served. The staging directory must share a filesystem
        with the root for the rename to be atomic.
        """
        target = self.path_for(image_id, fmt)
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self._staging, prefix="tmp-", suffix=f".{fmt.extension}")
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp_name, target)
        except OSError as exc:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError() from exc

        logger.debug("Wrote %d bytes to %s", len(data), target)
        return target

    def resolve(self, image_id: str) -> Path:
        """Return the stored file for ``image_id`` or raise ``ImageNotFound``."""

        if not self.is_valid_id(image_id):
            raise ImageNotFound()
        for ext in self._EXTENSIONS:
            candidate = self._root / f"{image_id}.{ext}"
            try:
                if candidate.is_file():
                    return candidate
            except OSError as exc:
                raise StorageError() from exc
        raise ImageNotFound()
