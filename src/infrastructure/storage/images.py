"""Filesystem blob store for recipe images."""

import asyncio
import re
from pathlib import Path

from src.config import get_logger, get_settings
from src.core.exceptions import ImageStoreError
from src.core.interfaces.image_store import IImageStore

logger = get_logger(__name__)

EXTENSIONS = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/webp": ".webp",
    "image/gif": ".gif",
}

_SAFE_REFERENCE = re.compile(r"^[A-Za-z0-9_.-]+$")


class LocalImageStore(IImageStore):
    """Stores each image as a file under the images directory.

    References are bare file names, so the directory can move without
    touching the database.
    """

    def __init__(self, root: Path | None = None):
        self.root = root or get_settings().storage.images_dir

    def _path(self, reference: str) -> Path:
        if not _SAFE_REFERENCE.match(reference) or reference.startswith("."):
            raise ImageStoreError(reference, "invalid reference")
        return self.root / reference

    async def save(self, key: str, data: bytes, content_type: str | None = None) -> str:
        reference = f"{key}{EXTENSIONS.get(content_type or '', '.bin')}"
        path = self._path(reference)

        def _write() -> None:
            self.root.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)

        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, _write)
        except OSError as e:
            raise ImageStoreError(reference, str(e)) from e

        logger.info("image_saved", reference=reference, size=len(data))
        return reference

    async def load(self, reference: str) -> bytes | None:
        path = self._path(reference)
        if not path.is_file():
            return None
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, path.read_bytes)
        except OSError as e:
            raise ImageStoreError(reference, str(e)) from e

    async def delete(self, reference: str) -> None:
        path = self._path(reference)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise ImageStoreError(reference, str(e)) from e
        logger.info("image_deleted", reference=reference)


def media_type_for(reference: str) -> str:
    """Best-effort content type from a reference's extension."""
    suffix = Path(reference).suffix.lower()
    for content_type, extension in EXTENSIONS.items():
        if extension == suffix:
            return content_type
    return "application/octet-stream"
