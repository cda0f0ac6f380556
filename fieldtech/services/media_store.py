"""Media storage: write uploaded photo/video evidence to disk.

Files land in {upload_dir}/{uuid}{ext} and are served back under url_prefix.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredFile:
    file_url: str
    file_path: str
    size: int


def classify(content_type: str) -> str:
    """Media type tag for an upload: photo for image/*, video otherwise."""
    return "photo" if (content_type or "").lower().startswith("image/") else "video"


def _extension(original_name: str | None) -> str:
    if original_name and "." in original_name:
        return "." + original_name.rsplit(".", 1)[1].lower()
    return ""


class MediaStore:
    def __init__(self, base_dir: str | Path, url_prefix: str = "/uploads"):
        self.base_dir = Path(base_dir)
        self.url_prefix = "/" + url_prefix.strip("/")

    def _save_sync(self, data: bytes, original_name: str | None) -> StoredFile:
        self.base_dir.mkdir(parents=True, exist_ok=True)
        filename = f"{uuid.uuid4()}{_extension(original_name)}"
        path = self.base_dir / filename
        path.write_bytes(data)
        return StoredFile(
            file_url=f"{self.url_prefix}/{filename}",
            file_path=str(path),
            size=len(data),
        )

    async def save(self, data: bytes, original_name: str | None = None) -> StoredFile:
        """Write bytes under a fresh unique name. Returns where they went."""
        stored = await asyncio.to_thread(self._save_sync, data, original_name)
        logger.debug("Stored %s (%d bytes) at %s", original_name, stored.size, stored.file_path)
        return stored

    async def delete(self, file_path: str) -> None:
        """Remove a stored file; missing files are ignored."""
        await asyncio.to_thread(Path(file_path).unlink, True)
