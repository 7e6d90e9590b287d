"""
File store for MRV evidence attachments.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from samudra.core.errors import UpstreamError, ValidationError
from samudra.models.mrv import FileCategory

logger = logging.getLogger(__name__)

IOT_CONTENT_MARKERS = ("csv", "json", "xml")
IOT_EXTENSIONS = (".log", ".txt")


def categorize_file(filename: str, content_type: Optional[str]) -> FileCategory:
    """Classify an attachment as photo, IoT data or generic document."""
    content_type = (content_type or "").lower()
    filename = filename.lower()

    if content_type.startswith("image/"):
        return FileCategory.PHOTO
    if any(marker in content_type for marker in IOT_CONTENT_MARKERS) or filename.endswith(IOT_EXTENSIONS):
        return FileCategory.IOT_DATA
    return FileCategory.DOCUMENT


class FileStore(ABC):

    @abstractmethod
    async def save(self, path: str, content: bytes, content_type: Optional[str]) -> Optional[str]:
        """Store ``content`` under ``path``; returns a retrieval URL if the store has one."""


class LocalFileStore(FileStore):
    """Writes attachments beneath a directory on local disk."""

    def __init__(self, root: str):
        self.root = Path(root).resolve()

    def _target(self, path: str) -> Path:
        target = (self.root / path).resolve()
        if self.root not in target.parents:
            raise ValidationError(f"Invalid file path: {path}")
        return target

    async def save(self, path: str, content: bytes, content_type: Optional[str]) -> Optional[str]:
        target = self._target(path)
        try:
            await asyncio.to_thread(target.parent.mkdir, parents=True, exist_ok=True)
            await asyncio.to_thread(target.write_bytes, content)
        except OSError as e:
            logger.error("Failed to store %s: %s", path, e)
            raise UpstreamError(f"Failed to upload {target.name}: {e}")
        return target.as_uri()
