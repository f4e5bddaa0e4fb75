"""
Local-directory object storage.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

from pm_autopilot.core.config import settings
from pm_autopilot.core.exceptions import StorageError, ValidationError
from pm_autopilot.core.logging import get_logger

logger = get_logger(__name__)


class LocalImageStorage:
    """
    Stores objects as files under ``<root>/<bucket>/<key>``.

    Writing an existing key overwrites it. Objects are publicly reachable at
    ``<public_base_url>/<bucket>/<key>`` once the root is mounted by the app.
    """

    def __init__(
        self,
        root: Optional[str] = None,
        bucket: Optional[str] = None,
        public_base_url: Optional[str] = None,
    ) -> None:
        self.root = Path(root or settings.storage.root)
        self.bucket = bucket or settings.storage.bucket
        self.public_base_url = (public_base_url or settings.storage.public_base_url).rstrip("/")

    def _path(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise ValidationError("Invalid storage key", details={"key": key})
        return self.root / self.bucket / key

    def public_url(self, key: str) -> str:
        """Public URL of a stored object."""
        return f"{self.public_base_url}/{self.bucket}/{key}"

    async def upload(self, key: str, data: bytes) -> str:
        """
        Write an object, replacing any existing one.

        Returns:
            The object's public URL

        Raises:
            StorageError: If the file cannot be written
        """
        path = self._path(key)
        try:
            await asyncio.to_thread(self._write, path, data)
        except OSError as e:
            logger.error("Storage write failed", key=key, error=str(e))
            raise StorageError(f"Could not store {key}", details={"key": key}) from e

        logger.info("Object stored", key=key, size=len(data))
        return self.public_url(key)

    async def exists(self, key: str) -> bool:
        """Check if an object exists."""
        return await asyncio.to_thread(self._path(key).exists)

    @staticmethod
    def _write(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
