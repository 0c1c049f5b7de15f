"""
Local Filesystem Storage Implementation.
Each key is a file under a base directory on the server.
"""

import logging
from pathlib import Path
from typing import Optional

import aiofiles

from .interface import StorageInterface

logger = logging.getLogger(__name__)


class LocalStorage(StorageInterface):
    """
    Local filesystem storage implementation.
    Writes go to a temporary sibling first and are renamed into place, so a
    crash mid-write never leaves a half-written blob behind.
    """

    def __init__(self, base_dir: str = "./data"):
        """
        Initialize local storage with a base directory.

        Args:
            base_dir: Base directory for all stored files
        """
        self.base_dir = Path(base_dir).resolve()
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _get_full_path(self, key: str) -> Path:
        """Convert a key to an absolute path within the base directory."""
        full_path = (self.base_dir / key).resolve()

        # Security check: ensure path is within base_dir
        if not full_path.is_relative_to(self.base_dir):
            raise ValueError(f"Invalid key: {key} - path traversal detected")

        return full_path

    async def save(self, key: str, content: bytes | str) -> bool:
        """Save content to the local filesystem."""
        try:
            full_path = self._get_full_path(key)
            full_path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = full_path.with_suffix(full_path.suffix + ".tmp")

            if isinstance(content, str):
                async with aiofiles.open(tmp_path, 'w', encoding='utf-8') as f:
                    await f.write(content)
            else:
                async with aiofiles.open(tmp_path, 'wb') as f:
                    await f.write(content)

            tmp_path.replace(full_path)
            return True
        except Exception as e:
            logger.error(f"Error saving {key}: {e}", exc_info=True)
            return False

    async def load(self, key: str) -> Optional[bytes]:
        """Load content from the local filesystem."""
        try:
            full_path = self._get_full_path(key)
            if not full_path.exists():
                return None

            async with aiofiles.open(full_path, 'rb') as f:
                return await f.read()
        except Exception as e:
            logger.error(f"Error loading {key}: {e}", exc_info=True)
            return None

    async def exists(self, key: str) -> bool:
        """Check if the file exists."""
        try:
            return self._get_full_path(key).exists()
        except ValueError:
            return False

    async def delete(self, key: str) -> bool:
        """Delete the file from the local filesystem."""
        try:
            full_path = self._get_full_path(key)
            if full_path.exists():
                full_path.unlink()
                return True
            return False
        except Exception as e:
            logger.error(f"Error deleting {key}: {e}", exc_info=True)
            return False

    async def size(self, key: str) -> int:
        """File size in bytes."""
        try:
            full_path = self._get_full_path(key)
            return full_path.stat().st_size if full_path.exists() else 0
        except Exception as e:
            logger.error(f"Error reading size of {key}: {e}")
            return 0
