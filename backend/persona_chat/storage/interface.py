"""
Storage Interface - Abstract base class for all keyed storage implementations.
This interface enables seamless switching between local files, memory, and
any other backend that can get/set a blob by string key.
"""

from abc import ABC, abstractmethod
from typing import Optional


class StorageInterface(ABC):
    """
    Abstract keyed storage that defines the contract for all implementations.
    Failures are logged and reported through return values, never raised.
    """

    @abstractmethod
    async def save(self, key: str, content: bytes | str) -> bool:
        """
        Save content under the specified key.

        Args:
            key: Storage key (e.g., "sessions.json")
            content: Content to save (bytes or UTF-8 text)

        Returns:
            bool: True if save was successful, False otherwise
        """
        pass

    @abstractmethod
    async def load(self, key: str) -> Optional[bytes]:
        """
        Load content stored under the specified key.

        Args:
            key: Storage key

        Returns:
            Optional[bytes]: Stored content, or None if the key doesn't exist
        """
        pass

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """
        Check if a key exists.

        Args:
            key: Storage key

        Returns:
            bool: True if the key exists, False otherwise
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """
        Delete the content stored under the key.

        Args:
            key: Storage key

        Returns:
            bool: True if something was deleted
        """
        pass

    @abstractmethod
    async def size(self, key: str) -> int:
        """
        Size in bytes of the content stored under the key.

        Args:
            key: Storage key

        Returns:
            int: Byte size, 0 if the key doesn't exist
        """
        pass
