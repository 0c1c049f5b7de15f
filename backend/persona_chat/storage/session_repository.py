"""
Session Repository - Collection-level access to persisted sessions.

The store itself only needs get/list/put/delete; how the sessions are laid
out underneath is up to the implementation.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from .normalization import TitleFactory, normalize_sessions
from ..models import Session
from .interface import StorageInterface

logger = logging.getLogger(__name__)


class SessionRepository(ABC):
    """Abstract session collection."""

    @abstractmethod
    async def list(self) -> List[Session]:
        """Return every stored session, in stored order."""
        pass

    @abstractmethod
    async def get(self, session_id: str) -> Optional[Session]:
        """Return the session with the id, or None."""
        pass

    @abstractmethod
    async def put(self, session: Session) -> bool:
        """Insert or replace a session by id."""
        pass

    @abstractmethod
    async def delete(self, session_id: str) -> bool:
        """Delete a session; True if it existed."""
        pass

    @abstractmethod
    async def replace_all(self, sessions: List[Session]) -> bool:
        """Atomically replace the whole collection."""
        pass

    @abstractmethod
    async def size(self) -> int:
        """Serialized size of the collection in bytes."""
        pass


def serialize_sessions(sessions: List[Session]) -> str:
    """Canonical persisted form: a JSON array of camelCase session records."""
    return json.dumps([s.to_record() for s in sessions], ensure_ascii=False)


class StorageSessionRepository(SessionRepository):
    """
    Keeps every session in one JSON array under a single storage key,
    the same layout the browser client used.
    """

    def __init__(
        self,
        storage: StorageInterface,
        key: str = "sessions.json",
        title_factory: Optional[TitleFactory] = None,
    ):
        """
        Initialize the repository.

        Args:
            storage: Keyed storage backend
            key: Key holding the session array
            title_factory: Title for stored records that lack one
        """
        self.storage = storage
        self.key = key
        self.title_factory = title_factory

    async def _load_all(self) -> List[Session]:
        content = await self.storage.load(self.key)
        if content is None:
            return []

        try:
            document = json.loads(content.decode('utf-8'))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error(f"Stored sessions under {self.key} are unreadable, starting empty: {e}")
            return []

        return normalize_sessions(document, title_factory=self.title_factory)

    async def _save_all(self, sessions: List[Session]) -> bool:
        saved = await self.storage.save(self.key, serialize_sessions(sessions))
        if not saved:
            logger.error(f"Failed to persist {len(sessions)} sessions under {self.key}")
        return saved

    async def list(self) -> List[Session]:
        return await self._load_all()

    async def get(self, session_id: str) -> Optional[Session]:
        for session in await self._load_all():
            if session.id == session_id:
                return session
        return None

    async def put(self, session: Session) -> bool:
        sessions = await self._load_all()
        for index, existing in enumerate(sessions):
            if existing.id == session.id:
                sessions[index] = session
                break
        else:
            sessions.append(session)
        return await self._save_all(sessions)

    async def delete(self, session_id: str) -> bool:
        sessions = await self._load_all()
        remaining = [s for s in sessions if s.id != session_id]
        if len(remaining) == len(sessions):
            return False
        return await self._save_all(remaining)

    async def replace_all(self, sessions: List[Session]) -> bool:
        return await self._save_all(sessions)

    async def size(self) -> int:
        return await self.storage.size(self.key)
