"""
Session Store - CRUD, titling, import/export and quota for chat sessions.

Every mutation runs under one asyncio.Lock, so append -> title -> persist is
a single unit that no other write can interleave with.
"""

import asyncio
import json
import logging
import uuid
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from ..exceptions import SessionFormatError
from ..models import ImportResult, Message, Session, SessionSummary, StorageInfo
from ..models.session import utc_now
from ..personas import PersonaRegistry
from ..storage import SessionRepository, parse_import_document
from ..titling import (
    SmartTitleGenerator,
    TitleAnalysis,
    interim_title,
    is_default_title,
    placeholder_title,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_SESSIONS = 50
DEFAULT_CAPACITY_BYTES = 5 * 1024 * 1024
DEFAULT_WARNING_RATIO = 0.8


def new_session_id(now: datetime) -> str:
    return f"session-{int(now.timestamp() * 1000)}-{uuid.uuid4().hex[:9]}"


def most_recent_first(sessions: Iterable[Session]) -> List[Session]:
    return sorted(sessions, key=lambda s: s.last_active_at, reverse=True)


class SessionStore:
    """
    Owns the session collection on top of a SessionRepository.

    Lookups of unknown ids return None; deleting an unknown id is a no-op.
    """

    def __init__(
        self,
        repository: SessionRepository,
        personas: PersonaRegistry,
        generator: Optional[SmartTitleGenerator] = None,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
        capacity_bytes: int = DEFAULT_CAPACITY_BYTES,
        warning_ratio: float = DEFAULT_WARNING_RATIO,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize the store.

        Args:
            repository: Where sessions are persisted
            personas: Resolves persona ids and display names
            generator: Smart title generator
            max_sessions: Retention cap, most recently active kept
            capacity_bytes: Advisory storage budget
            warning_ratio: Usage ratio at which storage_info warns
            clock: Source of "now", injectable for tests
        """
        self.repository = repository
        self.personas = personas
        self.generator = generator or SmartTitleGenerator()
        self.max_sessions = max_sessions
        self.capacity_bytes = capacity_bytes
        self.warning_ratio = warning_ratio
        self.clock = clock
        self._lock = asyncio.Lock()

    # ==================== Reads ====================

    async def get_session(self, session_id: str) -> Optional[Session]:
        return await self.repository.get(session_id)

    async def list_sessions(self) -> List[Session]:
        return most_recent_first(await self.repository.list())

    async def list_sessions_by_persona(self, persona_id: str) -> List[Session]:
        return [s for s in await self.list_sessions() if s.persona_id == persona_id]

    async def list_session_summaries(self, persona_id: Optional[str] = None) -> List[SessionSummary]:
        """Sidebar entries, most recently active first."""
        sessions = await self.list_sessions()
        if persona_id is not None:
            sessions = [s for s in sessions if s.persona_id == persona_id]

        names = await self.personas.names()
        summaries = []
        for session in sessions:
            last = session.messages[-1].content if session.messages else ""
            summaries.append(SessionSummary(
                id=session.id,
                persona_id=session.persona_id,
                persona_name=names.get(session.persona_id, "未知角色"),
                title=session.title,
                last_message=last,
                message_count=len(session.messages),
                created_at=session.created_at,
                last_active_at=session.last_active_at,
            ))
        return summaries

    # ==================== Mutations ====================

    async def create_session(self, persona_id: str, title: Optional[str] = None) -> Session:
        """
        Create a session with a placeholder title unless one is given.

        Raises:
            PersonaNotFoundError: if the persona id is unknown
        """
        persona = await self.personas.require(persona_id)
        now = self.clock()
        session = Session(
            id=new_session_id(now),
            persona_id=persona.id,
            title=title.strip() if title and title.strip() else placeholder_title(persona.name, now),
            created_at=now,
            last_active_at=now,
        )

        async with self._lock:
            sessions = await self.repository.list()
            sessions.append(session)
            if len(sessions) > self.max_sessions:
                await self._persist_all(sessions)
            else:
                await self.repository.put(session)

        logger.info(
            f"Created session {session.id}",
            extra={"extra_fields": {"session_id": session.id, "persona_id": persona.id}}
        )
        return session

    async def append_message(self, session_id: str, message: Message) -> Optional[Session]:
        """
        Append a message, seed the interim title, then try the smart title.

        Returns:
            Optional[Session]: Updated session, or None if the id is unknown
        """
        async with self._lock:
            session = await self.repository.get(session_id)
            if session is None:
                return None

            persona_name = await self.personas.name_for(session.persona_id)
            session.messages.append(message)
            session.last_active_at = max(self.clock(), session.created_at)

            first_user = message.role == "user" and sum(m.role == "user" for m in session.messages) == 1
            if first_user and message.content.strip() and "的对话 - " in session.title:
                session.title = interim_title(persona_name, message.content)

            self._apply_smart_title(session, persona_name)
            await self.repository.put(session)
            return session

    async def replace_message(self, session_id: str, message_id: str, message: Message) -> Optional[Session]:
        """
        Replace a stored message in place, keeping its id and position.

        Returns:
            Optional[Session]: Updated session, or None if session or message is unknown
        """
        async with self._lock:
            session = await self.repository.get(session_id)
            if session is None:
                return None

            for index, existing in enumerate(session.messages):
                if existing.id == message_id:
                    session.messages[index] = message.model_copy(update={"id": message_id})
                    break
            else:
                return None

            session.last_active_at = max(self.clock(), session.created_at)
            await self.repository.put(session)
            return session

    async def rename_session(self, session_id: str, title: str) -> Optional[Session]:
        """A manual title is never replaced by the smart title."""
        title = " ".join(title.split())
        if not title:
            raise ValueError("Title must not be empty")

        async with self._lock:
            session = await self.repository.get(session_id)
            if session is None:
                return None
            session.title = title
            session.last_active_at = max(self.clock(), session.created_at)
            await self.repository.put(session)
            return session

    async def update_session_title(self, session_id: str) -> Optional[Session]:
        """Run the smart-title check on demand; a titled session is left alone."""
        async with self._lock:
            session = await self.repository.get(session_id)
            if session is None:
                return None

            persona_name = await self.personas.name_for(session.persona_id)
            if self._apply_smart_title(session, persona_name):
                await self.repository.put(session)
            return session

    async def delete_session(self, session_id: str) -> bool:
        async with self._lock:
            deleted = await self.repository.delete(session_id)
        if deleted:
            logger.info(f"Deleted session {session_id}")
        return deleted

    async def clear_all(self) -> int:
        """Remove every session; returns how many were removed."""
        async with self._lock:
            count = len(await self.repository.list())
            await self.repository.replace_all([])
        logger.info(f"Cleared {count} sessions")
        return count

    # ==================== Import / Export ====================

    async def export_sessions(self, ids: Optional[Iterable[str]] = None) -> str:
        """
        Export sessions as a JSON envelope.

        Args:
            ids: Restrict the export to these session ids

        Returns:
            str: ``{"exportTime", "sessionCount", "sessions"}`` as JSON text
        """
        sessions = await self.list_sessions()
        if ids is not None:
            wanted = set(ids)
            sessions = [s for s in sessions if s.id in wanted]

        envelope = {
            "exportTime": self.clock().isoformat(),
            "sessionCount": len(sessions),
            "sessions": [s.to_record() for s in sessions],
        }
        return json.dumps(envelope, ensure_ascii=False, indent=2)

    async def import_sessions(self, text: str) -> ImportResult:
        """
        Merge an exported document into the store, all or nothing.

        On id collisions the record with the later last-active time wins, the
        imported one on ties. The merged set is cut to the retention cap.
        """
        # reloads the custom names placeholder_title reads
        await self.personas.names()
        try:
            document = json.loads(text)
            imported = parse_import_document(
                document,
                now=self.clock(),
                title_factory=self.personas.placeholder_title,
            )
        except (json.JSONDecodeError, SessionFormatError) as e:
            logger.warning(f"Rejected session import: {e}")
            return ImportResult(success=False, error=str(e))

        async with self._lock:
            merged = {s.id: s for s in await self.repository.list()}
            for session in imported:
                current = merged.get(session.id)
                if current is None or session.last_active_at >= current.last_active_at:
                    merged[session.id] = session

            if not await self._persist_all(list(merged.values())):
                return ImportResult(success=False, total=len(imported), error="Failed to persist sessions")

        logger.info(
            f"Imported {len(imported)} sessions",
            extra={"extra_fields": {"imported": len(imported), "stored": min(len(merged), self.max_sessions)}}
        )
        return ImportResult(success=True, imported=len(imported), total=min(len(merged), self.max_sessions))

    # ==================== Quota / Analysis ====================

    async def storage_info(self) -> StorageInfo:
        """Advisory usage; writes are never blocked by it."""
        used = await self.repository.size()
        count = len(await self.repository.list())
        ratio = used / self.capacity_bytes if self.capacity_bytes else 0.0
        return StorageInfo(
            used=used,
            total=self.capacity_bytes,
            session_count=count,
            usage_ratio=round(ratio, 4),
            warning=ratio >= self.warning_ratio,
        )

    async def analyze_session(self, session_id: str) -> Optional[TitleAnalysis]:
        session = await self.repository.get(session_id)
        if session is None:
            return None
        persona_name = await self.personas.name_for(session.persona_id)
        return self.generator.analyze(session, persona_name)

    # ==================== Helpers ====================

    def _apply_smart_title(self, session: Session, persona_name: str) -> bool:
        first_user = next((m.content for m in session.messages if m.role == "user"), None)
        if not is_default_title(session.title, persona_name, first_user):
            return False
        title = self.generator.generate(session, persona_name)
        if not title:
            return False
        session.title = title
        return True

    async def _persist_all(self, sessions: List[Session]) -> bool:
        kept = most_recent_first(sessions)
        if len(kept) > self.max_sessions:
            logger.info(f"Retention cap reached, evicting {len(kept) - self.max_sessions} sessions")
            kept = kept[:self.max_sessions]
        return await self.repository.replace_all(kept)
