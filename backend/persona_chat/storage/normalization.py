"""
Session Normalization - Turns untyped JSON documents into Session models.

Loading is tolerant: malformed records are dropped and missing fields get
defaults, so a damaged store never crashes the service. Importing is strict:
any malformed record rejects the whole document.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from ..models import Message, Session
from ..titling import placeholder_title
from ..exceptions import SessionFormatError

logger = logging.getLogger(__name__)

TitleFactory = Callable[[str, datetime], str]

USER_ROLES = {"user", "human"}
CHARACTER_ROLES = {"character", "assistant", "ai", "bot"}


def _default_title(persona_id: str, created_at: datetime) -> str:
    return placeholder_title("未知角色", created_at)


def is_record(value: Any) -> bool:
    return isinstance(value, dict)


def parse_timestamp(value: Any, default: datetime) -> datetime:
    """
    Parse an ISO-8601 string, epoch milliseconds or datetime into an aware UTC datetime.
    Anything else yields the default.
    """
    parsed: Optional[datetime] = None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, bool):
        parsed = None
    elif isinstance(value, (int, float)):
        try:
            parsed = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            parsed = None
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            parsed = None

    if parsed is None:
        return default
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def normalize_role(value: Any) -> Optional[str]:
    """Map the role spellings seen in exports onto user/character."""
    if not isinstance(value, str):
        return None
    role = value.strip().lower()
    if role in USER_ROLES:
        return "user"
    if role in CHARACTER_ROLES:
        return "character"
    return None


def _optional_bool(value: Any) -> Optional[bool]:
    return value if isinstance(value, bool) else None


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def normalize_message(raw: Any, default_time: datetime) -> Optional[Message]:
    """Build a Message from a raw record, or None if it has no usable role."""
    if not is_record(raw):
        return None

    role = normalize_role(raw.get("type", raw.get("role")))
    if role is None:
        return None

    content = raw.get("content")
    if content is None:
        content = ""
    elif not isinstance(content, str):
        content = str(content)

    message_id = raw.get("id")
    if not isinstance(message_id, str) or not message_id:
        message_id = f"msg-{uuid.uuid4().hex[:12]}"

    return Message(
        id=message_id,
        role=role,
        content=content,
        timestamp=parse_timestamp(raw.get("timestamp"), default_time),
        is_complete=_optional_bool(raw.get("isComplete", raw.get("is_complete"))),
        can_continue=_optional_bool(raw.get("canContinue", raw.get("can_continue"))),
        attached_image=_optional_str(raw.get("attachedImage", raw.get("attached_image"))),
        audio_url=_optional_str(raw.get("audioUrl", raw.get("audio_url"))),
    )


def normalize_session(
    raw: Any,
    now: Optional[datetime] = None,
    title_factory: Optional[TitleFactory] = None,
    strict: bool = False,
) -> Optional[Session]:
    """
    Build a Session from a raw record.

    Args:
        raw: Untyped record (usually a dict from json.loads)
        now: Fallback for missing timestamps
        title_factory: Produces a title when the record has none
        strict: Raise SessionFormatError instead of returning None / dropping messages

    Returns:
        Optional[Session]: None when the record has no usable id (tolerant mode)
    """
    now = now or datetime.now(timezone.utc)
    title_factory = title_factory or _default_title

    if not is_record(raw):
        if strict:
            raise SessionFormatError(f"Session record must be an object, got {type(raw).__name__}")
        return None

    session_id = raw.get("id")
    if not isinstance(session_id, str) or not session_id.strip():
        if strict:
            raise SessionFormatError("Session record is missing an id")
        return None

    persona_id = raw.get("characterId", raw.get("persona_id", raw.get("personaId")))
    if not isinstance(persona_id, str) or not persona_id:
        if strict:
            raise SessionFormatError(f"Session {session_id} is missing a persona id")
        persona_id = "unknown"

    created_at = parse_timestamp(raw.get("createdAt", raw.get("created_at")), now)
    last_active_at = parse_timestamp(raw.get("lastActiveAt", raw.get("last_active_at")), created_at)
    if last_active_at < created_at:
        last_active_at = created_at

    raw_messages = raw.get("messages")
    if raw_messages is None:
        raw_messages = []
    elif not isinstance(raw_messages, list):
        if strict:
            raise SessionFormatError(f"Session {session_id} messages must be a list")
        raw_messages = []

    messages: List[Message] = []
    for index, raw_message in enumerate(raw_messages):
        message = normalize_message(raw_message, created_at)
        if message is None:
            if strict:
                raise SessionFormatError(f"Session {session_id} has a malformed message at index {index}")
            logger.warning(f"Dropping malformed message {index} of session {session_id}")
            continue
        messages.append(message)

    title = raw.get("title")
    if not isinstance(title, str) or not title.strip():
        title = title_factory(persona_id, created_at)

    is_active = raw.get("isActive", raw.get("is_active", True))

    return Session(
        id=session_id,
        persona_id=persona_id,
        title=title,
        messages=messages,
        created_at=created_at,
        last_active_at=last_active_at,
        is_active=is_active if isinstance(is_active, bool) else True,
    )


def coerce_session_records(document: Any) -> Optional[List[Any]]:
    """
    Reduce the three accepted document shapes to a list of raw records.

    Accepted: a bare array, an object with a ``sessions`` array, or a map
    keyed by session id. Returns None for anything else.
    """
    if isinstance(document, list):
        return document

    if not is_record(document):
        return None

    if "sessions" in document:
        sessions = document["sessions"]
        return sessions if isinstance(sessions, list) else None

    if all(is_record(value) for value in document.values()):
        records = []
        for key, value in document.items():
            record: Dict[str, Any] = dict(value)
            record.setdefault("id", key)
            records.append(record)
        return records

    return None


def normalize_sessions(
    document: Any,
    now: Optional[datetime] = None,
    title_factory: Optional[TitleFactory] = None,
) -> List[Session]:
    """
    Tolerant normalization used on load. Never raises.

    Unknown shapes yield an empty list; bad records are skipped. Duplicate
    ids keep the last occurrence.
    """
    records = coerce_session_records(document)
    if records is None:
        if document is not None:
            logger.warning(f"Unrecognized session document shape: {type(document).__name__}")
        return []

    sessions: Dict[str, Session] = {}
    for index, record in enumerate(records):
        try:
            session = normalize_session(record, now=now, title_factory=title_factory)
        except Exception as e:
            logger.warning(f"Skipping session record {index}: {e}")
            continue
        if session is None:
            logger.warning(f"Skipping malformed session record {index}")
            continue
        sessions[session.id] = session
    return list(sessions.values())


def parse_import_document(
    document: Any,
    now: Optional[datetime] = None,
    title_factory: Optional[TitleFactory] = None,
) -> List[Session]:
    """
    Strict normalization used on import.

    Raises:
        SessionFormatError: If the shape or any record is invalid
    """
    records = coerce_session_records(document)
    if records is None:
        raise SessionFormatError("Expected an array, an object with a 'sessions' array, or a map of sessions")

    sessions: Dict[str, Session] = {}
    for record in records:
        try:
            session = normalize_session(record, now=now, title_factory=title_factory, strict=True)
        except SessionFormatError:
            raise
        except Exception as e:
            raise SessionFormatError(f"Invalid session record: {e}") from e
        sessions[session.id] = session
    return list(sessions.values())
