"""
Session Models - Defines structures for chat sessions and their messages.

Field aliases keep the camelCase layout of the browser-era exports
(``characterId``, ``lastActiveAt``, ``type``) so old files import cleanly.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_message_id() -> str:
    return f"msg-{uuid.uuid4().hex[:12]}"


class Message(BaseModel):
    """A single chat message."""
    id: str = Field(default_factory=new_message_id)
    role: Literal["user", "character"] = Field(..., alias="type")
    content: str = ""
    timestamp: datetime = Field(default_factory=utc_now)

    # Truncated replies can be continued
    is_complete: Optional[bool] = Field(None, alias="isComplete")
    can_continue: Optional[bool] = Field(None, alias="canContinue")

    # Optional attachments
    attached_image: Optional[str] = Field(None, alias="attachedImage")
    audio_url: Optional[str] = Field(None, alias="audioUrl")

    class Config:
        populate_by_name = True


class Session(BaseModel):
    """Full session with messages."""
    id: str
    persona_id: str = Field(..., alias="characterId")
    title: str
    messages: List[Message] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")
    last_active_at: datetime = Field(default_factory=utc_now, alias="lastActiveAt")
    is_active: bool = Field(True, alias="isActive")

    class Config:
        populate_by_name = True

    def to_record(self) -> dict:
        """JSON-ready dict in the persisted camelCase layout."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class SessionSummary(BaseModel):
    """Session list entry for the sidebar."""
    id: str
    persona_id: str = Field(..., alias="characterId")
    persona_name: str = Field(..., alias="characterName")
    title: str
    last_message: str = Field("", alias="lastMessage")
    message_count: int = Field(0, alias="messageCount")
    created_at: datetime = Field(..., alias="createdAt")
    last_active_at: datetime = Field(..., alias="lastActiveAt")

    class Config:
        populate_by_name = True


class StorageInfo(BaseModel):
    """Advisory storage usage of the session store."""
    used: int
    total: int
    session_count: int = Field(..., alias="sessionCount")
    usage_ratio: float = Field(..., alias="usageRatio")
    warning: bool = False

    class Config:
        populate_by_name = True


class ImportResult(BaseModel):
    """Outcome of an all-or-nothing session import."""
    success: bool
    imported: int = 0
    total: int = 0
    error: Optional[str] = None


class SessionCreate(BaseModel):
    """Session creation request."""
    persona_id: str = Field(..., alias="characterId")
    title: Optional[str] = None

    class Config:
        populate_by_name = True


class SessionRename(BaseModel):
    """Session rename request."""
    title: str = Field(..., min_length=1, max_length=100)


class MessageCreate(BaseModel):
    """Message append request; id and timestamp are assigned when omitted."""
    role: Literal["user", "character"] = Field(..., alias="type")
    content: str
    id: Optional[str] = None
    timestamp: Optional[datetime] = None
    is_complete: Optional[bool] = Field(None, alias="isComplete")
    can_continue: Optional[bool] = Field(None, alias="canContinue")
    attached_image: Optional[str] = Field(None, alias="attachedImage")

    class Config:
        populate_by_name = True

    def to_message(self) -> Message:
        data = self.model_dump(exclude_none=True)
        return Message(**data)
