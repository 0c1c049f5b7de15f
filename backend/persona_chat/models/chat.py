"""
Chat Models - Request/response bodies of the chat endpoints.
"""

from typing import Optional

from pydantic import BaseModel, Field

from .session import Message, Session


class ChatRequest(BaseModel):
    """User turn sent to a persona."""
    message: str = Field(..., min_length=1)
    attached_image: Optional[str] = Field(None, alias="attachedImage")

    class Config:
        populate_by_name = True


class ChatReply(BaseModel):
    """Persona reply together with the updated session."""
    reply: Message
    session: Session
    finish_reason: Optional[str] = Field(None, alias="finishReason")

    class Config:
        populate_by_name = True
