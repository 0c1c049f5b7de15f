"""Models module."""

from .session import (
    Message, Session, SessionSummary, StorageInfo, ImportResult,
    SessionCreate, SessionRename, MessageCreate,
)
from .persona import Persona, PersonaCreate
from .chat import ChatRequest, ChatReply

__all__ = [
    'Message', 'Session', 'SessionSummary', 'StorageInfo', 'ImportResult',
    'SessionCreate', 'SessionRename', 'MessageCreate',
    'Persona', 'PersonaCreate',
    'ChatRequest', 'ChatReply',
]
