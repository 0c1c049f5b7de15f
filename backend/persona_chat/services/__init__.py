"""Services module - chat orchestration on top of the session store."""

from .chat_service import ChatService, strip_repeated_prefix

__all__ = ['ChatService', 'strip_repeated_prefix']
