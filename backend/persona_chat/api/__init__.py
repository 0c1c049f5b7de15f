"""API module."""

from .chat import router as chat_router
from .personas import router as personas_router
from .sessions import router as sessions_router
from .dependencies import init_services

__all__ = ['chat_router', 'personas_router', 'sessions_router', 'init_services']
