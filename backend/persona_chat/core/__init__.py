"""Core module - session store and logging setup."""

from .session_store import SessionStore

__all__ = ['SessionStore']
