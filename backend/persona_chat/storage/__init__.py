"""Storage module - provides interface and implementations for data persistence."""

from .interface import StorageInterface
from .local_storage import LocalStorage
from .memory_storage import MemoryStorage
from .normalization import (
    coerce_session_records,
    normalize_session,
    normalize_sessions,
    parse_import_document,
    parse_timestamp,
)
from .session_repository import SessionRepository, StorageSessionRepository, serialize_sessions

__all__ = [
    'StorageInterface', 'LocalStorage', 'MemoryStorage',
    'SessionRepository', 'StorageSessionRepository', 'serialize_sessions',
    'coerce_session_records', 'normalize_session', 'normalize_sessions',
    'parse_import_document', 'parse_timestamp',
]
