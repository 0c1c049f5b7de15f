"""
Service wiring for the API routers.

init_services() is called once from the app lifespan (or from tests with a
MemoryStorage); the get_* functions are FastAPI dependencies.
"""

from typing import Optional

from ..config import settings
from ..core import SessionStore
from ..llm import LLMProvider, create_llm_provider
from ..personas import PersonaRegistry
from ..services import ChatService
from ..storage import LocalStorage, StorageInterface, StorageSessionRepository

_session_store: Optional[SessionStore] = None
_persona_registry: Optional[PersonaRegistry] = None
_chat_service: Optional[ChatService] = None


def _get_llm_provider() -> Optional[LLMProvider]:
    """Get configured LLM provider or None."""
    return create_llm_provider(
        provider=settings.llm_provider,
        api_key=settings.llm_api_key,
        model=settings.llm_model,
        base_url=settings.llm_base_url,
        default_temperature=settings.llm_temperature,
        default_max_tokens=settings.llm_max_tokens,
        timeout=settings.llm_timeout_seconds,
    )


def init_services(
    storage: Optional[StorageInterface] = None,
    provider: Optional[LLMProvider] = None,
) -> SessionStore:
    """
    Initialize the global services.

    Args:
        storage: Keyed storage. If None, creates LocalStorage at the configured path.
        provider: LLM provider. If None, builds one from settings (may stay None).
    """
    global _session_store, _persona_registry, _chat_service
    if storage is None:
        storage = LocalStorage(settings.local_storage_path)
    if provider is None:
        provider = _get_llm_provider()

    _persona_registry = PersonaRegistry(storage, key=settings.custom_personas_key)
    _session_store = SessionStore(
        StorageSessionRepository(
            storage,
            key=settings.sessions_key,
            title_factory=_persona_registry.placeholder_title,
        ),
        _persona_registry,
        max_sessions=settings.max_sessions,
        capacity_bytes=settings.storage_capacity_bytes,
        warning_ratio=settings.storage_warning_ratio,
    )
    _chat_service = ChatService(
        _session_store,
        _persona_registry,
        provider,
        history_window=settings.chat_history_window,
    )
    return _session_store


def get_session_store() -> SessionStore:
    if _session_store is None:
        raise RuntimeError("Services not initialized. Call init_services() first.")
    return _session_store


def get_persona_registry() -> PersonaRegistry:
    if _persona_registry is None:
        raise RuntimeError("Services not initialized. Call init_services() first.")
    return _persona_registry


def get_chat_service() -> ChatService:
    if _chat_service is None:
        raise RuntimeError("Services not initialized. Call init_services() first.")
    return _chat_service
