"""
Shared test fixtures and configuration.
"""

import pytest
import os
from datetime import datetime, timedelta, timezone
from typing import List, Tuple

# Set test environment variables before importing app modules
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("LOCAL_STORAGE_PATH", "/tmp/persona_chat_test_data")
os.environ.setdefault("LOG_FILE_ENABLED", "false")
os.environ.setdefault("LLM_API_KEY", "")

from persona_chat.core import SessionStore
from persona_chat.models import Message, Session
from persona_chat.personas import PersonaRegistry
from persona_chat.storage import MemoryStorage, StorageSessionRepository


class FakeClock:
    """Deterministic clock; advance() moves time forward."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


def make_session(persona_id: str, turns: List[Tuple[str, str]], session_id: str = "s-1",
                 title: str = "与某人的对话 - 1月1日 12:00") -> Session:
    """Build a session from (role, content) pairs."""
    return Session(
        id=session_id,
        persona_id=persona_id,
        title=title,
        messages=[Message(role=role, content=content) for role, content in turns],
    )


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def personas(storage):
    return PersonaRegistry(storage)


@pytest.fixture
def repository(storage, personas):
    return StorageSessionRepository(storage, title_factory=personas.placeholder_title)


@pytest.fixture
def store(repository, personas, clock):
    return SessionStore(repository, personas, clock=clock)
