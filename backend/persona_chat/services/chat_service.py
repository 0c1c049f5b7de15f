"""
Chat Service - Turns a user message into a persona reply.

The user message is stored before the provider is called, so a failed
completion leaves the conversation intact for a retry.
"""

import logging
from typing import List, Optional

from ..core.logging_config import SessionLoggerAdapter
from ..core.session_store import SessionStore
from ..exceptions import ChatServiceError
from ..llm import LLMMessage, LLMProvider, LLMResponse
from ..models import ChatReply, Message, Session
from ..personas import PersonaRegistry, build_system_prompt

logger = logging.getLogger(__name__)

CONTINUE_INSTRUCTION = "请继续你刚才未完成的回答，直接从停止的地方继续，不要重复之前的内容。"
CONTINUE_OVERLAP_WORDS = 5

ROLE_TO_LLM = {"user": "user", "character": "assistant"}


def history_messages(messages: List[Message], window: int) -> List[LLMMessage]:
    """Last `window` non-empty messages as provider messages."""
    usable = [m for m in messages if m.content.strip()]
    if window <= 0:
        return []
    return [LLMMessage.text(ROLE_TO_LLM[m.role], m.content) for m in usable[-window:]]


def strip_repeated_prefix(previous: str, continuation: str) -> str:
    """Drop the tail of the previous reply if the model echoed it back."""
    continuation = continuation.strip()
    tail = " ".join(previous.rstrip().split(" ")[-CONTINUE_OVERLAP_WORDS:])
    if tail and continuation.startswith(tail):
        return continuation[len(tail):].strip()
    return continuation


class ChatService:
    """Sends turns to the configured LLM provider and records them."""

    def __init__(
        self,
        store: SessionStore,
        personas: PersonaRegistry,
        provider: Optional[LLMProvider],
        history_window: int = 6,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ):
        self.store = store
        self.personas = personas
        self.provider = provider
        self.history_window = history_window
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def send_message(
        self,
        session_id: str,
        text: str,
        attached_image: Optional[str] = None,
    ) -> Optional[ChatReply]:
        """
        Append the user message, ask the provider, append the reply.

        Returns:
            Optional[ChatReply]: None if the session does not exist

        Raises:
            PersonaNotFoundError: if the session's persona is gone
            ChatServiceError: if the provider is missing or fails
        """
        session = await self.store.get_session(session_id)
        if session is None:
            return None

        persona = await self.personas.require(session.persona_id)
        provider = self._require_provider()
        log = SessionLoggerAdapter(logger, {"session_id": session_id, "persona_id": persona.id})

        history = history_messages(session.messages, self.history_window)
        user_message = Message(role="user", content=text, attached_image=attached_image)
        await self.store.append_message(session_id, user_message)

        if attached_image:
            prompt = LLMMessage.with_image("user", text, attached_image)
        else:
            prompt = LLMMessage.text("user", text)
        messages = [LLMMessage.text("system", build_system_prompt(persona)), *history, prompt]

        response = await self._complete(provider, messages, log)
        reply = Message(
            role="character",
            content=response.content,
            is_complete=response.is_complete,
            can_continue=not response.is_complete,
        )
        session = await self.store.append_message(session_id, reply)
        if session is None:
            # Deleted while the provider was answering
            return None

        log.info(f"Reply recorded, finish_reason={response.finish_reason}")
        return ChatReply(reply=reply, session=session, finish_reason=response.finish_reason)

    async def continue_message(self, session_id: str, message_id: str) -> Optional[ChatReply]:
        """
        Extend a truncated character reply in place.

        Returns:
            Optional[ChatReply]: None if the session or message does not exist
        """
        session = await self.store.get_session(session_id)
        if session is None:
            return None

        index = self._find_character_message(session, message_id)
        if index is None:
            return None

        persona = await self.personas.require(session.persona_id)
        provider = self._require_provider()
        log = SessionLoggerAdapter(logger, {"session_id": session_id, "message_id": message_id})

        previous = session.messages[index]
        messages = [
            LLMMessage.text("system", build_system_prompt(persona)),
            *history_messages(session.messages[:index], self.history_window),
            LLMMessage.text("assistant", previous.content),
            LLMMessage.text("user", CONTINUE_INSTRUCTION),
        ]

        response = await self._complete(provider, messages, log)
        continuation = strip_repeated_prefix(previous.content, response.content)
        updated = previous.model_copy(update={
            "content": previous.content + continuation,
            "is_complete": response.is_complete,
            "can_continue": not response.is_complete,
        })

        session = await self.store.replace_message(session_id, message_id, updated)
        if session is None:
            return None

        log.info(f"Reply continued, finish_reason={response.finish_reason}")
        return ChatReply(reply=updated, session=session, finish_reason=response.finish_reason)

    def _require_provider(self) -> LLMProvider:
        if self.provider is None:
            raise ChatServiceError("LLM provider is not configured")
        return self.provider

    async def _complete(self, provider: LLMProvider, messages: List[LLMMessage],
                        log: SessionLoggerAdapter) -> LLMResponse:
        try:
            response = await provider.chat_completion(
                messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except Exception as e:
            log.error(f"Chat completion failed: {e}")
            raise ChatServiceError(f"Chat completion failed: {e}") from e

        if not response.content.strip():
            raise ChatServiceError("No content received from LLM")
        return response

    @staticmethod
    def _find_character_message(session: Session, message_id: str) -> Optional[int]:
        for index, message in enumerate(session.messages):
            if message.id == message_id and message.role == "character":
                return index
        return None
