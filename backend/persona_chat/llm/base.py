"""
LLM Provider Base - Abstract base for chat-completion providers.
Supports multimodal user messages (text + one image).
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, List, Union
from dataclasses import dataclass, field

COMPLETE_FINISH_REASONS = {"stop", "normal", None}


@dataclass
class LLMMessage:
    """
    A message in a conversation.
    Content is plain text or a list of OpenAI-style content blocks.
    """
    role: str  # "system", "user", "assistant"
    content: Union[str, List[Dict[str, Any]]]

    @staticmethod
    def text(role: str, text: str) -> "LLMMessage":
        return LLMMessage(role=role, content=text)

    @staticmethod
    def with_image(role: str, text: str, image_url: str) -> "LLMMessage":
        """
        Text plus an image reference.

        Args:
            role: Message role
            text: Text content
            image_url: http(s) URL or data URI of the image
        """
        return LLMMessage(role=role, content=[
            {"type": "image_url", "image_url": {"url": image_url}},
            {"type": "text", "text": text},
        ])


@dataclass
class LLMResponse:
    """Response from an LLM API call."""
    content: str
    model: str = ""
    finish_reason: Optional[str] = None
    usage: Dict[str, int] = field(default_factory=dict)
    raw: Optional[Dict[str, Any]] = None

    @property
    def is_complete(self) -> bool:
        """False when the provider cut the reply short (e.g. "length")."""
        return self.finish_reason in COMPLETE_FINISH_REASONS


class LLMProvider(ABC):
    """
    Abstract base class for LLM API providers.
    All providers must implement chat_completion.
    """

    def __init__(self, api_key: str, model: str, base_url: Optional[str] = None,
                 default_temperature: float = 0.8, default_max_tokens: int = 2000):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.default_temperature = default_temperature
        self.default_max_tokens = default_max_tokens

    @abstractmethod
    async def chat_completion(
        self,
        messages: List[LLMMessage],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        """
        Send a chat completion request.

        Args:
            messages: Conversation messages, system prompt first
            temperature: Sampling temperature override
            max_tokens: Max tokens override
            **kwargs: Additional provider-specific parameters

        Returns:
            LLMResponse with the generated content and finish reason
        """
        pass

    def _format_messages(self, messages: List[LLMMessage]) -> List[Dict[str, Any]]:
        """Convert LLMMessage list to API-compatible format."""
        return [{"role": m.role, "content": m.content} for m in messages]
