"""LLM module - provides unified interface for LLM API providers."""

from .base import LLMProvider, LLMMessage, LLMResponse, COMPLETE_FINISH_REASONS
from .openai_compatible_provider import OpenAICompatibleProvider, LLMProviderError
from .factory import create_llm_provider, PROVIDER_PRESETS

__all__ = [
    'LLMProvider',
    'LLMMessage',
    'LLMResponse',
    'COMPLETE_FINISH_REASONS',
    'OpenAICompatibleProvider',
    'LLMProviderError',
    'create_llm_provider',
    'PROVIDER_PRESETS',
]
