"""
LLM Provider Factory - Creates the configured LLM provider instance.
"""

from typing import Dict, Optional
from .base import LLMProvider
from .openai_compatible_provider import OpenAICompatibleProvider

# provider -> (base_url, default model)
PROVIDER_PRESETS: Dict[str, tuple] = {
    "zhipu": ("https://open.bigmodel.cn/api/paas/v4", "glm-4.5"),
    "openai": ("https://api.openai.com/v1", "gpt-4o-mini"),
    "volcengine": ("https://ark.cn-beijing.volces.com/api/v3", "doubao-seed-1-6-250615"),
}


def create_llm_provider(
    provider: str = "zhipu",
    api_key: Optional[str] = "",
    model: Optional[str] = None,
    base_url: Optional[str] = None,
    **kwargs
) -> Optional[LLMProvider]:
    """
    Create an LLM provider instance based on configuration.

    Args:
        provider: Provider name ("zhipu", "openai" or "volcengine")
        api_key: API key for the provider
        model: Model name (uses provider default if not specified)
        base_url: Custom base URL (uses provider default if not specified)
        **kwargs: Passed through to the provider (temperature, timeout, ...)

    Returns:
        LLMProvider instance, or None if api_key is not configured
    """
    if provider not in PROVIDER_PRESETS:
        raise ValueError(f"Unsupported LLM provider: {provider}")

    if not api_key:
        return None

    default_url, default_model = PROVIDER_PRESETS[provider]
    return OpenAICompatibleProvider(
        api_key=api_key,
        model=model or default_model,
        base_url=base_url or default_url,
        provider_name=provider,
        **kwargs
    )
