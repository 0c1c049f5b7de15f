"""
OpenAI-compatible chat/completions provider.
Zhipu GLM, OpenAI and Volcano Engine Ark all speak this wire format; only
the base URL, default model and provider label differ.
"""

import httpx
import logging
import time
from typing import Optional, List, Dict, Any

from ..core.logging_config import truncate_large_data
from .base import LLMProvider, LLMMessage, LLMResponse

logger = logging.getLogger(__name__)


class LLMProviderError(Exception):
    """The provider answered with an error status or an unusable body."""


class OpenAICompatibleProvider(LLMProvider):
    """
    Provider for any endpoint exposing POST {base_url}/chat/completions
    with Bearer authentication.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str,
        provider_name: str = "openai",
        default_temperature: float = 0.8,
        default_max_tokens: int = 2000,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(api_key, model, base_url.rstrip("/"), default_temperature, default_max_tokens)
        self.provider_name = provider_name
        self.timeout = timeout
        self.transport = transport

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _build_payload(self, messages: List[LLMMessage], temperature: Optional[float],
                       max_tokens: Optional[int], **kwargs) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": kwargs.pop("model", self.model),
            "messages": self._format_messages(messages),
            "temperature": temperature if temperature is not None else self.default_temperature,
            "max_tokens": max_tokens or self.default_max_tokens,
            "stream": False,
        }
        payload.update(kwargs)
        return payload

    async def chat_completion(
        self,
        messages: List[LLMMessage],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        """Send request to the Chat Completions endpoint."""
        start_time = time.time()
        url = f"{self.base_url}/chat/completions"
        payload = self._build_payload(messages, temperature, max_tokens, **kwargs)

        if logger.isEnabledFor(logging.DEBUG):
            last = str(messages[-1].content)[:200] if messages else ""
            logger.debug(
                f"LLM API call starting: provider={self.provider_name}, model={payload['model']}, "
                f"temperature={payload['temperature']}, {len(messages)} messages, last: {last}"
            )

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.post(url, json=payload, headers=self._get_headers())
                logger.debug(f"LLM API response status: {resp.status_code}, "
                             f"response: {truncate_large_data(resp.text, 2000)}")
                resp.raise_for_status()
                data = resp.json()

            try:
                choice = data["choices"][0]
                content = choice["message"]["content"] or ""
            except (KeyError, IndexError, TypeError) as e:
                raise LLMProviderError(f"Malformed completion response: {e}") from e

            usage = data.get("usage") or {}
            duration_ms = (time.time() - start_time) * 1000

            logger.info(
                "LLM API call completed",
                extra={"extra_fields": {
                    "provider": self.provider_name,
                    "model": data.get("model", payload["model"]),
                    "finish_reason": choice.get("finish_reason"),
                    "prompt_tokens": usage.get("prompt_tokens", 0),
                    "completion_tokens": usage.get("completion_tokens", 0),
                    "total_tokens": usage.get("total_tokens", 0),
                    "duration_ms": round(duration_ms, 2),
                }}
            )

            return LLMResponse(
                content=content.strip(),
                model=data.get("model", payload["model"]),
                finish_reason=choice.get("finish_reason"),
                usage=usage,
                raw=data,
            )
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"LLM API call failed: {str(e)}",
                exc_info=True,
                extra={"extra_fields": {
                    "provider": self.provider_name,
                    "model": payload.get("model"),
                    "duration_ms": round(duration_ms, 2),
                    "error": str(e),
                }}
            )
            raise
