"""
Request logging middleware.

Pure ASGI (not BaseHTTPMiddleware), so file download responses such as the
session export pass through untouched. Logs method, path, status and
duration; request bodies are only logged at DEBUG, filtered and truncated,
because chat bodies carry the user's conversation.
"""

import json
import logging
import time
from typing import Iterable, Optional
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ..core.logging_config import filter_sensitive_data, truncate_large_data

logger = logging.getLogger(__name__)

MAX_LOGGED_BODY = 2000


def _summarize_body(body: bytes) -> Optional[str]:
    """Filtered, truncated text of a request body, or None when empty."""
    if not body:
        return None
    text = body.decode("utf-8", errors="ignore")
    try:
        text = json.dumps(filter_sensitive_data(json.loads(text)), ensure_ascii=False)
    except json.JSONDecodeError:
        pass
    return truncate_large_data(text, max_length=MAX_LOGGED_BODY)


def _level_for(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware:
    """Logs one line per HTTP request with its outcome."""

    def __init__(self, app: ASGIApp, exclude_paths: Optional[Iterable[str]] = None):
        """
        Args:
            app: The ASGI application
            exclude_paths: Paths that are never logged (e.g. health probes)
        """
        self.app = app
        self.exclude_paths = set(exclude_paths or ("/", "/health"))

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope.get("path", "") in self.exclude_paths:
            await self.app(scope, receive, send)
            return

        method = scope.get("method", "UNKNOWN")
        path = scope.get("path", "")
        client = scope.get("client")
        start_time = time.time()
        status_code = 0
        body_chunks = []
        capture_body = logger.isEnabledFor(logging.DEBUG)

        async def receive_wrapper() -> Message:
            message = await receive()
            if capture_body and message["type"] == "http.request":
                body_chunks.append(message.get("body", b""))
            return message

        async def send_wrapper(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message.get("status", 0)
            await send(message)

        fields = {
            "method": method,
            "path": path,
            "query": scope.get("query_string", b"").decode("utf-8", errors="ignore") or None,
            "client": client[0] if client else None,
        }

        try:
            await self.app(scope, receive_wrapper, send_wrapper)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"Request failed: {method} {path} - {e}",
                exc_info=True,
                extra={"extra_fields": {**fields, "duration_ms": round(duration_ms, 2), "error": str(e)}}
            )
            raise

        duration_ms = (time.time() - start_time) * 1000
        fields.update(status_code=status_code, duration_ms=round(duration_ms, 2))

        if capture_body:
            body_text = _summarize_body(b"".join(body_chunks))
            if body_text:
                logger.debug(f"Request body: {body_text}", extra={"extra_fields": {"path": path}})

        logger.log(
            _level_for(status_code),
            f"Request completed: {method} {path} - {status_code} ({duration_ms:.2f}ms)",
            extra={"extra_fields": fields}
        )
