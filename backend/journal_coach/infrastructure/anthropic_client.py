"""Resilient Anthropic Client: wraps AsyncAnthropic streaming with error mapping.

Invariants:
    - stream_text() yields raw text deltas in arrival order (any size, 1..N chars)
    - All SDK failures (setup and mid-stream) surface as AnthropicAPIError
    - CancelledError / GeneratorExit pass through untouched
    - No automatic retry: a half-delivered stream cannot be replayed to the client

Design Decisions:
    - Wrapper over raw client: isolates SDK error types from services
"""

import logging
from collections.abc import AsyncIterator

import anthropic
from anthropic import (
    APIConnectionError,
    APIError,
    APIStatusError,
    APITimeoutError,
    InternalServerError,
    RateLimitError,
)

from journal_coach.core.errors import AnthropicAPIError, ErrorContext

logger = logging.getLogger(__name__)

# OverloadedError (HTTP 529) is not re-exported by every SDK release.
_OVERLOADED_STATUS = 529


def _is_overloaded(e: APIError) -> bool:
    """Check if error is Anthropic 529 Overloaded."""
    return isinstance(e, APIStatusError) and e.status_code == _OVERLOADED_STATUS


class ResilientAnthropicClient:
    """Wraps the Anthropic client with timeouts and error mapping."""

    def __init__(
        self,
        api_key: str,
        model: str,
        max_tokens: int = 2048,
        timeout_seconds: int = 120,
    ):
        self.client = anthropic.AsyncAnthropic(
            api_key=api_key,
            timeout=timeout_seconds,
        )
        self.model = model
        self.max_tokens = max_tokens

    async def stream_text(
        self,
        *,
        system: str,
        messages: list[dict],
        context: ErrorContext | None = None,
    ) -> AsyncIterator[str]:
        """Stream text deltas for one completion."""
        try:
            async with self.client.messages.stream(
                model=self.model,
                max_tokens=self.max_tokens,
                system=system,
                messages=messages,
            ) as stream:
                async for text in stream.text_stream:
                    yield text
                self._log_success(await stream.get_final_message())
        except RateLimitError as e:
            raise AnthropicAPIError(
                "Rate limit exceeded (streaming)",
                "rate_limit",
                retry_after_ms=self._extract_retry_after(e),
                context=context,
            )
        except APITimeoutError:
            # subclass of APIConnectionError, so it must be matched first
            raise AnthropicAPIError(
                "API timeout during stream", "timeout", context=context,
            )
        except (APIConnectionError, InternalServerError) as e:
            raise AnthropicAPIError(
                f"Connection error during stream: {e}",
                "connection_error",
                context=context,
            )
        except APIError as e:
            if _is_overloaded(e):
                raise AnthropicAPIError(
                    "Anthropic API overloaded (529)",
                    "overloaded",
                    context=context,
                )
            raise AnthropicAPIError(
                str(e), "client_error", context=context,
            )

    def _log_success(self, message) -> None:
        usage = getattr(message, "usage", None)
        if usage is None:
            return
        logger.info(
            "Anthropic stream complete",
            extra={
                "input_tokens": usage.input_tokens,
                "output_tokens": usage.output_tokens,
            },
        )

    def _extract_retry_after(self, error: RateLimitError) -> int | None:
        """Extract Retry-After header (returns milliseconds)."""
        response = getattr(error, "response", None)
        if response is None:
            return None
        val = response.headers.get("retry-after")
        if val and val.isdigit():
            return int(val) * 1000
        return None
