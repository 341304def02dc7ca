# backend/src/unslop/llm/client.py
"""LiteLLM-based client for OpenRouter chat completions."""

import json
import logging
import time
from collections.abc import AsyncGenerator, Callable
from datetime import datetime, timezone
from pathlib import Path

from litellm import acompletion
from litellm.exceptions import (
    APIConnectionError,
    APIError,
    AuthenticationError,
    RateLimitError,
)

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "google/gemini-3-flash-preview"


class LLMError(Exception):
    """Base exception for LLM client errors."""

    pass


class LLMNotConfiguredError(LLMError):
    """Raised when no API key is available."""

    pass


class LLMConnectionError(LLMError):
    """Raised when unable to connect to the LLM provider."""

    pass


class LLMAuthenticationError(LLMError):
    """Raised when authentication with the LLM provider fails."""

    pass


class LLMRateLimitError(LLMError):
    """Raised when rate limited by the LLM provider."""

    pass


def _translate_error(e: Exception, action: str) -> LLMError:
    """Map a LiteLLM exception onto the client's error types."""
    if isinstance(e, AuthenticationError):
        return LLMAuthenticationError(f"Authentication failed: {e}")
    if isinstance(e, RateLimitError):
        return LLMRateLimitError(f"Rate limit exceeded: {e}")
    if isinstance(e, APIConnectionError):
        return LLMConnectionError(f"Connection failed: {e}")
    if isinstance(e, APIError):
        return LLMError(f"LLM API error: {e}")
    return LLMError(f"Failed to {action} content: {e}")


class LLMClient:
    """Text generation through OpenRouter.

    Requests are {prompt, system_prompt, model}; responses are either one
    completion or a stream of text chunks. Failures raise an LLMError with a
    message fit to show the user. Nothing is retried.
    """

    def __init__(
        self,
        api_key: str | None,
        model: str = DEFAULT_MODEL,
        api_base: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 8192,
        log_path: Path | None = None,
    ):
        """Initialize LLM client.

        Args:
            api_key: OpenRouter API key; None leaves the client unconfigured.
            model: Default OpenRouter model id, e.g. "anthropic/claude-3.5-sonnet".
            api_base: Optional custom endpoint.
            temperature: Sampling temperature.
            max_tokens: Maximum response tokens.
            log_path: Optional path to JSONL log file for query logging.
        """
        self.api_key = api_key
        self.model = model
        self.api_base = api_base
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.log_path = log_path

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _log_query(
        self,
        model: str,
        system_prompt: str | None,
        prompt: str,
        response: str | None,
        duration_ms: int,
        error: str | None,
    ) -> None:
        """Append a query record to the JSONL log file."""
        if not self.log_path:
            return

        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "model": model,
            "request": {
                "system_prompt": system_prompt,
                "prompt": prompt,
                "temperature": self.temperature,
                "max_tokens": self.max_tokens,
            },
            "response": response,
            "duration_ms": duration_ms,
            "error": error,
        }

        try:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.log_path, "a", encoding="utf-8") as f:
                f.write(json.dumps(entry) + "\n")
        except OSError as e:
            logger.warning(f"Failed to write LLM query log: {e}")

    def _build_kwargs(self, prompt: str, system_prompt: str | None, model: str) -> dict:
        if not self.api_key:
            raise LLMNotConfiguredError(
                "OpenRouter API key not configured. Add one in Settings or set OPENROUTER_API_KEY."
            )

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        kwargs = {
            "model": f"openrouter/{model}",
            "messages": messages,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "api_key": self.api_key,
        }
        if self.api_base:
            kwargs["api_base"] = self.api_base
        return kwargs

    async def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        model: str | None = None,
    ) -> str:
        """Generate a single completion.

        Returns:
            Generated text; an empty completion is returned as "".
        """
        model = model or self.model
        kwargs = self._build_kwargs(prompt, system_prompt, model)

        start_time = time.perf_counter()
        try:
            response = await acompletion(**kwargs)
            result: str = str(response.choices[0].message.content or "")
        except Exception as e:
            duration_ms = int((time.perf_counter() - start_time) * 1000)
            self._log_query(model, system_prompt, prompt, None, duration_ms, str(e))
            logger.error(f"AI generation error: {e}")
            raise _translate_error(e, "generate") from e

        duration_ms = int((time.perf_counter() - start_time) * 1000)
        self._log_query(model, system_prompt, prompt, result, duration_ms, None)
        return result

    async def generate_stream(
        self,
        prompt: str,
        system_prompt: str | None = None,
        model: str | None = None,
    ) -> AsyncGenerator[str, None]:
        """Generate a completion as a stream of text chunks.

        Yields:
            Non-empty chunks in the order they arrive.
        """
        model = model or self.model
        kwargs = self._build_kwargs(prompt, system_prompt, model)
        kwargs["stream"] = True

        start_time = time.perf_counter()
        accumulated: list[str] = []
        error_msg: str | None = None

        try:
            response = await acompletion(**kwargs)
            async for chunk in response:
                content = chunk.choices[0].delta.content
                if content:
                    accumulated.append(content)
                    yield content
        except Exception as e:
            error_msg = str(e)
            logger.error(f"AI streaming error: {e}")
            raise _translate_error(e, "stream") from e
        finally:
            duration_ms = int((time.perf_counter() - start_time) * 1000)
            self._log_query(
                model,
                system_prompt,
                prompt,
                "".join(accumulated) if accumulated else None,
                duration_ms,
                error_msg,
            )

    async def stream_to_string(
        self,
        prompt: str,
        system_prompt: str | None = None,
        model: str | None = None,
        on_chunk: Callable[[str], None] | None = None,
    ) -> str:
        """Stream a completion, calling on_chunk per chunk, and return the whole text."""
        parts: list[str] = []
        async for chunk in self.generate_stream(prompt, system_prompt=system_prompt, model=model):
            parts.append(chunk)
            if on_chunk is not None:
                on_chunk(chunk)
        return "".join(parts)
