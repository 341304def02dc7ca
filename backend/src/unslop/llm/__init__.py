# backend/src/unslop/llm/__init__.py
"""LLM client abstraction."""

from unslop.llm.client import (
    DEFAULT_MODEL,
    LLMAuthenticationError,
    LLMClient,
    LLMConnectionError,
    LLMError,
    LLMNotConfiguredError,
    LLMRateLimitError,
)

__all__ = [
    "DEFAULT_MODEL",
    "LLMAuthenticationError",
    "LLMClient",
    "LLMConnectionError",
    "LLMError",
    "LLMNotConfiguredError",
    "LLMRateLimitError",
]
