# backend/tests/test_llm.py
"""LLM client tests."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from litellm.exceptions import AuthenticationError, RateLimitError

from unslop.llm import (
    LLMAuthenticationError,
    LLMClient,
    LLMError,
    LLMNotConfiguredError,
    LLMRateLimitError,
)


@pytest.fixture
def mock_completion():
    """Mock litellm completion response."""
    with patch("unslop.llm.client.acompletion") as mock:
        mock.return_value = AsyncMock(choices=[AsyncMock(message=AsyncMock(content="Test response"))])
        yield mock


def _stream(*pieces):
    """Async iterator of streaming chunks with the given delta contents."""

    async def gen():
        for piece in pieces:
            yield MagicMock(choices=[MagicMock(delta=MagicMock(content=piece))])

    return gen()


async def test_generate_returns_content(mock_completion):
    client = LLMClient(api_key="sk-or-v1-test")

    response = await client.generate("Test prompt")

    assert response == "Test response"
    mock_completion.assert_called_once()


async def test_model_routed_through_openrouter(mock_completion):
    client = LLMClient(api_key="sk-or-v1-test", model="anthropic/claude-3.5-sonnet")

    await client.generate("Test")

    kwargs = mock_completion.call_args.kwargs
    assert kwargs["model"] == "openrouter/anthropic/claude-3.5-sonnet"
    assert kwargs["api_key"] == "sk-or-v1-test"


async def test_per_request_model_overrides_default(mock_completion):
    client = LLMClient(api_key="sk-or-v1-test", model="openai/gpt-4o")

    await client.generate("Test", model="google/gemini-2.5-pro")

    assert mock_completion.call_args.kwargs["model"] == "openrouter/google/gemini-2.5-pro"


async def test_system_prompt_in_messages(mock_completion):
    client = LLMClient(api_key="sk-or-v1-test")

    await client.generate("User message", system_prompt="You are a product planner")

    messages = mock_completion.call_args.kwargs["messages"]
    assert messages == [
        {"role": "system", "content": "You are a product planner"},
        {"role": "user", "content": "User message"},
    ]


async def test_api_base_passed_when_set(mock_completion):
    client = LLMClient(api_key="sk-or-v1-test", api_base="https://openrouter.ai/api/v1")

    await client.generate("Test")

    assert mock_completion.call_args.kwargs["api_base"] == "https://openrouter.ai/api/v1"


async def test_missing_api_key_raises_not_configured(mock_completion):
    client = LLMClient(api_key=None)

    assert client.is_configured() is False
    with pytest.raises(LLMNotConfiguredError):
        await client.generate("Test")
    mock_completion.assert_not_called()


async def test_authentication_error_translated():
    with patch("unslop.llm.client.acompletion") as mock:
        mock.side_effect = AuthenticationError(
            message="Invalid API key",
            llm_provider="openrouter",
            model="openai/gpt-4o",
        )
        client = LLMClient(api_key="sk-or-v1-bad")

        with pytest.raises(LLMAuthenticationError):
            await client.generate("Test")


async def test_rate_limit_error_translated():
    with patch("unslop.llm.client.acompletion") as mock:
        mock.side_effect = RateLimitError(
            message="Rate limit exceeded",
            llm_provider="openrouter",
            model="openai/gpt-4o",
        )
        client = LLMClient(api_key="sk-or-v1-test")

        with pytest.raises(LLMRateLimitError):
            await client.generate("Test")


async def test_unexpected_error_wrapped_with_message():
    with patch("unslop.llm.client.acompletion") as mock:
        mock.side_effect = ValueError("bad payload")
        client = LLMClient(api_key="sk-or-v1-test")

        with pytest.raises(LLMError, match="Failed to generate content: bad payload"):
            await client.generate("Test")


async def test_stream_yields_non_empty_chunks():
    with patch("unslop.llm.client.acompletion", new=AsyncMock()) as mock:
        mock.return_value = _stream("Hel", None, "lo", "")
        client = LLMClient(api_key="sk-or-v1-test")

        chunks = [chunk async for chunk in client.generate_stream("Test")]

    assert chunks == ["Hel", "lo"]
    assert mock.call_args.kwargs["stream"] is True


async def test_stream_to_string_calls_on_chunk():
    with patch("unslop.llm.client.acompletion", new=AsyncMock()) as mock:
        mock.return_value = _stream("a", "b", "c")
        client = LLMClient(api_key="sk-or-v1-test")
        seen = []

        result = await client.stream_to_string("Test", on_chunk=seen.append)

    assert result == "abc"
    assert seen == ["a", "b", "c"]


async def test_queries_logged_as_jsonl(tmp_path, mock_completion):
    log_path = tmp_path / "logs" / "llm-queries.jsonl"
    client = LLMClient(api_key="sk-or-v1-test", log_path=log_path)

    await client.generate("First")
    await client.generate("Second")

    entries = [json.loads(line) for line in log_path.read_text().splitlines()]
    assert [e["request"]["prompt"] for e in entries] == ["First", "Second"]
    assert entries[0]["response"] == "Test response"
    assert entries[0]["error"] is None
