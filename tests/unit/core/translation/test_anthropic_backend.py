from __future__ import annotations

"""
Unit tests for the Anthropic translation backend.

The SDK client is replaced by a MagicMock; SDK exceptions are built from real
httpx request/response objects so the error mapping sees genuine types.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import anthropic
import httpx
import pytest

from figma_i18n.core.translation.backends import AnthropicBackend, map_api_error
from figma_i18n.domain.errors import (
    AuthenticationError,
    RateLimitError,
    TransientBackendError,
)

_REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


def _status_error(cls: type, status: int) -> anthropic.APIStatusError:
    response = httpx.Response(status, request=_REQUEST)
    return cls("error", response=response, body=None)


def _client_returning(*blocks: SimpleNamespace) -> MagicMock:
    client = MagicMock()
    client.messages.create.return_value = SimpleNamespace(content=list(blocks))
    return client


def test_complete_joins_text_blocks() -> None:
    client = _client_returning(
        SimpleNamespace(type="text", text='  {"a": '),
        SimpleNamespace(type="tool_use", id="x"),
        SimpleNamespace(type="text", text='"b"}\n'),
    )
    backend = AnthropicBackend("sk-test", client=client)

    assert backend.complete("prompt", model="m", max_tokens=10) == '{"a": "b"}'
    client.messages.create.assert_called_once_with(
        model="m",
        max_tokens=10,
        messages=[{"role": "user", "content": "prompt"}],
    )


@pytest.mark.parametrize("error, expected", [
    (_status_error(anthropic.AuthenticationError, 401), AuthenticationError),
    (_status_error(anthropic.PermissionDeniedError, 403), AuthenticationError),
    (_status_error(anthropic.RateLimitError, 429), RateLimitError),
    (_status_error(anthropic.InternalServerError, 500), TransientBackendError),
    (anthropic.APITimeoutError(request=_REQUEST), TransientBackendError),
    (anthropic.APIConnectionError(request=_REQUEST), TransientBackendError),
])
def test_map_api_error(error: anthropic.APIError, expected: type) -> None:
    assert isinstance(map_api_error(error), expected)


def test_auth_guidance_names_the_variable() -> None:
    mapped = map_api_error(_status_error(anthropic.AuthenticationError, 401))
    assert "ANTHROPIC_API_KEY" in str(mapped)


def test_complete_raises_mapped_error() -> None:
    client = MagicMock()
    client.messages.create.side_effect = _status_error(anthropic.RateLimitError, 429)
    backend = AnthropicBackend("sk-test", client=client)

    with pytest.raises(RateLimitError) as exc:
        backend.complete("prompt", model="m", max_tokens=10)
    assert isinstance(exc.value.__cause__, anthropic.RateLimitError)
