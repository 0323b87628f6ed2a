"""Completion gateway: request shape, policy constants, failure classes.

The Groq client is replaced by a MagicMock through client_factory.
"""

from dataclasses import replace
from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import pytest
from groq import APIConnectionError, APIResponseValidationError, APIStatusError, APITimeoutError

from backend.app.chat.models import Message, Role
from backend.app.core.errors import ConfigurationError, EmptyResponseError, UpstreamError
from backend.app.core.llm.groq_client import CompletionGateway
from backend.app.orchestrator.prompt_assembler import build_directive, history_window

REQUEST = httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions")


def _response(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _gateway(settings, create_result=None, create_error=None):
    client = MagicMock()
    if create_error is not None:
        client.chat.completions.create.side_effect = create_error
    else:
        client.chat.completions.create.return_value = create_result
    factory = MagicMock(return_value=client)
    return CompletionGateway(settings, client_factory=factory), client, factory


def _history(n):
    return [Message(role=Role.USER if i % 2 == 0 else Role.ASSISTANT, content=f"m{i}") for i in range(n)]


class TestRequestAssembly:

    def test_directive_and_summary_joined(self):
        assert build_directive("BASE", "moods") == "BASE\n\nmoods"

    def test_empty_summary_leaves_directive(self):
        assert build_directive("BASE", "") == "BASE"

    def test_window_keeps_last_ten_in_order(self):
        window = history_window(_history(100))
        assert [m.content for m in window] == [f"m{i}" for i in range(90, 100)]

    def test_window_shorter_history_untouched(self):
        assert len(history_window(_history(3))) == 3

    def test_request_carries_policy_and_window(self, settings):
        gateway, client, factory = _gateway(settings, _response("hello"))

        assert gateway.complete("BASE", "ctx", _history(100)) == "hello"

        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == settings.completion_model
        assert kwargs["max_tokens"] == 500
        assert kwargs["temperature"] == 0.7
        assert kwargs["presence_penalty"] == 0.6
        assert kwargs["frequency_penalty"] == 0.5

        sent = kwargs["messages"]
        assert len(sent) == 11
        assert sent[0] == {"role": "system", "content": "BASE\n\nctx"}
        assert sent[1] == {"role": "user", "content": "m90"}
        assert sent[-1] == {"role": "assistant", "content": "m99"}

    def test_client_built_with_timeout_and_no_retries(self, settings):
        tuned = replace(settings, completion_timeout_seconds=12.5, completion_base_url="https://llm.internal/v1")
        gateway, _, factory = _gateway(tuned, _response("ok"))
        gateway.complete("BASE", "", _history(1))
        factory.assert_called_once_with(
            api_key="test-key",
            timeout=12.5,
            max_retries=0,
            base_url="https://llm.internal/v1",
        )

    def test_reply_returned_verbatim(self, settings):
        text = "  I hear you.\n\nTell me more?  "
        gateway, _, _ = _gateway(settings, _response(text))
        assert gateway.complete("BASE", "", _history(1)) == text


class TestFailures:

    def test_missing_credential(self, settings):
        gateway, client, factory = _gateway(replace(settings, completion_api_key=""), _response("x"))
        with pytest.raises(ConfigurationError):
            gateway.complete("BASE", "", _history(1))
        factory.assert_not_called()
        client.chat.completions.create.assert_not_called()

    def test_non_success_status(self, settings):
        error = APIStatusError(
            "rate limited",
            response=httpx.Response(429, request=REQUEST),
            body={"error": {"message": "rate limited"}},
        )
        gateway, _, _ = _gateway(settings, create_error=error)
        with pytest.raises(UpstreamError) as info:
            gateway.complete("BASE", "", _history(1))
        assert not isinstance(info.value, EmptyResponseError)
        assert "429" in info.value.detail

    def test_timeout_is_upstream_error(self, settings):
        gateway, _, _ = _gateway(settings, create_error=APITimeoutError(request=REQUEST))
        with pytest.raises(UpstreamError):
            gateway.complete("BASE", "", _history(1))

    def test_connection_error_is_upstream_error(self, settings):
        gateway, _, _ = _gateway(settings, create_error=APIConnectionError(request=REQUEST))
        with pytest.raises(UpstreamError):
            gateway.complete("BASE", "", _history(1))

    def test_malformed_body_is_upstream_error(self, settings):
        error = APIResponseValidationError(response=httpx.Response(200, request=REQUEST), body={"bad": 1})
        gateway, _, _ = _gateway(settings, create_error=error)
        with pytest.raises(UpstreamError) as info:
            gateway.complete("BASE", "", _history(1))
        assert not isinstance(info.value, EmptyResponseError)
        assert info.value.__cause__ is error

    @pytest.mark.parametrize(
        "response",
        [
            SimpleNamespace(choices=[]),
            _response(None),
            _response(""),
            _response("   "),
        ],
    )
    def test_no_assistant_text(self, settings, response):
        gateway, _, _ = _gateway(settings, response)
        with pytest.raises(EmptyResponseError):
            gateway.complete("BASE", "", _history(1))
