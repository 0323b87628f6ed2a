"""
Groq completion gateway.

Single boundary to the chat-completion service. Takes a directive, a context
summary and the session history, returns the assistant's text or raises a
classified error. No streaming, no retries, never touches session state.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Sequence

from groq import APIConnectionError, APIError, APIStatusError, APITimeoutError, Groq

from backend.app.chat.models import Message
from backend.app.core.config import Settings
from backend.app.core.errors import ConfigurationError, EmptyResponseError, UpstreamError
from backend.app.observability.logging import log_event
from backend.app.orchestrator.prompt_assembler import PromptAssembler

MAX_OUTPUT_TOKENS = 500
TEMPERATURE = 0.7
PRESENCE_PENALTY = 0.6
FREQUENCY_PENALTY = 0.5

log = logging.getLogger(__name__)


class CompletionGateway:
    def __init__(
        self,
        settings: Settings,
        client_factory: Callable[..., Any] = Groq,
        assembler: Optional[PromptAssembler] = None,
    ):
        self._settings = settings
        self._client_factory = client_factory
        self._assembler = assembler or PromptAssembler()
        self._client: Any = None

    @property
    def model(self) -> str:
        return self._settings.completion_model

    def _get_client(self) -> Any:
        if not self._settings.completion_api_key:
            raise ConfigurationError("GROQ_API_KEY not found in environment variables")
        if self._client is None:
            kwargs: dict[str, Any] = {
                "api_key": self._settings.completion_api_key,
                "timeout": self._settings.completion_timeout_seconds,
                "max_retries": 0,
            }
            if self._settings.completion_base_url:
                kwargs["base_url"] = self._settings.completion_base_url
            self._client = self._client_factory(**kwargs)
        return self._client

    def complete(self, directive: str, context_summary: str, messages: Sequence[Message]) -> str:
        """
        Send one chat-completion request and return the assistant text verbatim.

        Raises:
            ConfigurationError: no credential configured.
            UpstreamError: non-success status, transport failure, timeout or an
                unparseable response body.
            EmptyResponseError: success without any assistant text.
        """
        client = self._get_client()
        payload = self._assembler.build(directive, context_summary, messages)

        try:
            response = client.chat.completions.create(
                model=self.model,
                messages=payload,
                max_tokens=MAX_OUTPUT_TOKENS,
                temperature=TEMPERATURE,
                presence_penalty=PRESENCE_PENALTY,
                frequency_penalty=FREQUENCY_PENALTY,
            )
        except APIStatusError as exc:
            log_event(
                "upstream_error_body",
                level=logging.ERROR,
                status=exc.status_code,
                body=exc.body,
                model=self.model,
            )
            raise UpstreamError(f"completion service returned {exc.status_code}") from exc
        except APITimeoutError as exc:
            raise UpstreamError(
                f"completion service timed out after {self._settings.completion_timeout_seconds}s"
            ) from exc
        except APIConnectionError as exc:
            raise UpstreamError(f"completion service unreachable: {exc}") from exc
        except APIError as exc:
            # e.g. APIResponseValidationError: a 2xx body the SDK could not parse
            log_event(
                "upstream_error_body",
                level=logging.ERROR,
                error_class=type(exc).__name__,
                body=exc.body,
                model=self.model,
            )
            raise UpstreamError(f"completion service returned an unusable response: {exc}") from exc

        content = None
        if response is not None and response.choices:
            content = response.choices[0].message.content
        if not content or not content.strip():
            raise EmptyResponseError("completion service returned no assistant text")

        log.debug("completion ok: %d chars from %s", len(content), self.model)
        return content
