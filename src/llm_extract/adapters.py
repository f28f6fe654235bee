"""Request adapters for chat-style and completion-style endpoints.

Providers disagree on payload shape, so the shape is a tagged variant chosen
once from the client parameters:

- ``ChatAdapter``: OpenAI-style ``messages`` with a leading system message
- ``GenericAdapter``: flat ``prompt`` with an optional ``system`` field and
  provider options (e.g. Ollama's ``/api/generate``)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any, override

from llm_extract.configuration import ClientParameters
from llm_extract.errors import LLMExtractConfigurationError
from llm_extract.extraction import chat_message_content
from llm_extract.schema import ResponseSchema, schema_to_system_prompt

logger = logging.getLogger(__name__)

Message = Mapping[str, str]
Prompt = str | Sequence[Message]


class RequestAdapter(ABC):
    """Builds request payloads and locates the generated text in responses."""

    def __init__(self, params: ClientParameters) -> None:
        """Initialise with the client parameters the payloads are built from."""
        self._params = params

    @abstractmethod
    def build_request(
        self, prompt: Prompt, schema: ResponseSchema | None
    ) -> dict[str, Any]:
        """Build the request body for one attempt.

        Args:
            prompt: User prompt string or a sequence of chat messages.
            schema: Response schema, or None for raw completions.

        Returns:
            JSON-serialisable request body.

        """
        ...

    @abstractmethod
    def response_content(self, body: Mapping[str, Any]) -> str | None:
        """Return the generated text from a decoded response body."""
        ...


class ChatAdapter(RequestAdapter):
    """Payloads for chat-completions endpoints.

    The payload always carries exactly two messages: the system instruction
    and one user message. A message sequence is joined into that user message
    the same way the generic shape joins it. ``custom_opts`` are not applied
    to this shape.
    """

    @override
    def build_request(
        self, prompt: Prompt, schema: ResponseSchema | None
    ) -> dict[str, Any]:
        if schema is None:
            raise LLMExtractConfigurationError(
                "Chat endpoints require a response schema for the system message"
            )

        messages = [
            {"role": "system", "content": schema_to_system_prompt(schema)},
            {"role": "user", "content": _flatten_prompt(prompt)},
        ]

        return {
            "model": self._params.model,
            "messages": messages,
            "temperature": self._params.temperature,
            "max_tokens": self._params.max_tokens,
        }

    @override
    def response_content(self, body: Mapping[str, Any]) -> str | None:
        return chat_message_content(body)


class GenericAdapter(RequestAdapter):
    """Payloads for completion-style endpoints.

    Optional fields are only included when they have a value. ``custom_opts``
    are merged last, so a caller-supplied key always wins over the computed
    one (shallow merge).
    """

    @override
    def build_request(
        self, prompt: Prompt, schema: ResponseSchema | None
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": self._params.model,
            "stream": False,
            "prompt": _flatten_prompt(prompt),
        }
        if schema is not None:
            payload["system"] = schema_to_system_prompt(schema)
        if self._params.max_tokens is not None:
            payload["eval_count"] = self._params.max_tokens
        if self._params.temperature is not None:
            payload["options"] = {"temperature": self._params.temperature}

        return payload | self._params.custom_opts

    @override
    def response_content(self, body: Mapping[str, Any]) -> str | None:
        content = body.get("response")
        return content if isinstance(content, str) else None


def _flatten_prompt(prompt: Prompt) -> str:
    """Join chat message contents into one prompt string."""
    if isinstance(prompt, str):
        return prompt
    return "\n\n".join(str(message.get("content", "")) for message in prompt)


def select_adapter(params: ClientParameters) -> RequestAdapter:
    """Pick the adapter for the configured endpoint.

    An explicit ``api_style`` wins. Otherwise the default OpenAI endpoint
    gets the chat shape and every other URL gets the generic shape.

    Args:
        params: Client parameters.

    Returns:
        Adapter bound to the parameters.

    """
    style = params.resolved_api_style
    logger.info(f"Using {style} request shape for {params.endpoint_url}")
    if style == "chat":
        return ChatAdapter(params)
    return GenericAdapter(params)
