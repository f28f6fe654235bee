"""Extraction through a caller-supplied chat completion function.

Lets callers keep their own client (e.g. the OpenAI SDK) and only borrow the
schema instruction, JSON extraction and validation. This path makes a single
call and, unlike ``extract``, falls back to the raw response body when the
output does not validate.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping
from typing import Any

from openai import OpenAI, OpenAIError

from llm_extract.configuration import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
    DEFAULT_TEMPERATURE,
)
from llm_extract.errors import LLMExtractConfigurationError
from llm_extract.extraction import chat_message_content, parse_generated_body
from llm_extract.schema import ResponseSchema, schema_to_system_prompt
from llm_extract.validation import validate_response

logger = logging.getLogger(__name__)

ChatCompletionFn = Callable[..., Any]

_DEFAULT_CHAT_PARAMS: dict[str, Any] = {
    "model": DEFAULT_MODEL,
    "temperature": DEFAULT_TEMPERATURE,
    "max_tokens": DEFAULT_MAX_TOKENS,
}


def create_chat_completion(
    chat_completion_fn: ChatCompletionFn,
    client_params: Mapping[str, Any],
    options: Mapping[str, Any] | None = None,
) -> Any:
    """Create a chat completion and extract a schema-conforming value.

    The system instruction for ``response_schema`` is prepended to the
    caller's messages, defaults fill any unset model parameters, and the
    function is called once as ``chat_completion_fn(**request, **options)``.

    Args:
        chat_completion_fn: Chat completion callable, for example
            ``OpenAI().chat.completions.create``.
        client_params: Must contain ``messages`` and ``response_schema``;
            may contain ``model``, ``temperature``, ``max_tokens`` and any
            other request field the callable accepts.
        options: Extra keyword arguments passed through unchanged
            (e.g. ``timeout``, ``extra_headers``).

    Returns:
        The validated value, or the raw response body if no valid value
        could be extracted from it.

    Raises:
        LLMExtractConfigurationError: If ``response_schema`` is missing.
        SchemaError: If ``response_schema`` is malformed.

    Example:
        ```python
        create_chat_completion(
            OpenAI().chat.completions.create,
            {
                "messages": [{"role": "user", "content": "Jason Liu is 30 years old"}],
                "model": "gpt-3.5-turbo",
                "response_schema": User,
            },
        )
        # {"name": "Jason Liu", "age": 30}
        ```

    """
    params = dict(client_params)
    if params.get("response_schema") is None:
        raise LLMExtractConfigurationError(
            "create_chat_completion requires a 'response_schema' in client_params"
        )
    response_schema = ResponseSchema.from_schema(params.pop("response_schema"))

    messages = [
        {"role": "system", "content": schema_to_system_prompt(response_schema)},
        *params.pop("messages", []),
    ]
    request = _DEFAULT_CHAT_PARAMS | params | {"messages": messages}

    body = chat_completion_fn(**request, **(options or {}))

    value = parse_generated_body(chat_message_content(body))
    if validate_response(value, response_schema):
        return value

    logger.warning(
        f"Chat completion did not match schema '{response_schema.name}', "
        "returning raw response body"
    )
    return body


def openai_chat_completion(
    api_key: str | None = None,
    base_url: str | None = None,
    timeout: float | None = None,
) -> ChatCompletionFn:
    """Return an OpenAI SDK chat completion function.

    Args:
        api_key: OpenAI API key. Falls back to OPENAI_API_KEY env var.
        base_url: Base URL for OpenAI-compatible APIs. Falls back to
            OPENAI_BASE_URL env var.
        timeout: Request timeout in seconds (SDK default if None).

    Returns:
        Bound ``client.chat.completions.create`` method.

    Raises:
        LLMExtractConfigurationError: If no API key is available.

    """
    client_kwargs: dict[str, Any] = {}
    if timeout is not None:
        client_kwargs["timeout"] = timeout

    try:
        client = OpenAI(
            api_key=api_key or os.getenv("OPENAI_API_KEY"),
            base_url=base_url or os.getenv("OPENAI_BASE_URL"),
            **client_kwargs,
        )
    except OpenAIError as e:
        raise LLMExtractConfigurationError(
            "OpenAI API key is required. Set OPENAI_API_KEY environment "
            "variable or provide api_key parameter."
        ) from e

    return client.chat.completions.create
