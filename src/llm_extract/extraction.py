"""JSON extraction from LLM response text."""

import json
import logging
import re
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger(__name__)

_FENCE_OPEN = re.compile(r"^```json")
_FENCE_CLOSE = re.compile(r"```$")


def parse_generated_body(content: Any) -> Any:
    """Parse the JSON value from the text an LLM generated.

    Models often wrap JSON in a ```json fenced block. The fence is only
    recognised when it opens at the very start of the text and closes at the
    very end; prose before or after the fence is not handled. Oversized
    integer literals and excessively nested values count as unparseable.

    Args:
        content: Raw message text from the model.

    Returns:
        The parsed JSON value, or None if no value could be recovered.

    """
    if not isinstance(content, str):
        return None

    try:
        return json.loads(content)
    except (ValueError, RecursionError):
        pass

    if not _FENCE_OPEN.match(content):
        logger.debug("Response is not JSON and not fenced JSON")
        return None

    unfenced = _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", content, count=1)).strip()
    try:
        return json.loads(unfenced)
    except (ValueError, RecursionError) as e:
        logger.debug(f"Fenced response is not valid JSON: {e}")
        return None


def chat_message_content(body: Any) -> str | None:
    """Return the first choice's message content from a chat completion body.

    Accepts a decoded JSON mapping, an SDK response object exposing
    ``choices[0].message.content``, or the content string itself.

    Args:
        body: Chat completion response.

    Returns:
        The message content, or None if the body does not have that shape.

    """
    if isinstance(body, str):
        return body

    try:
        if isinstance(body, Mapping):
            content = body["choices"][0]["message"]["content"]
        else:
            content = body.choices[0].message.content
    except (AttributeError, IndexError, KeyError, TypeError):
        logger.debug("Response body has no choices[0].message.content")
        return None

    return content if isinstance(content, str) else None
