"""Structural validation of extracted values."""

from __future__ import annotations

import logging
from typing import Any

from jsonschema.exceptions import best_match

from llm_extract.schema import ResponseSchema

logger = logging.getLogger(__name__)


def validate_response(value: Any, schema: ResponseSchema | None) -> bool:
    """Check an extracted value against the response schema.

    Validation is structural only (types, required fields, enum members).
    Values are never coerced and defaults are never filled in.

    Args:
        value: Value recovered from the model output. None means absent.
        schema: Normalised response schema, or None for raw completions
            where any present value is accepted.

    Returns:
        True if the value is present and conforms.

    """
    if value is None:
        return False

    if schema is None:
        return True

    error = best_match(schema.validator.iter_errors(value))
    if error is not None:
        logger.debug(f"Response does not match schema '{schema.name}': {error.message}")
        return False

    return True
