"""Error classes for llm-extract.

This module provides:
- LLMExtractError: Base exception class for all library errors
- SchemaError: Raised when a response schema cannot be described or validated
- LLMExtractConfigurationError: Raised when client configuration is unusable

LLM-fidelity problems (unreachable endpoint, unparseable output, output that
does not match the schema) are not exceptions. They are retried and end in an
absent result.
"""


class LLMExtractError(Exception):
    """Base exception for all llm-extract errors."""

    pass


class SchemaError(LLMExtractError):
    """Raised when a schema cannot be converted to a JSON Schema description."""

    pass


class LLMExtractConfigurationError(LLMExtractError):
    """Raised when the client is configured in a way that cannot work."""

    pass
