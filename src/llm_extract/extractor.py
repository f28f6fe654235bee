"""Retry controller for schema-validated LLM extraction.

One attempt runs the full pipeline:

1. Build the request payload with the configured adapter
2. Send it through the transport
3. Pull the generated text out of the response envelope
4. Parse JSON from the text
5. Validate the value against the schema

A failed attempt is retried immediately until the retry budget is spent,
after which the result is None. Only caller errors raise.
"""

from __future__ import annotations

import logging
from typing import Any

from llm_extract.adapters import Prompt, RequestAdapter, select_adapter
from llm_extract.configuration import ClientParameters
from llm_extract.errors import LLMExtractError
from llm_extract.extraction import parse_generated_body
from llm_extract.schema import ResponseSchema
from llm_extract.transport import HttpxTransport, Transport, build_headers
from llm_extract.types import Attempt, Fatal, Ok, Retryable, RetryReason
from llm_extract.validation import validate_response

logger = logging.getLogger(__name__)


class Extractor:
    """Runs extraction attempts against one configured endpoint.

    The adapter and transport are resolved once at construction. The
    instance holds no per-request state, so independent ``extract`` calls do
    not interfere with each other.
    """

    def __init__(
        self,
        params: ClientParameters | None = None,
        transport: Transport | None = None,
    ) -> None:
        """Initialise the extractor.

        Args:
            params: Client parameters. Defaults to ``ClientParameters()``.
            transport: Transport to send requests with. Defaults to an
                ``HttpxTransport`` using ``params.timeout``.

        """
        self._params = params or ClientParameters()
        self._adapter: RequestAdapter = select_adapter(self._params)
        self._transport: Transport = transport or HttpxTransport(
            timeout=self._params.timeout
        )
        self._headers = build_headers(self._params.api_key)

    @property
    def params(self) -> ClientParameters:
        """Return the client parameters."""
        return self._params

    def extract(self, prompt: Prompt, schema: Any = None) -> Any:
        """Obtain a schema-conforming value for the prompt.

        Args:
            prompt: User prompt string or a sequence of chat messages.
            schema: Pydantic model class, JSON Schema mapping, or None for a
                raw completion (generic endpoints only).

        Returns:
            The first valid value, or None once ``max_retries + 1`` attempts
            have failed.

        Raises:
            SchemaError: If the schema is malformed.
            LLMExtractConfigurationError: If the request cannot be built
                with this configuration.

        """
        response_schema = (
            ResponseSchema.from_schema(schema) if schema is not None else None
        )
        max_attempts = self._params.max_retries + 1

        for number in range(1, max_attempts + 1):
            attempt = self.run_attempt(number, prompt, response_schema)

            match attempt.outcome:
                case Ok(value=value):
                    logger.debug(f"Attempt {number}/{max_attempts} succeeded")
                    return value
                case Fatal(error=error):
                    raise error
                case Retryable(reason=reason):
                    if number < max_attempts:
                        logger.warning(
                            f"Attempt {number}/{max_attempts} failed "
                            f"({reason.value}), retrying"
                        )
                    else:
                        logger.warning(
                            f"Attempt {number}/{max_attempts} failed "
                            f"({reason.value}), no retries left"
                        )

        return None

    def run_attempt(
        self, number: int, prompt: Prompt, schema: ResponseSchema | None
    ) -> Attempt:
        """Run one request/response/validate cycle.

        Args:
            number: 1-based attempt number, for the record and logs.
            prompt: User prompt string or a sequence of chat messages.
            schema: Normalised response schema, or None.

        Returns:
            Attempt record whose outcome is Ok, Retryable or Fatal.

        """
        try:
            request = self._adapter.build_request(prompt, schema)
        except LLMExtractError as e:
            return Attempt(number=number, outcome=Fatal(e))

        body = self._transport.send(self._params.endpoint_url, self._headers, request)
        if body is None:
            return Attempt(
                number=number,
                outcome=Retryable(RetryReason.TRANSPORT_FAILED),
                request=request,
            )

        content = self._adapter.response_content(body)
        value = parse_generated_body(content)
        if value is None:
            return Attempt(
                number=number,
                outcome=Retryable(RetryReason.EXTRACTION_FAILED),
                request=request,
                body=body,
                content=content,
            )

        if not validate_response(value, schema):
            return Attempt(
                number=number,
                outcome=Retryable(RetryReason.VALIDATION_FAILED),
                request=request,
                body=body,
                content=content,
                value=value,
            )

        return Attempt(
            number=number,
            outcome=Ok(value),
            request=request,
            body=body,
            content=content,
            value=value,
        )


def extract(
    prompt_or_messages: Prompt,
    schema: Any,
    *,
    transport: Transport | None = None,
    **options: Any,
) -> Any:
    """Extract a schema-conforming value from an LLM in one call.

    Args:
        prompt_or_messages: User prompt string or a sequence of chat messages.
        schema: Pydantic model class, JSON Schema mapping, or None.
        transport: Optional transport override.
        **options: ``ClientParameters`` fields (endpoint_url, api_key, model,
            temperature, max_tokens, max_retries, custom_opts, api_style,
            timeout). Missing values fall back to the environment, then to
            defaults.

    Returns:
        The validated value, or None if no attempt produced one.

    Raises:
        ValidationError: If the options are invalid.
        SchemaError: If the schema is malformed.
        LLMExtractConfigurationError: If the request cannot be built.

    Example:
        ```python
        class User(BaseModel):
            name: str
            age: int

        extract("John Doe is 30 years old.", User, api_key="sk-...", max_retries=2)
        # {"name": "John Doe", "age": 30}
        ```

    """
    params = ClientParameters.from_properties(options)
    return Extractor(params, transport=transport).extract(prompt_or_messages, schema)
