"""Client parameters for LLM extraction.

This module provides the configuration record shared by the request adapters,
the transport and the retry controller. Configuration supports both explicit
instantiation and environment variable fallback.
"""

from __future__ import annotations

import os
from typing import Any, Literal, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_ENDPOINT_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 4096

ApiStyle = Literal["chat", "generic"]


class ClientParameters(BaseModel):
    """Configuration for one extraction client.

    Immutable once created. Unknown keys are rejected so that typos in option
    names fail loudly instead of being silently ignored.

    Attributes:
        endpoint_url: URL the request is POSTed to.
        api_key: Bearer token sent in the Authorization header.
        model: Model identifier placed in every request body.
        temperature: Sampling temperature (omitted from generic payloads if None).
        max_tokens: Output token limit (omitted from generic payloads if None).
        max_retries: Extra attempts after the first one fails.
        custom_opts: Fields merged last into generic payloads; they override
            any computed field of the same name.
        api_style: Payload shape. None infers it from endpoint_url.
        timeout: Network timeout in seconds for a single request.

    Example:
        ```python
        # Default OpenAI chat endpoint
        params = ClientParameters(api_key="sk-...", max_retries=2)

        # Local Ollama generate endpoint
        params = ClientParameters(
            endpoint_url="http://localhost:11434/api/generate",
            model="qwen2.5-coder:1.5b",
            custom_opts={"format": "json"},
        )
        ```

    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_assignment=True,
    )

    endpoint_url: str = Field(
        default=DEFAULT_ENDPOINT_URL, description="Completion endpoint URL"
    )
    api_key: str | None = Field(default=None, description="Bearer token")
    model: str = Field(default=DEFAULT_MODEL, description="Model identifier")
    temperature: float | None = Field(default=DEFAULT_TEMPERATURE, ge=0.0)
    max_tokens: int | None = Field(default=DEFAULT_MAX_TOKENS, gt=0)
    max_retries: int = Field(default=0, ge=0, description="Retries after first attempt")
    custom_opts: dict[str, Any] = Field(
        default_factory=dict,
        description="Provider-specific fields merged into generic payloads",
    )
    api_style: ApiStyle | None = Field(
        default=None, description="Payload shape (inferred from endpoint_url if None)"
    )
    timeout: float = Field(default=60.0, gt=0.0, description="Request timeout (s)")

    @field_validator("endpoint_url")
    @classmethod
    def validate_endpoint_url(cls, v: str) -> str:
        """Validate that the endpoint URL is an http(s) URL.

        Args:
            v: URL to validate

        Returns:
            Stripped URL

        Raises:
            ValueError: If the URL is empty or not http(s)

        """
        url = v.strip()
        if not url.startswith(("http://", "https://")):
            raise ValueError(f"endpoint_url must be an http(s) URL, got: {v!r}")
        return url

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str | None) -> str | None:
        """Normalise blank API keys to None."""
        if v is None or not v.strip():
            return None
        return v.strip()

    @property
    def uses_default_endpoint(self) -> bool:
        """Return True when requests go to the default chat-completions URL."""
        return self.endpoint_url == DEFAULT_ENDPOINT_URL

    @property
    def resolved_api_style(self) -> ApiStyle:
        """Return the payload shape, inferring it from the endpoint if unset."""
        if self.api_style is not None:
            return self.api_style
        return "chat" if self.uses_default_endpoint else "generic"

    @classmethod
    def from_properties(cls, properties: dict[str, Any]) -> Self:
        """Create parameters from a properties dict with environment fallback.

        Layering:
        1. Explicit properties (highest priority)
        2. Environment variables (fallback)
        3. Defaults (lowest priority)

        Environment variables used:
        - LLM_EXTRACT_ENDPOINT_URL: Endpoint URL
        - OPENAI_API_KEY: API key, only for the default OpenAI endpoint
        - LLM_EXTRACT_API_KEY: API key for any other endpoint
        - OPENAI_MODEL: Model name

        Args:
            properties: Option dictionary, e.g. the keyword arguments of extract()

        Returns:
            Validated parameters

        Raises:
            ValidationError: If the resulting parameters are invalid

        """
        config_data = properties.copy()

        if "endpoint_url" not in config_data:
            endpoint_url = os.getenv("LLM_EXTRACT_ENDPOINT_URL")
            if endpoint_url:
                config_data["endpoint_url"] = endpoint_url

        # OPENAI_API_KEY is only ever sent to the OpenAI endpoint
        if "api_key" not in config_data:
            endpoint_url = str(config_data.get("endpoint_url", DEFAULT_ENDPOINT_URL))
            if endpoint_url.strip() == DEFAULT_ENDPOINT_URL:
                config_data["api_key"] = os.getenv("OPENAI_API_KEY")
            else:
                config_data["api_key"] = os.getenv("LLM_EXTRACT_API_KEY")

        if "model" not in config_data:
            model_value = os.getenv("OPENAI_MODEL")
            if model_value:
                config_data["model"] = model_value

        return cls.model_validate(config_data)
