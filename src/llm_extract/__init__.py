"""Schema-validated structured extraction from LLM completions."""

__version__ = "0.1.0"

from llm_extract.adapters import (
    ChatAdapter,
    GenericAdapter,
    RequestAdapter,
    select_adapter,
)
from llm_extract.chat_completion import create_chat_completion, openai_chat_completion
from llm_extract.configuration import DEFAULT_ENDPOINT_URL, ClientParameters
from llm_extract.errors import (
    LLMExtractConfigurationError,
    LLMExtractError,
    SchemaError,
)
from llm_extract.extraction import chat_message_content, parse_generated_body
from llm_extract.extractor import Extractor, extract
from llm_extract.schema import ResponseSchema, schema_to_system_prompt
from llm_extract.transport import HttpxTransport, Transport, build_headers
from llm_extract.types import Attempt, AttemptOutcome, Fatal, Ok, Retryable, RetryReason
from llm_extract.validation import validate_response

__all__ = [
    # Version
    "__version__",
    # Entry points
    "extract",
    "Extractor",
    "create_chat_completion",
    "openai_chat_completion",
    # Configuration
    "ClientParameters",
    "DEFAULT_ENDPOINT_URL",
    # Errors
    "LLMExtractError",
    "LLMExtractConfigurationError",
    "SchemaError",
    # Schema description
    "ResponseSchema",
    "schema_to_system_prompt",
    # Request adapters
    "RequestAdapter",
    "ChatAdapter",
    "GenericAdapter",
    "select_adapter",
    # Transport
    "Transport",
    "HttpxTransport",
    "build_headers",
    # Extraction and validation
    "parse_generated_body",
    "chat_message_content",
    "validate_response",
    # Attempt types
    "Attempt",
    "AttemptOutcome",
    "Ok",
    "Retryable",
    "Fatal",
    "RetryReason",
]
