"""Schema description for LLM prompts.

Turns a caller-supplied schema (a pydantic model class or a JSON Schema
mapping) into a JSON Schema document, and renders that document into the
system instruction that asks the model for a bare JSON instance.
"""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import jsonschema
from jsonschema.protocols import Validator
from jsonschema.validators import validator_for
from pydantic import BaseModel, PydanticUserError

from llm_extract.errors import SchemaError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT_TEMPLATE = """As a genius expert, your task is to understand the content and provide
the parsed objects in json that match the following json_schema:

{schema}

Make sure to return an instance of only the JSON.
Refrain from returning the schema or any text explaining the JSON"""


@dataclass(frozen=True)
class ResponseSchema:
    """Normalised, immutable view of a response schema.

    Holds the JSON Schema document used in the prompt and a checked
    ``jsonschema`` validator used to decide whether a response conforms.
    """

    name: str
    json_schema: Mapping[str, Any]
    validator: Validator

    @classmethod
    def from_schema(cls, schema: Any) -> ResponseSchema:
        """Build a ResponseSchema from a pydantic model class or JSON Schema.

        Args:
            schema: A ``BaseModel`` subclass, a JSON Schema mapping, or an
                existing ResponseSchema (returned unchanged).

        Returns:
            Normalised schema.

        Raises:
            SchemaError: If the schema cannot be converted or is not a valid
                JSON Schema. This is a caller error and is never retried.

        """
        if isinstance(schema, ResponseSchema):
            return schema

        if isinstance(schema, type) and issubclass(schema, BaseModel):
            try:
                json_schema: dict[str, Any] = schema.model_json_schema()
            except PydanticUserError as e:
                raise SchemaError(
                    f"Cannot describe model '{schema.__name__}' as JSON Schema: {e}"
                ) from e
            name = schema.__name__
        elif isinstance(schema, Mapping):
            json_schema = copy.deepcopy(dict(schema))
            name = str(json_schema.get("title", "response"))
        else:
            raise SchemaError(
                "Schema must be a pydantic model class or a JSON Schema mapping, "
                f"got: {type(schema).__name__}"
            )

        validator_cls = validator_for(json_schema)
        try:
            validator_cls.check_schema(json_schema)
        except jsonschema.SchemaError as e:
            raise SchemaError(f"Invalid JSON Schema for '{name}': {e.message}") from e

        return cls(name=name, json_schema=json_schema, validator=validator_cls(json_schema))

    def to_json(self) -> str:
        """Render the JSON Schema as indented JSON text."""
        return json.dumps(self.json_schema, indent=2, ensure_ascii=False)


def schema_to_system_prompt(schema: Any) -> str:
    """Render the system instruction for a schema.

    Deterministic: the same schema always yields the same text.

    Args:
        schema: Anything accepted by ``ResponseSchema.from_schema``.

    Returns:
        System prompt embedding the rendered JSON Schema.

    Raises:
        SchemaError: If the schema cannot be described.

    """
    response_schema = ResponseSchema.from_schema(schema)
    logger.debug(f"Rendering system prompt for schema: {response_schema.name}")
    return SYSTEM_PROMPT_TEMPLATE.format(schema=response_schema.to_json())
