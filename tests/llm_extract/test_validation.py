"""Tests for structural validation of extracted values."""

from enum import Enum

from pydantic import BaseModel

from llm_extract.schema import ResponseSchema
from llm_extract.validation import validate_response


class User(BaseModel):
    name: str
    age: int


class Action(Enum):
    CALL = "call"
    FOLLOWUP = "followup"


class Task(BaseModel):
    action: Action
    assignee: User


class TestValidateResponse:
    """Tests for validate_response."""

    def test_conforming_value_is_valid(self) -> None:
        schema = ResponseSchema.from_schema(User)

        assert validate_response({"name": "Jason", "age": 30}, schema) is True

    def test_missing_required_field_is_invalid(self) -> None:
        schema = ResponseSchema.from_schema(User)

        assert validate_response({"name": "Jason"}, schema) is False

    def test_wrong_type_is_invalid(self) -> None:
        schema = ResponseSchema.from_schema(User)

        assert validate_response({"name": "Jason", "age": "30"}, schema) is False

    def test_values_are_not_coerced(self) -> None:
        schema = ResponseSchema.from_schema(User)
        value = {"name": "Jason", "age": 30}

        validate_response(value, schema)

        assert value == {"name": "Jason", "age": 30}

    def test_absent_value_is_invalid(self) -> None:
        schema = ResponseSchema.from_schema(User)

        assert validate_response(None, schema) is False

    def test_absent_value_is_invalid_without_schema(self) -> None:
        assert validate_response(None, None) is False

    def test_any_present_value_is_valid_without_schema(self) -> None:
        assert validate_response({"anything": True}, None) is True
        assert validate_response([], None) is True

    def test_enum_membership_is_checked(self) -> None:
        schema = ResponseSchema.from_schema(Task)
        assignee = {"name": "Kapil", "age": 41}

        assert validate_response({"action": "call", "assignee": assignee}, schema)
        assert not validate_response({"action": "email", "assignee": assignee}, schema)

    def test_nested_models_are_validated_through_refs(self) -> None:
        schema = ResponseSchema.from_schema(Task)

        assert not validate_response(
            {"action": "call", "assignee": {"name": "Kapil"}}, schema
        )

    def test_non_object_value_is_invalid_for_object_schema(self) -> None:
        schema = ResponseSchema.from_schema(User)

        assert validate_response(["Jason", 30], schema) is False

    def test_json_schema_mapping(self) -> None:
        schema = ResponseSchema.from_schema(
            {
                "type": "object",
                "properties": {"status": {"enum": ["ok", "failed"]}},
                "required": ["status"],
            }
        )

        assert validate_response({"status": "ok"}, schema) is True
        assert validate_response({"status": "pending"}, schema) is False
