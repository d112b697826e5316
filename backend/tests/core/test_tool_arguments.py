"""Tool Arguments: schema validation and coercion of loosely-typed tool input.

Tests cover:
    - Required fields: missing / blank rejected, naming the field
    - Enum: case-insensitive match normalized to canonical value
    - Coercion: "5" -> 5, "true" -> True, "tag" -> ["tag"]
    - Bounds: minimum/maximum, maxLength; dates parsed as YYYY-MM-DD
    - Oversized or non-finite numbers rejected on the field, not raised
    - Undeclared arguments dropped; raw input not mutated
"""

import pytest

from journal_coach.core.errors import ToolValidationError
from journal_coach.core.tool_arguments import validate_arguments

SCHEMA = {
    "type": "object",
    "properties": {
        "title": {"type": "string", "maxLength": 10},
        "category": {"type": "string", "enum": ["health", "career"]},
        "target_date": {"type": "string", "format": "date"},
        "is_habit": {"type": "boolean"},
        "limit": {"type": "integer", "minimum": 1, "maximum": 50},
        "tags": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["title", "category"],
}


def _field(raw) -> str:
    with pytest.raises(ToolValidationError) as exc:
        validate_arguments(SCHEMA, raw)
    return exc.value.field


def test_valid_arguments_pass_through():
    args = validate_arguments(SCHEMA, {"title": "Run 5k", "category": "health"})
    assert args == {"title": "Run 5k", "category": "health"}


def test_missing_required_names_field():
    assert _field({"title": "Run 5k"}) == "category"


def test_blank_required_counts_as_missing():
    assert _field({"title": "   ", "category": "health"}) == "title"


def test_enum_normalized_case_insensitively():
    args = validate_arguments(SCHEMA, {"title": "Run", "category": "HEALTH"})
    assert args["category"] == "health"


def test_enum_rejects_unknown_value():
    assert _field({"title": "Run", "category": "hobbies"}) == "category"


def test_integer_coerced_from_string():
    args = validate_arguments(SCHEMA, {"title": "Run", "category": "health", "limit": "5"})
    assert args["limit"] == 5
    assert isinstance(args["limit"], int)


@pytest.mark.parametrize("limit", [0, 51, "2.5", "many", True])
def test_integer_bounds_and_type(limit):
    assert _field({"title": "Run", "category": "health", "limit": limit}) == "limit"


@pytest.mark.parametrize("limit", [10**400, "1e400", "nan", "-inf"])
def test_integer_too_large_or_non_finite(limit):
    assert _field({"title": "Run", "category": "health", "limit": limit}) == "limit"


def test_number_out_of_float_range():
    schema = {"type": "object", "properties": {"score": {"type": "number"}}}
    with pytest.raises(ToolValidationError) as exc:
        validate_arguments(schema, {"score": "1e400"})
    assert exc.value.field == "score"


@pytest.mark.parametrize("raw,expected", [("true", True), ("No", False), ("1", True), (False, False)])
def test_boolean_coercion(raw, expected):
    args = validate_arguments(SCHEMA, {"title": "Run", "category": "health", "is_habit": raw})
    assert args["is_habit"] is expected


def test_boolean_rejects_garbage():
    assert _field({"title": "Run", "category": "health", "is_habit": "maybe"}) == "is_habit"


def test_scalar_string_wrapped_into_array():
    args = validate_arguments(SCHEMA, {"title": "Run", "category": "health", "tags": "fitness"})
    assert args["tags"] == ["fitness"]


def test_date_parsed_and_normalized():
    args = validate_arguments(
        SCHEMA, {"title": "Run", "category": "health", "target_date": "2025-01-01"},
    )
    assert args["target_date"] == "2025-01-01"
    assert _field({"title": "Run", "category": "health", "target_date": "01/02/2025"}) == "target_date"


def test_max_length_enforced():
    assert _field({"title": "x" * 11, "category": "health"}) == "title"


def test_extra_arguments_dropped_and_raw_untouched():
    raw = {"title": "Run", "category": "Health", "account_id": "someone-else"}
    args = validate_arguments(SCHEMA, raw)
    assert "account_id" not in args
    assert raw["category"] == "Health"


def test_none_means_no_arguments():
    assert validate_arguments({"type": "object", "properties": {}}, None) == {}


def test_non_object_arguments_rejected():
    assert _field(["title"]) == "arguments"
