"""Tool Arguments: validate and coerce raw tool arguments against a descriptor schema.

Invariants:
    - Returns a new dict containing only declared properties (extras dropped)
    - Every failure raises ToolValidationError naming the offending field
    - Enum values are normalized to their canonical spelling
    - Never mutates the raw arguments

Design Decisions:
    - Interprets the small JSON-schema subset the catalog uses (string, number,
      integer, boolean, array of strings, enum, format=date, min/max, maxLength)
      instead of a general validator: voice agents send loosely-typed values
      ("5", "true") that need coercion, not rejection
"""

import math
from datetime import date
from typing import Any

from journal_coach.core.errors import ToolValidationError

_TRUE = {"true", "yes", "1"}
_FALSE = {"false", "no", "0"}


def validate_arguments(schema: dict, raw: Any) -> dict[str, Any]:
    """Validate `raw` against an object schema. Returns coerced arguments."""
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ToolValidationError("Arguments must be an object", field="arguments")

    properties: dict = schema.get("properties", {})
    required: list = schema.get("required", [])

    for name in required:
        if _is_missing(raw.get(name)):
            raise ToolValidationError(
                f"Missing required argument: {name}", field=name,
            )

    cleaned: dict[str, Any] = {}
    for name, prop in properties.items():
        value = raw.get(name)
        if _is_missing(value):
            continue
        cleaned[name] = _coerce(name, prop, value)
    return cleaned


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _coerce(name: str, prop: dict, value: Any) -> Any:
    kind = prop.get("type", "string")
    if kind == "string":
        result = _coerce_string(name, prop, value)
    elif kind == "integer":
        result = _coerce_number(name, prop, value, integer=True)
    elif kind == "number":
        result = _coerce_number(name, prop, value, integer=False)
    elif kind == "boolean":
        result = _coerce_boolean(name, value)
    elif kind == "array":
        result = _coerce_array(name, prop, value)
    else:
        result = value
    return result


def _coerce_string(name: str, prop: dict, value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ToolValidationError(f"Argument '{name}' must be a string", field=name)
    text = str(value).strip()

    allowed = prop.get("enum")
    if allowed:
        match = next((a for a in allowed if a.lower() == text.lower()), None)
        if match is None:
            raise ToolValidationError(
                f"Argument '{name}' must be one of: {', '.join(allowed)}",
                field=name,
            )
        return match

    if prop.get("format") == "date":
        try:
            return date.fromisoformat(text).isoformat()
        except ValueError:
            raise ToolValidationError(
                f"Argument '{name}' must be a date in YYYY-MM-DD format",
                field=name,
            )

    max_length = prop.get("maxLength")
    if max_length is not None and len(text) > max_length:
        raise ToolValidationError(
            f"Argument '{name}' must be at most {max_length} characters",
            field=name,
        )
    min_length = prop.get("minLength")
    if min_length is not None and len(text) < min_length:
        raise ToolValidationError(
            f"Argument '{name}' must be at least {min_length} characters",
            field=name,
        )
    return text


def _coerce_number(name: str, prop: dict, value: Any, integer: bool) -> int | float:
    kind = "an integer" if integer else "a number"
    if isinstance(value, bool):
        raise ToolValidationError(f"Argument '{name}' must be {kind}", field=name)
    if isinstance(value, int):
        number = value
    else:
        try:
            number = float(value)
        except (TypeError, ValueError, OverflowError):
            raise ToolValidationError(f"Argument '{name}' must be {kind}", field=name)
        if not math.isfinite(number):
            raise ToolValidationError(f"Argument '{name}' must be {kind}", field=name)
        if integer:
            if not number.is_integer():
                raise ToolValidationError(f"Argument '{name}' must be {kind}", field=name)
            number = int(number)

    minimum = prop.get("minimum")
    maximum = prop.get("maximum")
    if minimum is not None and number < minimum:
        raise ToolValidationError(
            f"Argument '{name}' must be >= {minimum}", field=name,
        )
    if maximum is not None and number > maximum:
        raise ToolValidationError(
            f"Argument '{name}' must be <= {maximum}", field=name,
        )
    return number


def _coerce_boolean(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    token = str(value).strip().lower()
    if token in _TRUE:
        return True
    if token in _FALSE:
        return False
    raise ToolValidationError(f"Argument '{name}' must be a boolean", field=name)


def _coerce_array(name: str, prop: dict, value: Any) -> list:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        raise ToolValidationError(f"Argument '{name}' must be an array", field=name)
    item_schema = prop.get("items", {"type": "string"})
    return [
        _coerce(name, item_schema, item)
        for item in value
        if not _is_missing(item)
    ]
