"""
Structural validation of widget field values.

Field rules are JSON schema documents. A value is checked against its rules
before any field-specific semantic validation runs, and the most relevant
schema error is turned into a single user-facing message.
"""

import logging
from typing import Any

from jsonschema import Draft7Validator
from jsonschema.exceptions import ValidationError, best_match

logger = logging.getLogger(__name__)

STRING_MAX_LENGTH = 255

_TYPE_MESSAGES = {
    "string": "a character string is expected",
    "integer": "an integer is expected",
    "number": "a number is expected",
    "array": "an array is expected",
    "object": "an object is expected",
    "boolean": "a boolean is expected",
}


class WidgetFieldError(Exception):
    """Raised when a widget field value fails validation."""

    def __init__(self, messages: list[str]):
        self.messages = list(messages)
        super().__init__("; ".join(self.messages))


class FieldStructureError(WidgetFieldError):
    """Raised when a value does not match its field's structural rules."""


def string_rule(max_length: int = STRING_MAX_LENGTH, not_empty: bool = False) -> dict:
    """Rule for a UTF-8 string field."""
    rule = {"type": "string", "maxLength": max_length}
    if not_empty:
        rule["minLength"] = 1
    return rule


def check_value(value: Any, rules: dict, label: str) -> list[str]:
    """
    Validate a value against its field rules.

    Args:
        value: The value to check.
        rules: JSON schema the value must satisfy.
        label: Field name used in the error message.

    Returns:
        An empty list if the value is valid, otherwise a single error message.
    """
    error = best_match(Draft7Validator(rules).iter_errors(value))
    if error is None:
        return []

    message = format_error(error, label)
    logger.debug("Structural validation failed: %s", message)
    return [message]


def ensure_valid(value: Any, rules: dict, label: str) -> None:
    """
    Validate a value against its field rules, raising on failure.

    Raises:
        FieldStructureError: If the value does not satisfy the rules.
    """
    errors = check_value(value, rules, label)
    if errors:
        raise FieldStructureError(errors)


def format_error(error: ValidationError, label: str) -> str:
    """Render a schema error in the form framework's message style."""
    path = "/".join(str(part) for part in error.absolute_path)
    name = f"{label}/{path}" if path else label

    return f'Invalid parameter "{name}": {_describe(error)}.'


def _describe(error: ValidationError) -> str:
    custom = error.schema.get("x-message") if isinstance(error.schema, dict) else None
    if custom:
        return custom

    validator = error.validator
    expected = error.validator_value

    if validator == "type":
        if isinstance(expected, list):
            expected = expected[0]
        return _TYPE_MESSAGES.get(expected, "unexpected type")
    if validator == "required":
        missing = [key for key in expected if key not in error.instance]
        return f'the parameter "{missing[0]}" is missing'
    if validator == "additionalProperties":
        allowed = set(error.schema.get("properties", {}))
        unexpected = sorted(key for key in error.instance if key not in allowed)
        return f'unexpected parameter "{unexpected[0]}"'
    if validator == "maxLength":
        return "value is too long"
    if validator in ("minLength", "minItems"):
        return "cannot be empty"
    if validator == "maxItems":
        return "too many values"
    if validator in ("minimum", "maximum"):
        low = error.schema.get("minimum")
        high = error.schema.get("maximum")
        if low is not None and high is not None:
            return f"value must be one of {low}-{high}"
        if low is not None:
            return f"value must be no less than {low}"
        return f"value must be no greater than {high}"
    if validator == "enum":
        return "value must be one of " + ", ".join(str(item) for item in expected)
    if validator == "uniqueItems":
        return "values must be unique"
    if validator == "pattern":
        return "invalid format"

    return "invalid value"
