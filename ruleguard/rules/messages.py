"""Default English rendering of validation error codes.

Callers that need another locale pass their own ``translate`` callable to the
validators; it receives the error code and its parameters.
"""
from typing import Any, Callable

from .models import ErrorCode, ValidationIssue

Translator = Callable[[ErrorCode, dict[str, Any]], str]

DEFAULT_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.STRUCTURAL_ERROR: "Invalid condition structure: expected a group (operator + rules) or a condition (field + operator + value)",
    ErrorCode.DEPTH_EXCEEDED: "Maximum nesting depth of {max_depth} exceeded",
    ErrorCode.INVALID_LOGICAL_OPERATOR: "Invalid logical operator: {operator}. Valid operators: {valid_operators}",
    ErrorCode.EMPTY_GROUP: "Group must contain at least one rule",
    ErrorCode.RULE_ERROR: "Rule {index}: {errors}",
    ErrorCode.FIELD_REQUIRED: "Field is required and must be a string",
    ErrorCode.INVALID_FIELD_PATH: "Invalid field path: {field}",
    ErrorCode.OPERATOR_REQUIRED: "Operator is required",
    ErrorCode.INVALID_COMPARISON_OPERATOR: "Invalid comparison operator: {operator}. Valid operators: {valid_operators}",
    ErrorCode.VALUE_REQUIRED: "Value is required (or use valueField for field comparison)",
    ErrorCode.VALUE_FIELD_MUST_BE_STRING: "valueField must be a string",
    ErrorCode.ACTION_REQUIRED: "Action is required",
    ErrorCode.ACTION_TYPE_REQUIRED: "Action type is required and must be a string",
    ErrorCode.UNKNOWN_ACTION_TYPE: "Unknown action type: {type}. Valid types: {valid_types}",
    ErrorCode.CONFIG_REQUIRED: "Action type {type} requires config with fields: {fields}",
    ErrorCode.CONFIG_FIELD_MISSING: "Required config field missing: {field}",
    ErrorCode.ACTION_ERROR: "Action {index}: {errors}",
    ErrorCode.ACTIONS_NOT_LIST: "{field_name} must be a list",
    ErrorCode.INTERNAL_ERROR: "Failed to validate {section}: {detail}",
}


def render_message(
    code: ErrorCode,
    params: dict[str, Any] | None = None,
    translate: Translator | None = None,
) -> str:
    """Render an error code to text, preferring the caller's translator."""
    params = params or {}
    if translate is not None:
        return translate(code, params)
    return DEFAULT_MESSAGES[code].format(**params)


def make_issue(code: ErrorCode, translate: Translator | None = None, **params: Any) -> ValidationIssue:
    """Build a ValidationIssue with its message rendered."""
    return ValidationIssue(code=code, message=render_message(code, params, translate), params=params)
