"""
Validation of complete rule payloads before they are stored.

Wraps the condition and action validators in the result shape returned to
HTTP callers and aggregates the three payload sections into one result.
Unexpected failures inside a validator are reported as errors, never raised.
"""
from collections.abc import Mapping
from typing import Any

import structlog

from .actions import validate_actions
from .conditions import DEFAULT_MAX_DEPTH, validate_condition
from .messages import Translator, render_message
from .models import ApiValidationResult, ErrorCode, RulePayload, ValidationKind

log = structlog.get_logger()

SECTION_PREFIXES: dict[ValidationKind, str] = {
    ValidationKind.CONDITION: "Condition",
    ValidationKind.SUCCESS_ACTIONS: "Success actions",
    ValidationKind.FAILURE_ACTIONS: "Failure actions",
}


def _internal_error(section: str, exc: Exception, translate: Translator | None) -> ApiValidationResult:
    detail = str(exc) or exc.__class__.__name__
    message = render_message(ErrorCode.INTERNAL_ERROR, {"section": section, "detail": detail}, translate)
    return ApiValidationResult(valid=False, error=message, errors=[message])


def validate_condition_expression_for_api(
    expression: Any,
    max_depth: int = DEFAULT_MAX_DEPTH,
    translate: Translator | None = None,
) -> ApiValidationResult:
    """
    Validate a condition expression for an API caller.

    Args:
        expression: Raw condition expression; None is valid
        max_depth: Deepest nesting level allowed
        translate: Optional renderer for error messages

    Returns:
        ApiValidationResult with ``error`` summarising all problems
    """
    if expression is None:
        return ApiValidationResult(valid=True)

    try:
        result = validate_condition(expression, 0, max_depth, translate)
    except Exception as e:
        log.error("condition.validation_failed", error=str(e), error_type=e.__class__.__name__, exc_info=True)
        return _internal_error("condition expression", e, translate)

    if result.valid:
        return ApiValidationResult(valid=True)

    return ApiValidationResult.from_errors(
        result.errors,
        summary=f"Invalid condition expression: {'; '.join(result.errors)}",
    )


def validate_actions_for_api(
    actions: Any,
    field_name: str = "actions",
    translate: Translator | None = None,
) -> ApiValidationResult:
    """
    Validate an action list for an API caller.

    Args:
        actions: Raw action list; None or empty is valid
        field_name: Payload key the list came from, used in messages
        translate: Optional renderer for error messages

    Returns:
        ApiValidationResult with ``error`` summarising all problems
    """
    if actions is None or (isinstance(actions, list) and not actions):
        return ApiValidationResult(valid=True)

    if not isinstance(actions, list):
        message = render_message(ErrorCode.ACTIONS_NOT_LIST, {"field_name": field_name}, translate)
        return ApiValidationResult.from_errors([message])

    try:
        result = validate_actions(actions, translate)
    except Exception as e:
        log.error("actions.validation_failed", field=field_name, error=str(e), exc_info=True)
        return _internal_error(field_name, e, translate)

    if result.valid:
        return ApiValidationResult(valid=True)

    return ApiValidationResult.from_errors(
        result.errors,
        summary=f"Invalid {field_name}: {'; '.join(result.errors)}",
    )


def _payload_sections(payload: Any) -> tuple[Any, Any, Any]:
    if isinstance(payload, RulePayload):
        return payload.condition_expression, payload.success_actions, payload.failure_actions
    return (
        payload.get("conditionExpression"),
        payload.get("successActions"),
        payload.get("failureActions"),
    )


def validate_payload_sections(
    payload: Mapping | RulePayload | None,
    max_depth: int = DEFAULT_MAX_DEPTH,
    translate: Translator | None = None,
) -> dict[ValidationKind, ApiValidationResult]:
    """Validate each section of a rule payload independently."""
    if payload is None:
        payload = {}
    if not isinstance(payload, (Mapping, RulePayload)):
        failure = _internal_error("rule payload", TypeError("expected an object"), translate)
        return {kind: failure if kind is ValidationKind.CONDITION else ApiValidationResult(valid=True)
                for kind in SECTION_PREFIXES}

    condition, success_actions, failure_actions = _payload_sections(payload)
    return {
        ValidationKind.CONDITION: validate_condition_expression_for_api(condition, max_depth, translate),
        ValidationKind.SUCCESS_ACTIONS: validate_actions_for_api(success_actions, "successActions", translate),
        ValidationKind.FAILURE_ACTIONS: validate_actions_for_api(failure_actions, "failureActions", translate),
    }


def aggregate_sections(sections: dict[ValidationKind, ApiValidationResult]) -> ApiValidationResult:
    """Flatten section results into one list, each error prefixed with its section name."""
    errors: list[str] = []
    for kind, prefix in SECTION_PREFIXES.items():
        result = sections.get(kind)
        if result is None or result.valid:
            continue
        errors.extend(f"{prefix}: {error}" for error in result.errors or [])
    return ApiValidationResult.from_errors(errors)


def validate_rule_payload(
    payload: Mapping | RulePayload | None,
    max_depth: int = DEFAULT_MAX_DEPTH,
    translate: Translator | None = None,
) -> ApiValidationResult:
    """
    Validate the condition and both action lists of a rule payload.

    Valid only when all three sections are valid. Errors from each section
    are prefixed with ``Condition:``, ``Success actions:`` or
    ``Failure actions:`` and joined into one ordered list.
    """
    result = aggregate_sections(validate_payload_sections(payload, max_depth, translate))
    log.debug("payload.validated", valid=result.valid, error_count=len(result.errors or []))
    return result
