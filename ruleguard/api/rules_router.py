"""API routes for validating rule payloads."""
from typing import Any

from fastapi import APIRouter, Body, Request
from fastapi.responses import JSONResponse
import structlog

from ..config import get_settings
from ..rules.actions import action_type_options
from ..rules.conditions import comparison_operator_options, logical_operator_options
from ..rules.models import RulePayload, ValidationKind
from ..rules.payload import (
    SECTION_PREFIXES,
    aggregate_sections,
    validate_actions_for_api,
    validate_condition_expression_for_api,
    validate_payload_sections,
)
from ..rules.safety import (
    MAX_FIELD_PATH_LENGTH,
    MAX_RULES_PER_GROUP,
    MAX_SAFE_DEPTH,
    is_safe_expression,
)

router = APIRouter(prefix="/v1/rules", tags=["rules"])
log = structlog.get_logger()

UNSAFE_EXPRESSION_MESSAGE = (
    f"Condition expression exceeds safety limits (max depth {MAX_SAFE_DEPTH}, "
    f"max {MAX_RULES_PER_GROUP} rules per group, max field path length {MAX_FIELD_PATH_LENGTH})"
)


def _metrics(request: Request):
    return getattr(request.app.state, "metrics", None)


def _unsafe_response(request: Request, prefix: str | None = None) -> JSONResponse:
    metrics = _metrics(request)
    if metrics:
        metrics.record_unsafe_expression()
    message = f"{prefix}: {UNSAFE_EXPRESSION_MESSAGE}" if prefix else UNSAFE_EXPRESSION_MESSAGE
    log.warning("condition.rejected_unsafe", path=request.url.path)
    return JSONResponse(status_code=422, content={"valid": False, "error": message, "errors": [message]})


@router.post("/validate")
async def validate_rule(payload: RulePayload, request: Request):
    """
    Validate the condition expression and action lists of a rule.

    Returns 200 with ``{"valid": ...}`` for any well-formed request, and 422
    when the condition expression trips the safety guard.
    """
    settings = get_settings()
    if settings.ENFORCE_SAFETY_GUARD and not is_safe_expression(payload.condition_expression):
        return _unsafe_response(request, SECTION_PREFIXES[ValidationKind.CONDITION])

    sections = validate_payload_sections(payload, max_depth=settings.CONDITION_MAX_DEPTH)

    metrics = _metrics(request)
    if metrics:
        for kind, section in sections.items():
            metrics.record_validation(kind.value, section.valid, len(section.errors or []))

    result = aggregate_sections(sections)
    log.info("rule.validated", valid=result.valid, error_count=len(result.errors or []))
    return result.to_response()


@router.post("/conditions/validate")
async def validate_condition_expression(request: Request, expression: Any = Body(default=None)):
    """Validate a condition expression on its own."""
    settings = get_settings()
    if settings.ENFORCE_SAFETY_GUARD and not is_safe_expression(expression):
        return _unsafe_response(request)

    result = validate_condition_expression_for_api(expression, max_depth=settings.CONDITION_MAX_DEPTH)
    metrics = _metrics(request)
    if metrics:
        metrics.record_validation(ValidationKind.CONDITION.value, result.valid, len(result.errors or []))
    return result.to_response()


@router.post("/actions/validate")
async def validate_action_list(request: Request, actions: Any = Body(default=None)):
    """Validate an action list on its own."""
    result = validate_actions_for_api(actions)
    metrics = _metrics(request)
    if metrics:
        metrics.record_validation("actions", result.valid, len(result.errors or []))
    return result.to_response()


@router.get("/vocabulary")
async def vocabulary():
    """Operators and action types accepted by the validators."""
    settings = get_settings()
    return {
        "comparison_operators": comparison_operator_options(),
        "logical_operators": logical_operator_options(),
        "action_types": action_type_options(),
        "limits": {
            "max_depth": settings.CONDITION_MAX_DEPTH,
            "max_safe_depth": MAX_SAFE_DEPTH,
            "max_rules_per_group": MAX_RULES_PER_GROUP,
            "max_field_path_length": MAX_FIELD_PATH_LENGTH,
        },
    }
