"""Validation of rule actions against per-type config schemas."""
import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import structlog
from pydantic import BaseModel

from .messages import Translator, make_issue
from .models import ACTION_TYPES, ActionType, ErrorCode, ValidationIssue, ValidationResult

log = structlog.get_logger()


@dataclass(frozen=True)
class ActionConfigSchema:
    """Config keys an action type requires and accepts."""
    required: tuple[str, ...] = ()
    optional: tuple[str, ...] = ()


ACTION_CONFIG_SCHEMAS: dict[ActionType, ActionConfigSchema] = {
    ActionType.ALLOW_TRANSITION: ActionConfigSchema(),
    ActionType.BLOCK_TRANSITION: ActionConfigSchema(),
    ActionType.LOG: ActionConfigSchema(required=("message",), optional=("level",)),
    ActionType.SHOW_ERROR: ActionConfigSchema(required=("message",)),
    ActionType.SHOW_WARNING: ActionConfigSchema(required=("message",)),
    ActionType.SHOW_INFO: ActionConfigSchema(required=("message",)),
    ActionType.NOTIFY: ActionConfigSchema(required=("message", "recipients"), optional=("template",)),
    ActionType.SET_FIELD: ActionConfigSchema(required=("field", "value")),
    ActionType.CALL_WEBHOOK: ActionConfigSchema(required=("url",), optional=("method", "headers", "body")),
    ActionType.EMIT_EVENT: ActionConfigSchema(required=("eventName",), optional=("payload",)),
}

ACTION_TYPE_LABELS: dict[ActionType, str] = {
    ActionType.ALLOW_TRANSITION: "Allow transition",
    ActionType.BLOCK_TRANSITION: "Block transition",
    ActionType.LOG: "Log message",
    ActionType.SHOW_ERROR: "Show error",
    ActionType.SHOW_WARNING: "Show warning",
    ActionType.SHOW_INFO: "Show info",
    ActionType.NOTIFY: "Send notification",
    ActionType.SET_FIELD: "Set field value",
    ActionType.CALL_WEBHOOK: "Call webhook",
    ActionType.EMIT_EVENT: "Emit event",
}


def _schema_for(action_type: Any) -> ActionConfigSchema:
    if isinstance(action_type, str) and action_type in ACTION_TYPES:
        return ACTION_CONFIG_SCHEMAS[ActionType(action_type)]
    return ActionConfigSchema()


def get_required_config_fields(action_type: Any) -> list[str]:
    """Required config keys for an action type; empty for unknown types."""
    return list(_schema_for(action_type).required)


def get_optional_config_fields(action_type: Any) -> list[str]:
    """Optional config keys for an action type; empty for unknown types."""
    return list(_schema_for(action_type).optional)


def is_missing(value: Any) -> bool:
    """
    Whether a required config value counts as absent.

    None, False, empty string, numeric zero and NaN all count as missing.
    Empty lists and mappings count as present.
    """
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0 or math.isnan(value)
    return False


def _config_field_issues(
    config: Mapping,
    required: list[str],
    translate: Translator | None,
) -> list[ValidationIssue]:
    return [
        make_issue(ErrorCode.CONFIG_FIELD_MISSING, translate, field=name)
        for name in required
        if is_missing(config.get(name))
    ]


def validate_action(action: Any, translate: Translator | None = None) -> ValidationResult:
    """
    Validate one action.

    The type check and the config check both run, so an action with an
    unknown type and a broken config reports both.

    Args:
        action: Raw action mapping with ``type`` and optional ``config``
        translate: Optional renderer for error messages

    Returns:
        ValidationResult for this action
    """
    if isinstance(action, BaseModel):
        action = action.model_dump()

    if action is None:
        return ValidationResult.from_issues([make_issue(ErrorCode.ACTION_REQUIRED, translate)])

    if not isinstance(action, Mapping):
        action = {}

    issues: list[ValidationIssue] = []
    action_type = action.get("type")

    if not action_type or not isinstance(action_type, str):
        issues.append(make_issue(ErrorCode.ACTION_TYPE_REQUIRED, translate))
    elif action_type not in ACTION_TYPES:
        issues.append(make_issue(
            ErrorCode.UNKNOWN_ACTION_TYPE,
            translate,
            type=action_type,
            valid_types=", ".join(ACTION_TYPES),
        ))

    required = get_required_config_fields(action_type)
    if required:
        config = action.get("config")
        if not isinstance(config, Mapping):
            issues.append(make_issue(
                ErrorCode.CONFIG_REQUIRED,
                translate,
                type=action_type,
                fields=", ".join(required),
            ))
        else:
            issues.extend(_config_field_issues(config, required, translate))

    return ValidationResult.from_issues(issues)


def validate_action_config(
    action_type: Any,
    config: Mapping | None,
    translate: Translator | None = None,
) -> ValidationResult:
    """Validate a bare config mapping against the schema of ``action_type``."""
    required = get_required_config_fields(action_type)
    if not isinstance(config, Mapping):
        if not required:
            return ValidationResult(valid=True)
        return ValidationResult.from_issues([make_issue(
            ErrorCode.CONFIG_REQUIRED,
            translate,
            type=action_type,
            fields=", ".join(required),
        )])
    return ValidationResult.from_issues(_config_field_issues(config, required, translate))


def validate_actions(actions: Any, translate: Translator | None = None) -> ValidationResult:
    """
    Validate an ordered list of actions.

    An empty or missing list is valid. Each failing action contributes one
    ``Action <n>: <errors>`` entry, ``n`` being its 1-based position.
    """
    if actions is None:
        return ValidationResult(valid=True)

    if not isinstance(actions, (list, tuple)):
        return ValidationResult.from_issues(
            [make_issue(ErrorCode.ACTIONS_NOT_LIST, translate, field_name="Actions")]
        )

    issues: list[ValidationIssue] = []
    for index, action in enumerate(actions, start=1):
        result = validate_action(action, translate)
        if not result.valid:
            issues.append(make_issue(
                ErrorCode.ACTION_ERROR,
                translate,
                index=index,
                errors=", ".join(result.errors),
                issues=result.issues,
            ))

    if issues:
        log.debug("actions.invalid", count=len(actions), invalid=len(issues))
    return ValidationResult.from_issues(issues)


def action_type_options() -> list[dict[str, Any]]:
    """Action types with default labels and their config keys."""
    return [
        {
            "value": action_type.value,
            "label": ACTION_TYPE_LABELS[action_type],
            "required": list(schema.required),
            "optional": list(schema.optional),
        }
        for action_type, schema in ACTION_CONFIG_SCHEMAS.items()
    ]
