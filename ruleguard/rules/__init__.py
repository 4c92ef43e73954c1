"""Condition, action and payload validators for business rules."""
from .actions import (
    ACTION_CONFIG_SCHEMAS,
    action_type_options,
    get_optional_config_fields,
    get_required_config_fields,
    validate_action,
    validate_action_config,
    validate_actions,
)
from .conditions import (
    ConditionValidationError,
    classify_condition,
    comparison_operator_options,
    is_valid_field_path,
    logical_operator_options,
    parse_condition,
    validate_condition,
)
from .models import (
    Action,
    ActionType,
    ApiValidationResult,
    ComparisonOperator,
    ErrorCode,
    GroupCondition,
    LogicalOperator,
    RulePayload,
    SimpleCondition,
    ValidationIssue,
    ValidationResult,
)
from .payload import (
    validate_actions_for_api,
    validate_condition_expression_for_api,
    validate_rule_payload,
)
from .safety import (
    MAX_FIELD_PATH_LENGTH,
    MAX_RULES_PER_GROUP,
    MAX_SAFE_DEPTH,
    is_safe_expression,
)

__all__ = [
    "ACTION_CONFIG_SCHEMAS",
    "MAX_FIELD_PATH_LENGTH",
    "MAX_RULES_PER_GROUP",
    "MAX_SAFE_DEPTH",
    "Action",
    "ActionType",
    "ApiValidationResult",
    "ComparisonOperator",
    "ConditionValidationError",
    "ErrorCode",
    "GroupCondition",
    "LogicalOperator",
    "RulePayload",
    "SimpleCondition",
    "action_type_options",
    "ValidationIssue",
    "ValidationResult",
    "classify_condition",
    "comparison_operator_options",
    "get_optional_config_fields",
    "get_required_config_fields",
    "is_safe_expression",
    "is_valid_field_path",
    "logical_operator_options",
    "parse_condition",
    "validate_action",
    "validate_action_config",
    "validate_actions",
    "validate_actions_for_api",
    "validate_condition",
    "validate_condition_expression_for_api",
    "validate_rule_payload",
]
