"""Rule payload models and validation result types."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, Any, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag


class LogicalOperator(str, Enum):
    """Operators combining the children of a group condition."""
    AND = "AND"
    OR = "OR"
    NOT = "NOT"


class ComparisonOperator(str, Enum):
    """Operators comparing a field against a value or another field."""
    EQ = "="
    STRICT_EQ = "=="
    NE = "!="
    GT = ">"
    GTE = ">="
    LT = "<"
    LTE = "<="
    IN = "IN"
    NOT_IN = "NOT_IN"
    CONTAINS = "CONTAINS"
    NOT_CONTAINS = "NOT_CONTAINS"
    STARTS_WITH = "STARTS_WITH"
    ENDS_WITH = "ENDS_WITH"
    MATCHES = "MATCHES"
    IS_EMPTY = "IS_EMPTY"
    IS_NOT_EMPTY = "IS_NOT_EMPTY"


class ActionType(str, Enum):
    """Side effects a rule can trigger."""
    ALLOW_TRANSITION = "ALLOW_TRANSITION"
    BLOCK_TRANSITION = "BLOCK_TRANSITION"
    LOG = "LOG"
    SHOW_ERROR = "SHOW_ERROR"
    SHOW_WARNING = "SHOW_WARNING"
    SHOW_INFO = "SHOW_INFO"
    NOTIFY = "NOTIFY"
    SET_FIELD = "SET_FIELD"
    CALL_WEBHOOK = "CALL_WEBHOOK"
    EMIT_EVENT = "EMIT_EVENT"


LOGICAL_OPERATORS: tuple[str, ...] = tuple(op.value for op in LogicalOperator)
COMPARISON_OPERATORS: tuple[str, ...] = tuple(op.value for op in ComparisonOperator)
ACTION_TYPES: tuple[str, ...] = tuple(t.value for t in ActionType)

# Operators that compare a field against nothing
NO_VALUE_OPERATORS: tuple[str, ...] = (
    ComparisonOperator.IS_EMPTY.value,
    ComparisonOperator.IS_NOT_EMPTY.value,
)


class ErrorCode(str, Enum):
    """Stable identifiers for every problem the validators can report."""
    STRUCTURAL_ERROR = "structural_error"
    DEPTH_EXCEEDED = "depth_exceeded"
    INVALID_LOGICAL_OPERATOR = "invalid_logical_operator"
    EMPTY_GROUP = "empty_group"
    RULE_ERROR = "rule_error"
    FIELD_REQUIRED = "field_required"
    INVALID_FIELD_PATH = "invalid_field_path"
    OPERATOR_REQUIRED = "operator_required"
    INVALID_COMPARISON_OPERATOR = "invalid_comparison_operator"
    VALUE_REQUIRED = "value_required"
    VALUE_FIELD_MUST_BE_STRING = "value_field_must_be_string"
    ACTION_REQUIRED = "action_required"
    ACTION_TYPE_REQUIRED = "action_type_required"
    UNKNOWN_ACTION_TYPE = "unknown_action_type"
    CONFIG_REQUIRED = "config_required"
    CONFIG_FIELD_MISSING = "config_field_missing"
    ACTION_ERROR = "action_error"
    ACTIONS_NOT_LIST = "actions_not_list"
    INTERNAL_ERROR = "internal_error"


@dataclass(frozen=True)
class ValidationIssue:
    """A single detected problem: its code, the values it refers to and its rendered text."""
    code: ErrorCode
    message: str
    params: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of validating one artifact.

    ``errors`` holds the rendered messages and ``issues`` the structured
    entries behind them, in the same order.
    """
    valid: bool
    errors: list[str] = field(default_factory=list)
    issues: list[ValidationIssue] = field(default_factory=list)

    @classmethod
    def from_issues(cls, issues: list[ValidationIssue]) -> "ValidationResult":
        return cls(
            valid=not issues,
            errors=[issue.message for issue in issues],
            issues=list(issues),
        )


class ApiValidationResult(BaseModel):
    """Validation outcome as returned to HTTP callers."""
    valid: bool
    error: str | None = None
    errors: list[str] | None = None

    @classmethod
    def from_errors(cls, errors: list[str], summary: str | None = None) -> "ApiValidationResult":
        if not errors:
            return cls(valid=True)
        return cls(valid=False, error=summary or "; ".join(errors), errors=list(errors))

    def to_response(self) -> dict[str, Any]:
        """Drop unset keys so a valid result serialises as ``{"valid": true}``."""
        return self.model_dump(exclude_none=True)


class SimpleCondition(BaseModel):
    """Comparison of one field against a literal value or another field."""
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    field: str = Field(..., description="Field path, e.g. order.items[0].sku")
    operator: ComparisonOperator
    value: Any = None
    value_field: str | None = Field(
        default=None,
        alias="valueField",
        description="Field path to compare against instead of a literal value",
    )


class GroupCondition(BaseModel):
    """AND/OR/NOT combination of child expressions."""
    model_config = ConfigDict(use_enum_values=True)

    operator: LogicalOperator
    rules: list["ConditionExpression"] = Field(..., min_length=1)


def _condition_tag(value: Any) -> str:
    """Tell groups from predicates by shape: groups carry a ``rules`` list."""
    if isinstance(value, GroupCondition):
        return "group"
    if isinstance(value, SimpleCondition):
        return "simple"
    if isinstance(value, dict) and isinstance(value.get("rules"), list):
        return "group"
    return "simple"


ConditionExpression = Annotated[
    Union[
        Annotated[GroupCondition, Tag("group")],
        Annotated[SimpleCondition, Tag("simple")],
    ],
    Discriminator(_condition_tag),
]

GroupCondition.model_rebuild()


class Action(BaseModel):
    """Typed side-effect directive."""
    model_config = ConfigDict(use_enum_values=True)

    type: ActionType
    config: dict[str, Any] | None = None


class RulePayload(BaseModel):
    """
    Rule record fields checked before a rule is stored.

    Fields are untyped; the validators report on whatever shape arrives.
    """
    model_config = ConfigDict(populate_by_name=True)

    condition_expression: Any = Field(default=None, alias="conditionExpression")
    success_actions: Any = Field(default=None, alias="successActions")
    failure_actions: Any = Field(default=None, alias="failureActions")


class ValidationKind(str, Enum):
    """Sections of a rule payload, used to label metrics and logs."""
    CONDITION = "condition"
    SUCCESS_ACTIONS = "success_actions"
    FAILURE_ACTIONS = "failure_actions"

