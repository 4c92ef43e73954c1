"""Recursive validation of condition expression trees."""
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import structlog
from pydantic import BaseModel, TypeAdapter, ValidationError

from .messages import Translator, make_issue
from .models import (
    COMPARISON_OPERATORS,
    LOGICAL_OPERATORS,
    NO_VALUE_OPERATORS,
    ComparisonOperator,
    ConditionExpression,
    ErrorCode,
    LogicalOperator,
    ValidationIssue,
    ValidationResult,
)

log = structlog.get_logger()

DEFAULT_MAX_DEPTH = 5

# Identifier followed by any mix of dot and bracket segments: a.b[0].c
FIELD_PATH_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_.\[\]]*")

COMPARISON_OPERATOR_LABELS: dict[ComparisonOperator, str] = {
    ComparisonOperator.EQ: "equals",
    ComparisonOperator.STRICT_EQ: "equals (strict)",
    ComparisonOperator.NE: "not equals",
    ComparisonOperator.GT: "greater than",
    ComparisonOperator.GTE: "greater than or equal",
    ComparisonOperator.LT: "less than",
    ComparisonOperator.LTE: "less than or equal",
    ComparisonOperator.IN: "in",
    ComparisonOperator.NOT_IN: "not in",
    ComparisonOperator.CONTAINS: "contains",
    ComparisonOperator.NOT_CONTAINS: "does not contain",
    ComparisonOperator.STARTS_WITH: "starts with",
    ComparisonOperator.ENDS_WITH: "ends with",
    ComparisonOperator.MATCHES: "matches pattern",
    ComparisonOperator.IS_EMPTY: "is empty",
    ComparisonOperator.IS_NOT_EMPTY: "is not empty",
}

LOGICAL_OPERATOR_LABELS: dict[LogicalOperator, str] = {
    LogicalOperator.AND: "all of",
    LogicalOperator.OR: "any of",
    LogicalOperator.NOT: "none of",
}

_expression_adapter = TypeAdapter(ConditionExpression)


@dataclass(frozen=True)
class GroupNode:
    """Raw node shaped like a group: an operator and a list of rules."""
    operator: Any
    rules: list


@dataclass(frozen=True)
class PredicateNode:
    """Raw node shaped like a field comparison."""
    field: Any
    operator: Any
    value: Any
    has_value: bool
    value_field: Any = None


class ConditionValidationError(ValueError):
    """Raised by parse_condition when an expression does not validate."""

    def __init__(self, result: ValidationResult):
        self.result = result
        super().__init__("; ".join(result.errors))


def is_valid_field_path(path: Any) -> bool:
    """Check a field path such as ``order.items[0].sku`` against the path grammar."""
    if not path or not isinstance(path, str):
        return False
    return FIELD_PATH_PATTERN.fullmatch(path) is not None


def classify_condition(expr: Any) -> GroupNode | PredicateNode | None:
    """
    Decide once which variant a raw node is.

    A mapping with ``operator`` and a list under ``rules`` is a group. A
    mapping with ``field`` and ``operator`` plus a ``value`` key (even null),
    a ``valueField`` key, or a value-less operator is a predicate. Anything
    else is unclassifiable and yields None.

    Args:
        expr: Raw node, usually decoded JSON

    Returns:
        GroupNode, PredicateNode, or None
    """
    if isinstance(expr, BaseModel):
        expr = expr.model_dump(by_alias=True)
    if not isinstance(expr, Mapping):
        return None

    if "operator" in expr and isinstance(expr.get("rules"), list):
        return GroupNode(operator=expr["operator"], rules=expr["rules"])

    if "field" in expr and "operator" in expr:
        has_value = "value" in expr
        if has_value or "valueField" in expr or expr["operator"] in NO_VALUE_OPERATORS:
            return PredicateNode(
                field=expr["field"],
                operator=expr["operator"],
                value=expr.get("value"),
                has_value=has_value,
                value_field=expr.get("valueField"),
            )

    return None


def validate_condition(
    expr: Any,
    depth: int = 0,
    max_depth: int = DEFAULT_MAX_DEPTH,
    translate: Translator | None = None,
) -> ValidationResult:
    """
    Validate a condition expression recursively.

    A missing expression is valid, conditions being optional. Depth is
    checked before the node is inspected, so anything nested past
    ``max_depth`` fails regardless of its content. Problems found in a
    child are reported on the parent as ``Rule <n>: <child errors>``.

    Args:
        expr: Raw condition expression (None, group, predicate, or garbage)
        depth: Depth of ``expr`` in the tree; 0 for the root
        max_depth: Deepest level allowed
        translate: Optional renderer for error messages

    Returns:
        ValidationResult with every problem found at this level
    """
    if expr is None:
        return ValidationResult(valid=True)

    if depth > max_depth:
        log.debug("condition.depth_exceeded", depth=depth, max_depth=max_depth)
        return ValidationResult.from_issues(
            [make_issue(ErrorCode.DEPTH_EXCEEDED, translate, max_depth=max_depth)]
        )

    node = classify_condition(expr)
    if isinstance(node, GroupNode):
        issues = _validate_group(node, depth, max_depth, translate)
    elif isinstance(node, PredicateNode):
        issues = _validate_predicate(node, translate)
    else:
        issues = [make_issue(ErrorCode.STRUCTURAL_ERROR, translate)]

    return ValidationResult.from_issues(issues)


def _validate_group(
    node: GroupNode,
    depth: int,
    max_depth: int,
    translate: Translator | None,
) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []

    if node.operator not in LOGICAL_OPERATORS:
        issues.append(make_issue(
            ErrorCode.INVALID_LOGICAL_OPERATOR,
            translate,
            operator=node.operator,
            valid_operators=", ".join(LOGICAL_OPERATORS),
        ))

    if not node.rules:
        issues.append(make_issue(ErrorCode.EMPTY_GROUP, translate))
        return issues

    for index, rule in enumerate(node.rules, start=1):
        result = validate_condition(rule, depth + 1, max_depth, translate)
        if not result.valid:
            issues.append(make_issue(
                ErrorCode.RULE_ERROR,
                translate,
                index=index,
                errors=", ".join(result.errors),
                issues=result.issues,
            ))

    return issues


def _validate_predicate(node: PredicateNode, translate: Translator | None) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []

    if not node.field or not isinstance(node.field, str):
        issues.append(make_issue(ErrorCode.FIELD_REQUIRED, translate))
    elif not is_valid_field_path(node.field):
        issues.append(make_issue(ErrorCode.INVALID_FIELD_PATH, translate, field=node.field))

    if not node.operator:
        issues.append(make_issue(ErrorCode.OPERATOR_REQUIRED, translate))
    elif node.operator not in COMPARISON_OPERATORS:
        issues.append(make_issue(
            ErrorCode.INVALID_COMPARISON_OPERATOR,
            translate,
            operator=node.operator,
            valid_operators=", ".join(COMPARISON_OPERATORS),
        ))

    if not node.has_value and not node.value_field and node.operator not in NO_VALUE_OPERATORS:
        issues.append(make_issue(ErrorCode.VALUE_REQUIRED, translate))

    if node.value_field and not isinstance(node.value_field, str):
        issues.append(make_issue(ErrorCode.VALUE_FIELD_MUST_BE_STRING, translate))

    return issues


def parse_condition(expr: Any, max_depth: int = DEFAULT_MAX_DEPTH) -> ConditionExpression | None:
    """
    Validate a raw expression and build the typed tree from it.

    Raises:
        ConditionValidationError: If the expression does not validate
    """
    if expr is None:
        return None

    result = validate_condition(expr, max_depth=max_depth)
    if not result.valid:
        raise ConditionValidationError(result)

    try:
        return _expression_adapter.validate_python(expr)
    except ValidationError as e:
        log.warning("condition.parse_failed", error=str(e))
        raise ConditionValidationError(ValidationResult.from_issues(
            [make_issue(ErrorCode.STRUCTURAL_ERROR)]
        )) from e


def comparison_operator_options() -> list[dict[str, str]]:
    """Comparison operators with their default labels, in declaration order."""
    return [{"value": op.value, "label": label} for op, label in COMPARISON_OPERATOR_LABELS.items()]


def logical_operator_options() -> list[dict[str, str]]:
    """Logical operators with their default labels."""
    return [{"value": op.value, "label": label} for op, label in LOGICAL_OPERATOR_LABELS.items()]
