"""Hard structural ceilings for condition expressions.

This check is cheaper and stricter than full validation and runs even when
validation is skipped, e.g. right before a rule is persisted.
"""
from collections.abc import Mapping
from typing import Any

MAX_SAFE_DEPTH = 10
MAX_RULES_PER_GROUP = 50
MAX_FIELD_PATH_LENGTH = 200


def is_safe_expression(expr: Any) -> bool:
    """
    Check an expression against the absolute size limits.

    Limits:
    - nesting depth at most MAX_SAFE_DEPTH (root is depth 0)
    - at most MAX_RULES_PER_GROUP rules in any group
    - field paths at most MAX_FIELD_PATH_LENGTH characters

    Returns:
        False as soon as any limit is exceeded, True otherwise
    """
    if expr is None:
        return True

    return _check_node(expr, 0)


def _check_node(expr: Any, depth: int) -> bool:
    if depth > MAX_SAFE_DEPTH:
        return False

    if not isinstance(expr, Mapping):
        return True

    rules = expr.get("rules")
    if isinstance(rules, list):
        if len(rules) > MAX_RULES_PER_GROUP:
            return False
        return all(_check_node(rule, depth + 1) for rule in rules)

    if "field" in expr and len(str(expr["field"])) > MAX_FIELD_PATH_LENGTH:
        return False

    return True
