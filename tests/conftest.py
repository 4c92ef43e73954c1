"""Shared fixtures for ruleguard tests."""
import pytest


def _nest(levels: int, leaf: dict | None = None) -> dict:
    expr = leaf or {"field": "age", "operator": ">", "value": 18}
    for _ in range(levels):
        expr = {"operator": "AND", "rules": [expr]}
    return expr


@pytest.fixture
def nest():
    """Wrap a predicate in ``levels`` single-child AND groups."""
    return _nest


@pytest.fixture
def valid_condition():
    return {
        "operator": "AND",
        "rules": [
            {"field": "age", "operator": ">", "value": 18},
            {
                "operator": "OR",
                "rules": [
                    {"field": "order.items[0].sku", "operator": "STARTS_WITH", "value": "SKU-"},
                    {"field": "customer.tags", "operator": "IS_EMPTY"},
                ],
            },
        ],
    }


@pytest.fixture
def valid_actions():
    return [
        {"type": "LOG", "config": {"message": "rule matched", "level": "info"}},
        {"type": "NOTIFY", "config": {"message": "hi", "recipients": ["ops@example.com"]}},
        {"type": "ALLOW_TRANSITION"},
    ]
