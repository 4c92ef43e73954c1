"""Tests for the rule validation HTTP routes."""
import pytest
from httpx import AsyncClient, ASGITransport
from ruleguard.main import app
from ruleguard.api import rules_router
from ruleguard.config import get_settings

settings = get_settings()


@pytest.mark.asyncio
async def test_validate_valid_payload(valid_condition, valid_actions):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post(
            "/v1/rules/validate",
            json={"conditionExpression": valid_condition, "successActions": valid_actions},
        )
        assert response.status_code == 200
        assert response.json() == {"valid": True}


@pytest.mark.asyncio
async def test_validate_invalid_payload(valid_actions):
    """Invalid payloads still return 200 with the error list."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post(
            "/v1/rules/validate",
            json={
                "conditionExpression": {"operator": "AND", "rules": []},
                "successActions": valid_actions,
                "failureActions": [{"type": "SET_FIELD", "config": {"field": "status", "value": 0}}],
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["valid"] is False
        assert data["errors"] == [
            "Condition: Group must contain at least one rule",
            "Failure actions: Action 1: Required config field missing: value",
        ]
        assert data["error"] == "; ".join(data["errors"])


@pytest.mark.asyncio
async def test_validate_rejects_unsafe_expression(nest):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post("/v1/rules/validate", json={"conditionExpression": nest(11)})
        assert response.status_code == 422
        data = response.json()
        assert data["valid"] is False
        assert data["errors"][0].startswith("Condition: Condition expression exceeds safety limits")


@pytest.mark.asyncio
async def test_validate_requires_object_body():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post("/v1/rules/validate", json=[1, 2, 3])
        assert response.status_code == 422


@pytest.mark.asyncio
async def test_validate_condition_route():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post(
            "/v1/rules/conditions/validate",
            json={"operator": "XOR", "rules": [{"field": "age", "operator": ">", "value": 18}]},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["valid"] is False
        assert data["error"].startswith("Invalid condition expression: Invalid logical operator: XOR")


@pytest.mark.asyncio
async def test_validate_condition_route_unsafe():
    leaf = {"field": "age", "operator": ">", "value": 18}
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post(
            "/v1/rules/conditions/validate",
            json={"operator": "OR", "rules": [leaf] * 51},
        )
        assert response.status_code == 422


@pytest.mark.asyncio
async def test_validate_actions_route():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post(
            "/v1/rules/actions/validate",
            json=[{"type": "LOG", "config": {"message": "x", "level": "debug"}}],
        )
        assert response.status_code == 200
        assert response.json() == {"valid": True}

        response = await client.post("/v1/rules/actions/validate", json=[{"type": "EMIT_EVENT"}])
        data = response.json()
        assert data["valid"] is False
        assert data["errors"] == ["Action 1: Action type EMIT_EVENT requires config with fields: eventName"]


@pytest.mark.asyncio
async def test_vocabulary():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/v1/rules/vocabulary")
        assert response.status_code == 200
        data = response.json()
        assert len(data["comparison_operators"]) == 16
        assert len(data["logical_operators"]) == 3
        assert len(data["action_types"]) == 10
        assert data["limits"]["max_depth"] == settings.CONDITION_MAX_DEPTH
        assert data["limits"]["max_safe_depth"] == 10


@pytest.mark.asyncio
async def test_unexpected_error_returns_structured_500(monkeypatch):
    def explode(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(rules_router, "validate_payload_sections", explode)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post("/v1/rules/validate", json={})
        assert response.status_code == 500
        data = response.json()
        assert data["error"] == "InternalServerError"
        assert data["correlation_id"] == response.headers["x-correlation-id"]
