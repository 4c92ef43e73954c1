"""Tests for the action validator."""
import pytest

from ruleguard.rules.actions import (
    action_type_options,
    get_optional_config_fields,
    get_required_config_fields,
    is_missing,
    validate_action,
    validate_action_config,
    validate_actions,
)
from ruleguard.rules.models import Action, ErrorCode

ALL_TYPES = (
    "ALLOW_TRANSITION, BLOCK_TRANSITION, LOG, SHOW_ERROR, SHOW_WARNING, "
    "SHOW_INFO, NOTIFY, SET_FIELD, CALL_WEBHOOK, EMIT_EVENT"
)


def test_log_action_with_level_is_valid():
    result = validate_action({"type": "LOG", "config": {"message": "x", "level": "debug"}})
    assert result.valid is True
    assert result.errors == []


def test_notify_missing_recipients():
    result = validate_action({"type": "NOTIFY", "config": {"message": "hi"}})
    assert result.valid is False
    assert result.errors == ["Required config field missing: recipients"]
    assert result.issues[0].code == ErrorCode.CONFIG_FIELD_MISSING
    assert result.issues[0].params["field"] == "recipients"


def test_missing_fields_accumulate_in_order():
    result = validate_action({"type": "NOTIFY", "config": {}})
    assert result.errors == [
        "Required config field missing: message",
        "Required config field missing: recipients",
    ]


@pytest.mark.parametrize("action_type", ["ALLOW_TRANSITION", "BLOCK_TRANSITION"])
def test_transition_actions_need_no_config(action_type):
    assert validate_action({"type": action_type}).valid is True


def test_config_required_when_type_has_required_keys():
    result = validate_action({"type": "LOG"})
    assert result.errors == ["Action type LOG requires config with fields: message"]
    assert result.issues[0].code == ErrorCode.CONFIG_REQUIRED


@pytest.mark.parametrize("value", [0, 0.0, False, "", None, float("nan")])
def test_falsy_required_values_count_as_missing(value):
    """Falsy values are rejected exactly like absent ones."""
    result = validate_action({"type": "SET_FIELD", "config": {"field": "status", "value": value}})
    assert result.errors == ["Required config field missing: value"]


@pytest.mark.parametrize("value", [[], {}, "0", 1, True, -1])
def test_truthy_or_container_values_are_present(value):
    result = validate_action({"type": "SET_FIELD", "config": {"field": "status", "value": value}})
    assert result.valid is True


def test_unknown_type_is_rejected():
    result = validate_action({"type": "SEND_SMS", "config": {"message": "x"}})
    assert result.errors == [f"Unknown action type: SEND_SMS. Valid types: {ALL_TYPES}"]
    assert result.issues[0].code == ErrorCode.UNKNOWN_ACTION_TYPE


def test_lowercase_type_is_not_coerced():
    assert validate_action({"type": "log", "config": {"message": "x"}}).valid is False


@pytest.mark.parametrize("action", [{"config": {"message": "x"}}, {"type": ""}, {"type": 7}, "LOG"])
def test_missing_type(action):
    result = validate_action(action)
    assert result.errors == ["Action type is required and must be a string"]


def test_missing_action():
    result = validate_action(None)
    assert result.errors == ["Action is required"]


def test_typed_action_model():
    assert validate_action(Action(type="CALL_WEBHOOK", config={"url": "https://example.com/hook"})).valid is True


def test_empty_action_list_is_valid():
    assert validate_actions([]).valid is True
    assert validate_actions(None).valid is True


def test_actions_prefixed_with_position(valid_actions):
    actions = valid_actions + [{"type": "CALL_WEBHOOK", "config": {"method": "POST"}}]
    result = validate_actions(actions)
    assert result.valid is False
    assert result.errors == ["Action 4: Required config field missing: url"]
    assert result.issues[0].params["index"] == 4


def test_every_failing_action_reported():
    result = validate_actions([
        {"type": "NOTIFY", "config": {}},
        {"type": "LOG", "config": {"message": "ok"}},
        {"type": "NOPE"},
    ])
    assert result.errors[0] == (
        "Action 1: Required config field missing: message, Required config field missing: recipients"
    )
    assert result.errors[1].startswith("Action 3: Unknown action type: NOPE")
    assert len(result.errors) == 2


def test_actions_must_be_a_list():
    result = validate_actions({"type": "LOG"})
    assert result.errors == ["Actions must be a list"]


def test_validate_action_config():
    assert validate_action_config("NOTIFY", {"message": "hi"}).errors == [
        "Required config field missing: recipients"
    ]
    assert validate_action_config("LOG", {}).errors == ["Required config field missing: message"]
    assert validate_action_config("LOG", None).errors == [
        "Action type LOG requires config with fields: message"
    ]
    assert validate_action_config("BLOCK_TRANSITION", None).valid is True
    assert validate_action_config("EMIT_EVENT", {"eventName": "order.blocked"}).valid is True


def test_config_field_tables():
    assert get_required_config_fields("NOTIFY") == ["message", "recipients"]
    assert get_required_config_fields("EMIT_EVENT") == ["eventName"]
    assert get_required_config_fields("UNKNOWN") == []
    assert get_required_config_fields(None) == []
    assert get_optional_config_fields("CALL_WEBHOOK") == ["method", "headers", "body"]
    assert get_optional_config_fields("LOG") == ["level"]
    assert get_optional_config_fields("SHOW_INFO") == []


def test_is_missing():
    assert is_missing(None) is True
    assert is_missing(0) is True
    assert is_missing("x") is False
    assert is_missing([]) is False


def test_action_type_options():
    options = action_type_options()
    assert len(options) == 10
    notify = next(o for o in options if o["value"] == "NOTIFY")
    assert notify["required"] == ["message", "recipients"]
    assert notify["optional"] == ["template"]


@pytest.mark.parametrize("config", [[], "message", 0])
def test_non_mapping_config_reports_whole_config(config):
    result = validate_action({"type": "LOG", "config": config})
    assert result.errors == ["Action type LOG requires config with fields: message"]
    assert [issue.code for issue in result.issues] == [ErrorCode.CONFIG_REQUIRED]
