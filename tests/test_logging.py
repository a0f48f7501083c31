"""Tests for logging helpers."""

from __future__ import annotations

import io
import json

import structlog

from statecycle import LoggingConfig, StateBuilder, StateMachine, load_config
from statecycle.utils.logging import (
    bind_cycle_id,
    configure_logging,
    get_cycle_id,
    payload_summary,
)


def test_payload_summary_truncates() -> None:
    assert payload_summary(None) == "null"
    assert payload_summary("short") == "short"
    assert payload_summary("x" * 40) == "x" * 16
    assert payload_summary({"k": 1}) == "{'k': 1}"


def test_bind_cycle_id_is_scoped() -> None:
    assert get_cycle_id() == ""
    with bind_cycle_id(7):
        assert get_cycle_id() == "7"
        with bind_cycle_id("inner"):
            assert get_cycle_id() == "inner"
        assert get_cycle_id() == "7"
    assert get_cycle_id() == ""


def test_transitions_are_logged_with_cycle_id() -> None:
    stream = io.StringIO()
    configure_logging(level="info", format_type="json", stream=stream)
    try:
        machine = StateMachine(StateBuilder().initialize("A").action("a-b", "A", "B"))
        machine.start("order-9")
        machine.post("B", "order-9")

        events = [json.loads(line) for line in stream.getvalue().splitlines() if line]
        transition = next(e for e in events if e["event"] == "state_transition")
        assert transition["cycle_id"] == "order-9"
        assert transition["from_state"] == "A"
        assert transition["to_state"] == "B"
        assert transition["level"] == "info"
    finally:
        structlog.reset_defaults()


def test_logging_config_is_applied(tmp_path) -> None:
    path = tmp_path / "statecycle.yaml"
    path.write_text("logging:\n  level: error\n  format: json\n")
    config = load_config(path).unwrap()
    stream = io.StringIO()
    config.logging.apply(stream=stream)
    try:
        machine = StateMachine(
            StateBuilder().initialize("A").action("a-b", "A", "B"), config=config
        )
        machine.start("c")
        machine.post("B", "c")
        assert stream.getvalue() == ""

        LoggingConfig(level="debug").apply(stream=stream)
        StateMachine(StateBuilder().initialize("A"))

        events = [json.loads(line) for line in stream.getvalue().splitlines() if line]
        created = next(e for e in events if e["event"] == "state_machine_created")
        assert created["level"] == "debug"
    finally:
        structlog.reset_defaults()
