"""Shared fixtures for statecycle tests."""

from __future__ import annotations

import pytest

from statecycle import StateBuilder, StateMachine
from statecycle.graph import TriggerBuilder
from tests.helpers import CLOSED, FIXED, OPEN, TESTED, HookRecorder


@pytest.fixture
def recorder() -> HookRecorder:
    return HookRecorder()


@pytest.fixture
def issue_builder(recorder: HookRecorder) -> StateBuilder[str, str]:
    """Issue tracking graph with hooks on every state."""
    builder: StateBuilder[str, str] = StateBuilder()
    (
        builder.initialize(OPEN, name="Create Issue")
        .action("Fix Issue", OPEN, FIXED, *TriggerBuilder().chars("a", "A").ints(1).build())
        .action("Reopen Issue", FIXED, OPEN, *TriggerBuilder().chars("b").build())
        .action("Test Pass", FIXED, TESTED, *TriggerBuilder().chars("c").floats(3.0).build())
        .action("Reopen Issue", TESTED, OPEN)
        .action("Close Issue", TESTED, CLOSED, *TriggerBuilder().strings("close").build())
    )
    (
        builder.state(OPEN)
        .on_enter(recorder.hook("enter Open"))
        .on_exit(recorder.hook("exit Open"))
        .state(FIXED)
        .on_enter(recorder.hook("enter Fixed"))
        .on_exit(recorder.hook("exit Fixed"))
        .state(TESTED)
        .on_enter(recorder.hook("enter Tested"))
        .state(CLOSED)
        .on_enter(recorder.hook("enter Closed"))
    )
    return builder


@pytest.fixture
def issue_machine(issue_builder: StateBuilder[str, str]) -> StateMachine[str, str]:
    return StateMachine(issue_builder)
