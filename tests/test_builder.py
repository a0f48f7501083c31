"""Tests for StateBuilder and TransitionGraph."""

from __future__ import annotations

import pytest

from statecycle import ConfigurationError, StateBuilder
from statecycle.graph import Action, Direction, IntTrigger, StringTrigger
from tests.helpers import CLOSED, FIXED, OPEN, TESTED


def test_has_route_matches_registered_edges(issue_builder) -> None:
    registered = [
        (None, OPEN),
        (OPEN, FIXED),
        (FIXED, OPEN),
        (FIXED, TESTED),
        (TESTED, OPEN),
        (TESTED, CLOSED),
    ]
    states = [OPEN, FIXED, TESTED, CLOSED]

    for state_from, state_to in registered:
        assert issue_builder.has_route(state_from, state_to)

    for state_from in [None, *states]:
        for state_to in states:
            if (state_from, state_to) not in registered:
                assert not issue_builder.has_route(state_from, state_to)


def test_has_route_false_for_unregistered_self_loop(issue_builder) -> None:
    assert not issue_builder.has_route(OPEN, OPEN)
    assert not issue_builder.build().has_route(CLOSED, CLOSED)


def test_duplicate_action_keeps_first_name() -> None:
    builder = StateBuilder().action("first", "A", "B").action("second", "A", "B")

    assert builder.get_action("A", "B") == Action("first", "A", "B")
    assert builder.build().get_action("A", "B").name == "first"


def test_duplicate_self_loop_keeps_first_name() -> None:
    builder = StateBuilder().self_action("retry", "A").action("again", "A", "A")

    action = builder.get_action("A", "A")
    assert action.name == "retry"
    assert action.is_self_loop


def test_duplicate_action_ignores_its_triggers() -> None:
    builder = (
        StateBuilder()
        .action("a-b", "A", "B", StringTrigger("go"))
        .action("a-b again", "A", "B", StringTrigger("other"))
    )

    triggers = list(builder.build().triggers("A"))
    assert triggers == [(StringTrigger("go"), "B")]


def test_initialize_uses_default_action_name() -> None:
    builder = StateBuilder().initialize("A")

    action = builder.get_action(None, "A")
    assert action.name == "init action"
    assert action.is_initial


def test_competing_initial_actions_are_accepted_at_build_time() -> None:
    graph = StateBuilder().initialize("A").initialize("B").build()

    assert [a.state_to for a in graph.initial_actions()] == ["A", "B"]


def test_bidirectional_action_shares_triggers() -> None:
    trigger = IntTrigger(7)
    graph = StateBuilder().action_bidirectional("toggle", "On", "Off", trigger).build()

    assert graph.get_action("On", "Off").name == "toggle"
    assert graph.get_action("Off", "On").name == "toggle"
    [(on_trigger, on_target)] = list(graph.triggers("On"))
    [(off_trigger, off_target)] = list(graph.triggers("Off"))
    assert on_trigger is off_trigger is trigger
    assert (on_target, off_target) == ("Off", "On")


def test_plain_callable_is_wrapped_as_trigger() -> None:
    graph = StateBuilder().action("big", "A", "B", lambda data, payload: data > 100).build()

    [(trigger, _)] = list(graph.triggers("A"))
    assert trigger.accept(101)
    assert not trigger.accept(100)


def test_action_without_target_is_rejected() -> None:
    with pytest.raises(ConfigurationError):
        StateBuilder().action("nowhere", "A", None)


def test_initial_action_cannot_have_triggers() -> None:
    with pytest.raises(ConfigurationError):
        StateBuilder().action("init", None, "A", StringTrigger("x"))


def test_hooks_cannot_bind_to_initial_sentinel() -> None:
    with pytest.raises(ConfigurationError):
        StateBuilder().state(None)


def test_non_callable_hook_is_rejected() -> None:
    with pytest.raises(ConfigurationError):
        StateBuilder().state("A").on_enter("not a hook")


def test_hooks_keep_registration_order() -> None:
    first, second, third = (lambda p: None), (lambda p: None), (lambda p: None)
    builder = StateBuilder().initialize("A")
    builder.state("A").on_enter(first).on_exit(third).on_enter(second)

    graph = builder.build()
    assert graph.hooks("A", Direction.ENTER) == (first, second)
    assert graph.hooks("A", Direction.EXIT) == (third,)
    assert graph.hooks("B", Direction.ENTER) == ()


def test_state_hooks_return_to_builder() -> None:
    builder = StateBuilder()

    returned = builder.state("A").on_enter(lambda p: None).builder

    assert returned is builder


def test_built_graph_is_not_affected_by_later_changes() -> None:
    builder = StateBuilder().initialize("A").action("a-b", "A", "B")
    builder.state("A").on_enter(lambda p: None)
    graph = builder.build()

    builder.action("b-c", "B", "C")
    builder.state("A").on_enter(lambda p: None)

    assert not graph.has_route("B", "C")
    assert len(graph.hooks("A", Direction.ENTER)) == 1
    assert builder.has_route("B", "C")


def test_describe_counts_states_and_edges(issue_builder) -> None:
    info = issue_builder.describe()

    assert "4 states defined in total and 4 state has process." in info
    assert "- State initial has 1 outbounds." in info
    assert "- State Fixed has 2 outbounds." in info
    assert "- State Open has 3 inbounds." in info
    assert "- State Closed has 1 inbounds." in info


def test_graph_states_in_registration_order(issue_builder) -> None:
    assert issue_builder.build().states() == [OPEN, FIXED, TESTED, CLOSED]
