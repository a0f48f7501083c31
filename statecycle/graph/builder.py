"""Builder for transition graphs."""

from __future__ import annotations

from typing import Any, Generic, Optional

from statecycle.errors import ConfigurationError
from statecycle.graph.model import (
    Action,
    Direction,
    Hook,
    P,
    Route,
    S,
    TransitionGraph,
)
from statecycle.graph.triggers import Trigger, TriggerBuilder, as_trigger
from statecycle.utils.logging import get_logger

logger = get_logger("graph.builder")

INITIAL_ACTION_NAME = "init action"


class StateHooks(Generic[S, P]):
    """Registers ENTER and EXIT hooks for one state.

    Returned by ``StateBuilder.state()``.
    """

    def __init__(self, builder: "StateBuilder[S, P]", state: S) -> None:
        self._builder = builder
        self.state_value = state

    def on_enter(self, hook: Hook) -> "StateHooks[S, P]":
        """Run ``hook(payload)`` every time the state is entered."""
        self._builder._add_hook(self.state_value, Direction.ENTER, hook)
        return self

    def on_exit(self, hook: Hook) -> "StateHooks[S, P]":
        """Run ``hook(payload)`` every time the state is exited."""
        self._builder._add_hook(self.state_value, Direction.EXIT, hook)
        return self

    def state(self, state: S) -> "StateHooks[S, P]":
        """Move on to hooks of another state."""
        return self._builder.state(state)

    @property
    def builder(self) -> "StateBuilder[S, P]":
        return self._builder


class StateBuilder(Generic[S, P]):
    """
    Accumulates states, actions, hooks and triggers.

    A state exists only as an endpoint of an action; ``None`` stands for
    "no state yet" and is the source of initial actions. At most one action
    exists per ordered pair of states: registering the same pair again is
    ignored, together with any triggers passed the second time.

    Usage:
        builder = (
            StateBuilder()
            .initialize("Open")
            .action("Fix", "Open", "Fixed")
            .action("Reopen", "Fixed", "Open")
        )
        builder.state("Fixed").on_enter(notify_tester)
        graph = builder.build()
    """

    def __init__(self) -> None:
        # state_from -> state_to -> route, insertion ordered
        self._routes: dict[Optional[S], dict[S, Route[S]]] = {}
        self._hooks: dict[S, dict[Direction, list[Hook]]] = {}

    def triggers(self) -> TriggerBuilder:
        """Start building triggers for one action."""
        return TriggerBuilder()

    def initialize(self, state: S, name: str = INITIAL_ACTION_NAME) -> "StateBuilder[S, P]":
        """
        Add an initial action entering ``state``.

        Args:
            state: State a new cycle starts in
            name: Name of the action
        """
        return self.action(name, None, state)

    def action(
        self,
        name: str,
        state_from: Optional[S],
        state_to: S,
        *triggers: Trigger | Any,
    ) -> "StateBuilder[S, P]":
        """
        Add an action from one state to another.

        Args:
            name: Name of the action
            state_from: State before the action, None for an initial action
            state_to: State after the action
            triggers: Triggers that fire this action when the machine
                accepts input while in ``state_from``

        Returns:
            The builder
        """
        if state_to is None:
            raise ConfigurationError(f"Action '{name}' has no target state")

        if self.has_route(state_from, state_to):
            logger.debug(
                "duplicate_action_ignored",
                action=name,
                from_state=str(state_from),
                to_state=str(state_to),
            )
            return self

        if triggers and state_from is None:
            raise ConfigurationError(
                f"Initial action '{name}' cannot have triggers"
            )

        route = Route(
            action=Action(name, state_from, state_to),
            triggers=tuple(as_trigger(t) for t in triggers),
        )
        self._routes.setdefault(state_from, {})[state_to] = route
        return self

    def self_action(self, name: str, state: S, *triggers: Trigger | Any) -> "StateBuilder[S, P]":
        """Add an action that loops ``state`` into itself."""
        return self.action(name, state, state, *triggers)

    def action_bidirectional(
        self,
        name: str,
        state_a: S,
        state_b: S,
        *triggers: Trigger | Any,
    ) -> "StateBuilder[S, P]":
        """
        Add actions with the same name in both directions.

        The two actions share the trigger instances, so each trigger watches
        both states. Register the actions separately for distinct triggers.
        """
        shared = tuple(as_trigger(t) for t in triggers)
        self.action(name, state_a, state_b, *shared)
        self.action(name, state_b, state_a, *shared)
        return self

    def has_route(self, state_from: Optional[S], state_to: S) -> bool:
        """Whether an action from one state to another exists."""
        targets = self._routes.get(state_from)
        if targets is None:
            return False
        return state_to in targets

    def get_action(self, state_from: Optional[S], state_to: S) -> Optional[Action[S]]:
        targets = self._routes.get(state_from, {})
        route = targets.get(state_to)
        return route.action if route else None

    def state(self, state: S) -> StateHooks[S, P]:
        """Select a state to register ENTER and EXIT hooks for."""
        if state is None:
            raise ConfigurationError("Hooks cannot be bound to the initial sentinel")
        return StateHooks(self, state)

    def _add_hook(self, state: S, direction: Direction, hook: Hook) -> None:
        if not callable(hook):
            raise ConfigurationError(f"Hook for state '{state}' is not callable")
        self._hooks.setdefault(state, {}).setdefault(direction, []).append(hook)

    def build(self) -> TransitionGraph[S]:
        """Snapshot the registered graph. Later changes do not affect it."""
        graph = TransitionGraph(self._routes, self._hooks)
        logger.debug("graph_built", graph=repr(graph))
        return graph

    def describe(self) -> str:
        return self.build().describe()
