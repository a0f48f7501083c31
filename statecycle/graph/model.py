"""Transition graph data model."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Generic, Hashable, Iterator, Mapping, Optional, TypeVar

from statecycle.graph.triggers import Trigger

S = TypeVar("S", bound=Hashable)  # State type
P = TypeVar("P")  # Payload type

Hook = Callable[[Any], None]

_NO_HOOKS: tuple[Hook, ...] = ()


class Direction(str, Enum):
    """Which side of a state a hook is bound to."""

    ENTER = "enter"
    EXIT = "exit"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Action(Generic[S]):
    """A named edge between two states.

    ``state_from`` is ``None`` for the initial action.
    """

    name: str
    state_from: Optional[S]
    state_to: S

    @property
    def is_initial(self) -> bool:
        return self.state_from is None

    @property
    def is_self_loop(self) -> bool:
        return self.state_from == self.state_to


@dataclass(frozen=True)
class Route(Generic[S]):
    """An action together with the triggers that fire it automatically."""

    action: Action[S]
    triggers: tuple[Trigger, ...] = ()


class TransitionGraph(Generic[S]):
    """
    Immutable snapshot of states, actions, hooks and triggers.

    Produced by ``StateBuilder.build()`` and shared read-only by the
    transition engine and every state machine built on it.
    """

    def __init__(
        self,
        routes: Mapping[Optional[S], Mapping[S, Route[S]]],
        hooks: Mapping[S, Mapping[Direction, tuple[Hook, ...]]],
    ) -> None:
        self._routes = MappingProxyType(
            {
                state_from: MappingProxyType(dict(targets))
                for state_from, targets in routes.items()
            }
        )
        self._hooks = MappingProxyType(
            {
                state: MappingProxyType(
                    {direction: tuple(fns) for direction, fns in by_direction.items()}
                )
                for state, by_direction in hooks.items()
            }
        )

    def has_route(self, state_from: Optional[S], state_to: S) -> bool:
        """Whether an action from ``state_from`` to ``state_to`` exists."""
        targets = self._routes.get(state_from)
        if targets is None:
            return False
        return state_to in targets

    def get_route(self, state_from: Optional[S], state_to: S) -> Optional[Route[S]]:
        targets = self._routes.get(state_from)
        if targets is None:
            return None
        return targets.get(state_to)

    def get_action(self, state_from: Optional[S], state_to: S) -> Optional[Action[S]]:
        route = self.get_route(state_from, state_to)
        return route.action if route else None

    def routes_from(self, state_from: Optional[S]) -> Mapping[S, Route[S]]:
        """Outbound routes of a state in registration order."""
        return self._routes.get(state_from, MappingProxyType({}))

    def initial_actions(self) -> list[Action[S]]:
        return [route.action for route in self.routes_from(None).values()]

    def hooks(self, state: S, direction: Direction) -> tuple[Hook, ...]:
        """Hooks bound to a state and direction in registration order."""
        by_direction = self._hooks.get(state)
        if by_direction is None:
            return _NO_HOOKS
        return by_direction.get(direction, _NO_HOOKS)

    def triggers(self, state_from: S) -> Iterator[tuple[Trigger, S]]:
        """Yield ``(trigger, target)`` pairs of a state in registration order."""
        for state_to, route in self.routes_from(state_from).items():
            for trigger in route.triggers:
                yield trigger, state_to

    def states(self) -> list[S]:
        """All states that are an endpoint of at least one action."""
        seen: dict[S, None] = {}
        for state_from, targets in self._routes.items():
            if state_from is not None:
                seen.setdefault(state_from, None)
            for state_to in targets:
                seen.setdefault(state_to, None)
        return list(seen)

    def states_with_hooks(self) -> list[S]:
        return [
            state for state, by_direction in self._hooks.items()
            if any(by_direction.values())
        ]

    def describe(self) -> str:
        """Human readable summary of the graph."""
        lines = [
            "State Machine info:",
            f"- {len(self.states())} states defined in total and "
            f"{len(self.states_with_hooks())} state has process.",
        ]
        inbound: dict[S, int] = {}
        for state_from, targets in self._routes.items():
            name = "initial" if state_from is None else str(state_from)
            lines.append(f"- State {name} has {len(targets)} outbounds.")
            for state_to in targets:
                inbound[state_to] = inbound.get(state_to, 0) + 1
        for state_to, count in inbound.items():
            lines.append(f"- State {state_to} has {count} inbounds.")
        return "\n".join(lines)

    def __repr__(self) -> str:
        actions = sum(len(targets) for targets in self._routes.values())
        return f"TransitionGraph(states={len(self.states())}, actions={actions})"
