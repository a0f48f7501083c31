"""Exceptions raised by the state engine."""

from __future__ import annotations

from typing import Any, Optional


class StateError(Exception):
    """Base class for all state engine errors."""

    pass


class ConfigurationError(StateError):
    """The transition graph is unusable for the requested operation."""

    pass


class InvalidTransitionError(StateError):
    """No action is registered between the two states."""

    def __init__(self, from_state: Any, to_state: Any) -> None:
        self.from_state = from_state
        self.to_state = to_state
        source = "initial" if from_state is None else f"'{from_state}'"
        super().__init__(
            f"Changing state from {source} to '{to_state}' is not allowed"
        )


class AlreadyStartedError(StateError):
    """A state cycle was started twice."""

    def __init__(self, cycle_id: Any) -> None:
        self.cycle_id = cycle_id
        super().__init__(f"State machine for id '{cycle_id}' is already started")


class NotStartedError(StateError):
    """A state cycle was used before being started."""

    def __init__(self, cycle_id: Any) -> None:
        self.cycle_id = cycle_id
        super().__init__(f"State machine for id '{cycle_id}' is not started")


class HookExecutionError(StateError):
    """An ENTER or EXIT hook raised.

    The original exception is available as ``__cause__``.
    """

    def __init__(
        self,
        state: Any,
        direction: str,
        hook: Optional[Any] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        self.state = state
        self.direction = direction
        self.hook = hook
        self.cause = cause
        message = f"Failed to execute {direction} hook of state '{state}'"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause


class TransitionInProgressError(StateError):
    """A cycle was changed from inside one of its own hooks."""

    def __init__(self, cycle_id: Any) -> None:
        self.cycle_id = cycle_id
        super().__init__(
            f"State machine for id '{cycle_id}' is already changing state"
        )
