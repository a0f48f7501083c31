"""Transition engine executing single transitions over a graph."""

from __future__ import annotations

from typing import Any, Callable, Generic, Optional, Union

from statecycle.config.settings import EngineConfig
from statecycle.errors import ConfigurationError, HookExecutionError, InvalidTransitionError
from statecycle.graph.builder import StateBuilder
from statecycle.graph.model import Direction, Hook, P, S, TransitionGraph
from statecycle.utils.logging import get_logger, payload_summary
from statecycle.utils.result import Err, HookFailure, Ok, Result

logger = get_logger("processor.transition")

ExceptionHandler = Callable[[HookExecutionError], None]


class StateTransition(Generic[S, P]):
    """
    Executes transitions and their hooks.

    The engine keeps no current state: callers pass both ends of every
    transition and record the result themselves (see ``StateMachine``).

    Hook failures follow the failure policy:
    - the exception handler, if set, receives a ``HookExecutionError``
    - silent mode (default): the remaining hooks of the failing list are
      skipped, the transition still succeeds
    - non-silent mode: the ``HookExecutionError`` is raised
    """

    def __init__(
        self,
        graph: Union[TransitionGraph[S], StateBuilder[S, P]],
        config: Optional[EngineConfig] = None,
        exception_handler: Optional[ExceptionHandler] = None,
    ) -> None:
        """
        Initialize the engine.

        Args:
            graph: Transition graph, or a builder to snapshot
            config: Engine flags (defaults to ``EngineConfig()``)
            exception_handler: Called with every hook failure
        """
        if isinstance(graph, StateBuilder):
            graph = graph.build()
        self.graph = graph

        config = config or EngineConfig()
        self.silent = config.silent
        self.suppress_enter_on_self_loop = config.suppress_enter_on_self_loop
        self.suppress_exit_on_self_loop = config.suppress_exit_on_self_loop
        self.exception_handler = exception_handler

    def start(self, payload: Optional[P] = None) -> S:
        """
        Enter the graph through its only initial action.

        Returns:
            The initial state

        Raises:
            ConfigurationError: If there is no initial action or more than one
        """
        initial_actions = self.graph.initial_actions()
        if not initial_actions:
            raise ConfigurationError(
                "State transition is not properly built, no initial actions"
            )
        if len(initial_actions) > 1:
            raise ConfigurationError(
                "More than one initial state, use start_state() instead"
            )

        state = initial_actions[0].state_to
        self._do_transition(None, state, payload)
        return state

    def start_state(self, state: S, payload: Optional[P] = None) -> S:
        """
        Enter the graph at ``state``, which must be the target of an initial action.

        Raises:
            InvalidTransitionError: If no initial action leads to ``state``
        """
        logger.debug(
            "start_state",
            state=str(state),
            payload=payload_summary(payload),
        )
        self._do_transition(None, state, payload)
        return state

    def post(self, state_from: S, state_to: S, payload: Optional[P] = None) -> None:
        """
        Transition from one explicit state to another.

        Raises:
            InvalidTransitionError: If no action connects the two states
            HookExecutionError: If a hook fails in non-silent mode
        """
        self._do_transition(state_from, state_to, payload)

    def has_route(self, state_from: Optional[S], state_to: S) -> bool:
        return self.graph.has_route(state_from, state_to)

    def find_trigger_target(
        self,
        state: S,
        data: Any,
        payload: Optional[P] = None,
    ) -> Optional[S]:
        """First target whose trigger accepts ``data``, without transitioning."""
        for trigger, state_to in self.graph.triggers(state):
            if trigger.accept(data, payload):
                return state_to
        return None

    def accept(self, state: S, data: Any, payload: Optional[P] = None) -> Optional[S]:
        """
        Match ``data`` against the triggers of ``state`` and transition on a match.

        Returns:
            The new state, or None if no trigger accepted the data
        """
        state_to = self.find_trigger_target(state, data, payload)
        if state_to is None:
            logger.debug("trigger_not_matched", state=str(state), data=payload_summary(data))
            return None

        logger.debug(
            "trigger_accepted",
            from_state=str(state),
            to_state=str(state_to),
            data=payload_summary(data),
            payload=payload_summary(payload),
        )
        self._do_transition(state, state_to, payload)
        return state_to

    def _do_transition(self, state_from: Optional[S], state_to: S, payload: Optional[P]) -> None:
        route = self.graph.get_route(state_from, state_to)
        if route is None:
            raise InvalidTransitionError(state_from, state_to)

        logger.debug(
            "state_transition",
            action=route.action.name,
            from_state=str(state_from),
            to_state=str(state_to),
            payload=payload_summary(payload),
        )

        self_loop = state_from == state_to

        if state_from is not None:
            if self_loop and self.suppress_exit_on_self_loop:
                logger.info("self_loop_exit_suppressed", state=str(state_from))
            else:
                self._run_hooks(state_from, Direction.EXIT, payload)

        if self_loop and self.suppress_enter_on_self_loop:
            logger.info("self_loop_enter_suppressed", state=str(state_to))
        else:
            self._run_hooks(state_to, Direction.ENTER, payload)

    def _run_hooks(self, state: S, direction: Direction, payload: Optional[P]) -> None:
        hooks = self.graph.hooks(state, direction)
        if not hooks:
            return

        result = execute_hooks(state, direction, hooks, payload)
        if result.is_ok():
            return

        failure = result.unwrap_err()
        error = HookExecutionError(
            state,
            str(direction),
            hook=hooks[failure.index],
            cause=failure.cause,
        )
        logger.error(
            "hook_failed",
            state=str(state),
            direction=str(direction),
            hook_index=failure.index,
            skipped=len(hooks) - failure.index - 1,
            error=str(failure.cause),
            silent=self.silent,
        )

        if self.exception_handler is not None:
            self.exception_handler(error)

        if not self.silent:
            raise error


def execute_hooks(
    state: S,
    direction: Direction,
    hooks: tuple[Hook, ...],
    payload: Any,
) -> Result[int, HookFailure]:
    """
    Run hooks in order, stopping at the first failure.

    Returns:
        Ok with the number of hooks run, or Err describing the failing hook
    """
    for index, hook in enumerate(hooks):
        try:
            hook(payload)
        except Exception as e:
            return Err(HookFailure(state=state, direction=str(direction), index=index, cause=e))
    return Ok(len(hooks))
