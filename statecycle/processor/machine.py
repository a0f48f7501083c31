"""State machine driving many independent state cycles over one graph."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Any, ContextManager, Generator, Generic, Mapping, Optional, Union

from statecycle.config.settings import EngineConfig
from statecycle.errors import AlreadyStartedError, NotStartedError, TransitionInProgressError
from statecycle.graph.builder import StateBuilder
from statecycle.graph.model import P, S, TransitionGraph
from statecycle.processor.transition import ExceptionHandler, StateTransition
from statecycle.providers.base import StateProvider
from statecycle.providers.memory import InMemoryStateProvider
from statecycle.utils.logging import bind_cycle_id, get_logger, payload_summary

logger = get_logger("processor.machine")

DEFAULT_ID = "DEFAULT_ID"


class _CycleLock:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self.users = 0


class CycleLocks:
    """
    Re-entrant locks keyed by cycle id.

    A lock exists only while some thread holds or waits for it, so finished
    cycles leave nothing behind.
    """

    def __init__(self) -> None:
        self._locks: dict[Any, _CycleLock] = {}
        self._guard = threading.Lock()

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, cycle_id: Any) -> Generator[None, None, None]:
        with self._guard:
            entry = self._locks.get(cycle_id)
            if entry is None:
                entry = self._locks[cycle_id] = _CycleLock()
            entry.users += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._locks[cycle_id]


class StateMachine(Generic[S, P]):
    """
    Drives state cycles through a transition graph.

    Each cycle is identified by an id and its current state lives in a
    ``StateProvider``. Every cycle starts from an initial action and then
    moves only along registered actions. Methods default to ``DEFAULT_ID``
    for single-cycle use.

    Operations on one id are serialised by a re-entrant per-id lock, so the
    read-transition-write sequence of ``post`` is atomic within a process.
    Hooks may query their own cycle. Changing it from inside one of its
    hooks raises ``TransitionInProgressError``; post again once the outer
    call has returned.

    Usage:
        1. Define states and actions with ``StateBuilder``.
        2. Pick a ``StateProvider`` if the in-memory default does not fit.
        3. Construct the machine and ``start()`` a cycle.
        4. ``post()`` transitions or ``accept()`` input data.
    """

    def __init__(
        self,
        graph: Union[TransitionGraph[S], StateBuilder[S, P]],
        state_provider: Optional[StateProvider[S]] = None,
        config: Optional[EngineConfig] = None,
        exception_handler: Optional[ExceptionHandler] = None,
    ) -> None:
        """
        Initialize the state machine.

        Args:
            graph: Transition graph, or a builder to snapshot
            state_provider: Store of current states (in-memory by default)
            config: Engine flags
            exception_handler: Called with every hook failure
        """
        self.transition = StateTransition(graph, config, exception_handler)
        self.state_provider: StateProvider[S] = state_provider or InMemoryStateProvider()
        self._locks = CycleLocks()
        self._in_flight: set[Any] = set()

        logger.debug("state_machine_created", info=self.graph.describe())

    @property
    def graph(self) -> TransitionGraph[S]:
        return self.transition.graph

    # Engine flags

    @property
    def silent(self) -> bool:
        return self.transition.silent

    @silent.setter
    def silent(self, value: bool) -> None:
        self.transition.silent = value

    @property
    def exception_handler(self) -> Optional[ExceptionHandler]:
        return self.transition.exception_handler

    @exception_handler.setter
    def exception_handler(self, handler: Optional[ExceptionHandler]) -> None:
        self.transition.exception_handler = handler

    @property
    def suppress_enter_on_self_loop(self) -> bool:
        return self.transition.suppress_enter_on_self_loop

    @suppress_enter_on_self_loop.setter
    def suppress_enter_on_self_loop(self, value: bool) -> None:
        self.transition.suppress_enter_on_self_loop = value

    @property
    def suppress_exit_on_self_loop(self) -> bool:
        return self.transition.suppress_exit_on_self_loop

    @suppress_exit_on_self_loop.setter
    def suppress_exit_on_self_loop(self, value: bool) -> None:
        self.transition.suppress_exit_on_self_loop = value

    # Queries

    def get_current_state(self, cycle_id: Any = DEFAULT_ID) -> Optional[S]:
        """Current state of a cycle, or None if not started."""
        return self.state_provider.get_current_state(cycle_id)

    def is_started(self, cycle_id: Any = DEFAULT_ID) -> bool:
        return self.get_current_state(cycle_id) is not None

    def is_state(self, state: S, cycle_id: Any = DEFAULT_ID) -> bool:
        return self.state_provider.is_state(cycle_id, state)

    def is_state_in(self, *states: S, cycle_id: Any = DEFAULT_ID) -> bool:
        return self.state_provider.is_state_in(cycle_id, *states)

    def has_route(self, state_from: Optional[S], state_to: S) -> bool:
        return self.transition.has_route(state_from, state_to)

    def lock(self, cycle_id: Any = DEFAULT_ID) -> ContextManager[None]:
        """
        Lock of a cycle, for callers composing several operations atomically.

        Example:
            with machine.lock("order-1"):
                if machine.is_state(PAID, "order-1"):
                    machine.post(SHIPPED, "order-1")
        """
        return self._locks.hold(cycle_id)

    def reset_state(self, state: S, cycle_id: Any = DEFAULT_ID) -> None:
        """Overwrite the state of a cycle whether or not it was started. No hooks run."""
        with self._changing(cycle_id):
            self.state_provider.set_state(cycle_id, state)
            logger.info("state_reset", state=str(state))

    @contextmanager
    def _changing(self, cycle_id: Any) -> Generator[None, None, None]:
        """Hold the cycle's lock and mark it as changing until the block exits."""
        with self._locks.hold(cycle_id), bind_cycle_id(cycle_id):
            self._ensure_idle(cycle_id)
            self._in_flight.add(cycle_id)
            try:
                yield
            finally:
                self._in_flight.discard(cycle_id)

    def _ensure_idle(self, cycle_id: Any) -> None:
        if cycle_id in self._in_flight:
            raise TransitionInProgressError(cycle_id)

    # Lifecycle

    def start(self, cycle_id: Any = DEFAULT_ID, payload: Optional[P] = None) -> S:
        """
        Start a cycle from the graph's only initial action.

        Returns:
            The initial state

        Raises:
            AlreadyStartedError: If the cycle already has a state
            ConfigurationError: If the graph has zero or several initial actions
        """
        with self._changing(cycle_id):
            self._ensure_not_started(cycle_id)
            state = self.transition.start(payload)
            self.state_provider.initialize_state(cycle_id, state)
            logger.info("cycle_started", state=str(state))
            return state

    def start_state(
        self,
        state: S,
        cycle_id: Any = DEFAULT_ID,
        payload: Optional[P] = None,
    ) -> S:
        """
        Start a cycle at ``state``, which must be the target of an initial action.

        Raises:
            AlreadyStartedError: If the cycle already has a state
            InvalidTransitionError: If no initial action leads to ``state``
        """
        with self._changing(cycle_id):
            self._ensure_not_started(cycle_id)
            self.transition.start_state(state, payload)
            self.state_provider.initialize_state(cycle_id, state)
            logger.info("cycle_started", state=str(state))
            return state

    def _ensure_not_started(self, cycle_id: Any) -> None:
        if self.state_provider.get_current_state(cycle_id) is not None:
            raise AlreadyStartedError(cycle_id)

    def _require_current_state(self, cycle_id: Any) -> S:
        current = self.state_provider.get_current_state(cycle_id)
        if current is None:
            raise NotStartedError(cycle_id)
        return current

    # Transitions

    def post(
        self,
        state_to: S,
        cycle_id: Any = DEFAULT_ID,
        payload: Optional[P] = None,
    ) -> None:
        """
        Move a cycle from its current state to ``state_to``.

        The new state is recorded once the engine returns, including when
        hook failures were swallowed in silent mode.

        Raises:
            NotStartedError: If the cycle was never started
            InvalidTransitionError: If no action leads from the current state
                to ``state_to``; the recorded state is left unchanged
            HookExecutionError: If a hook fails in non-silent mode
            TransitionInProgressError: If called from a hook of the same cycle
        """
        with self._changing(cycle_id):
            current = self._require_current_state(cycle_id)
            self.transition.post(current, state_to, payload)
            self.state_provider.set_state(cycle_id, state_to)
            logger.info(
                "state_transition",
                from_state=str(current),
                to_state=str(state_to),
            )

    def post_on_state(
        self,
        state_to: S,
        condition: S,
        cycle_id: Any = DEFAULT_ID,
        payload: Optional[P] = None,
    ) -> bool:
        """
        Post to ``state_to`` only if the cycle is currently in ``condition``.

        Returns:
            True if a transition was made
        """
        return self.post_on_state_map({condition: state_to}, cycle_id, payload)

    def post_on_states(
        self,
        state_to1: S,
        condition1: S,
        state_to2: S,
        condition2: S,
        cycle_id: Any = DEFAULT_ID,
        payload: Optional[P] = None,
    ) -> bool:
        """
        Post to ``state_to1`` if in ``condition1``, else to ``state_to2`` if in ``condition2``.

        Returns:
            True if a transition was made
        """
        with self._locks.hold(cycle_id):
            if self.is_state(condition1, cycle_id):
                self.post(state_to1, cycle_id, payload)
                return True
            if self.is_state(condition2, cycle_id):
                self.post(state_to2, cycle_id, payload)
                return True
            return False

    def post_on_state_map(
        self,
        conditions: Mapping[S, S],
        cycle_id: Any = DEFAULT_ID,
        payload: Optional[P] = None,
    ) -> bool:
        """
        Look up the target for the current state in ``conditions`` and post to it.

        No match is not an error.

        Returns:
            True if a transition was made
        """
        with self._locks.hold(cycle_id), bind_cycle_id(cycle_id):
            current = self.get_current_state(cycle_id)
            state_to = conditions.get(current) if current is not None else None
            if state_to is None:
                logger.debug("no_conditional_target", state=str(current))
                return False
            self.post(state_to, cycle_id, payload)
            return True

    def accept(
        self,
        data: Any,
        cycle_id: Any = DEFAULT_ID,
        payload: Optional[P] = None,
    ) -> bool:
        """
        Feed input data to the triggers of the cycle's current state.

        The first trigger accepting the data moves the cycle to its target.

        Returns:
            True if a trigger accepted the data and the transition was made

        Raises:
            NotStartedError: If the cycle was never started
            TransitionInProgressError: If called from a hook of the same cycle
        """
        with self._locks.hold(cycle_id), bind_cycle_id(cycle_id):
            self._ensure_idle(cycle_id)
            current = self._require_current_state(cycle_id)
            state_to = self.transition.find_trigger_target(current, data, payload)
            if state_to is None:
                logger.debug(
                    "trigger_not_matched",
                    state=str(current),
                    data=payload_summary(data),
                )
                return False

            logger.debug(
                "trigger_accepted",
                state=str(current),
                data=payload_summary(data),
                payload=payload_summary(payload),
            )
            self.post(state_to, cycle_id, payload)
            return True
