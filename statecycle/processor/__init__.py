"""State processing module.

A ``StateTransition`` executes single transitions over an immutable
``TransitionGraph``; a ``StateMachine`` wraps it with a ``StateProvider``
so that many cycles, each keyed by an id, move through the same graph:

    StateBuilder --build()--> TransitionGraph --> StateTransition --> StateMachine
                                                                          |
                                                                          v
                                                                    StateProvider
"""

from statecycle.processor.machine import DEFAULT_ID, CycleLocks, StateMachine
from statecycle.processor.transition import (
    ExceptionHandler,
    StateTransition,
    execute_hooks,
)

__all__ = [
    # Engine
    "StateTransition",
    "ExceptionHandler",
    "execute_hooks",
    # Machine
    "StateMachine",
    "CycleLocks",
    "DEFAULT_ID",
]
