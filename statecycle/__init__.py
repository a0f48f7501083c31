"""statecycle - declarative finite state machines driven per cycle id."""

__version__ = "1.0.0"

from statecycle.config import EngineConfig, LoggingConfig, load_config
from statecycle.errors import (
    AlreadyStartedError,
    ConfigurationError,
    HookExecutionError,
    InvalidTransitionError,
    NotStartedError,
    StateError,
    TransitionInProgressError,
)
from statecycle.graph import (
    Action,
    CharTrigger,
    CustomTrigger,
    Direction,
    FloatTrigger,
    IntTrigger,
    ObjectTrigger,
    StateBuilder,
    StringTrigger,
    TransitionGraph,
    Trigger,
    TriggerBuilder,
)
from statecycle.processor import DEFAULT_ID, StateMachine, StateTransition
from statecycle.providers import InMemoryStateProvider, JsonFileStateProvider, StateProvider
from statecycle.utils.logging import configure_logging

__all__ = [
    "__version__",
    # Graph
    "StateBuilder",
    "TransitionGraph",
    "Action",
    "Direction",
    "Trigger",
    "TriggerBuilder",
    "CharTrigger",
    "StringTrigger",
    "IntTrigger",
    "FloatTrigger",
    "ObjectTrigger",
    "CustomTrigger",
    # Processing
    "StateTransition",
    "StateMachine",
    "DEFAULT_ID",
    # Providers
    "StateProvider",
    "InMemoryStateProvider",
    "JsonFileStateProvider",
    # Config
    "EngineConfig",
    "LoggingConfig",
    "load_config",
    "configure_logging",
    # Errors
    "StateError",
    "ConfigurationError",
    "InvalidTransitionError",
    "AlreadyStartedError",
    "NotStartedError",
    "HookExecutionError",
    "TransitionInProgressError",
]
