"""State providers storing the current state of each cycle."""

from statecycle.providers.base import StateProvider
from statecycle.providers.json_file import JsonFileStateProvider
from statecycle.providers.memory import InMemoryStateProvider

__all__ = [
    "StateProvider",
    "InMemoryStateProvider",
    "JsonFileStateProvider",
]
