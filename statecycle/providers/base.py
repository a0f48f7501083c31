"""Abstract base class for state providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, Hashable, Optional, TypeVar

S = TypeVar("S", bound=Hashable)


class StateProvider(ABC, Generic[S]):
    """
    Stores the current state of every state cycle.

    The state machine reads and writes through the provider on every
    operation and never caches states itself. Providers need not make
    the calls atomic with each other; the machine serialises operations
    per cycle id within one process.
    """

    @abstractmethod
    def get_current_state(self, cycle_id: Any) -> Optional[S]:
        """Current state of a cycle, or None if it was never started."""
        ...

    @abstractmethod
    def initialize_state(self, cycle_id: Any, state: S) -> None:
        """Record the first state of a newly started cycle."""
        ...

    @abstractmethod
    def set_state(self, cycle_id: Any, state: S) -> None:
        """Overwrite the current state of a cycle."""
        ...

    def is_state(self, cycle_id: Any, state: S) -> bool:
        current = self.get_current_state(cycle_id)
        return current is not None and current == state

    def is_state_in(self, cycle_id: Any, *states: S) -> bool:
        current = self.get_current_state(cycle_id)
        return current is not None and current in states
