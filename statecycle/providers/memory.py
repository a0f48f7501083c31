"""In-memory state provider."""

from __future__ import annotations

import threading
from typing import Any, Optional

from statecycle.providers.base import S, StateProvider


class InMemoryStateProvider(StateProvider[S]):
    """Keeps current states in a dict guarded by a lock."""

    def __init__(self) -> None:
        self._states: dict[Any, S] = {}
        self._lock = threading.Lock()

    def get_current_state(self, cycle_id: Any) -> Optional[S]:
        with self._lock:
            return self._states.get(cycle_id)

    def initialize_state(self, cycle_id: Any, state: S) -> None:
        with self._lock:
            self._states[cycle_id] = state

    def set_state(self, cycle_id: Any, state: S) -> None:
        with self._lock:
            self._states[cycle_id] = state

    def remove(self, cycle_id: Any) -> Optional[S]:
        """Forget a cycle so it can be started again."""
        with self._lock:
            return self._states.pop(cycle_id, None)

    def ids(self) -> list[Any]:
        with self._lock:
            return list(self._states)

    def __len__(self) -> int:
        with self._lock:
            return len(self._states)
