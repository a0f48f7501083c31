"""State provider persisting current states to a JSON file."""

from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Optional

from statecycle.providers.base import S, StateProvider
from statecycle.utils.atomic import atomic_write_json
from statecycle.utils.logging import get_logger

logger = get_logger("providers.json_file")


def _identity(value: Any) -> Any:
    return value


class JsonFileStateProvider(StateProvider[S]):
    """
    Keeps current states in memory and rewrites a JSON file on every change.

    Cycle ids are stored as strings. States go through ``encode`` before
    being written and through ``decode`` when loaded, e.g. ``lambda s: s.name``
    and ``MyState.__getitem__`` for Enum states. A state that does not encode
    to JSON raises ``TypeError`` and is not recorded.
    """

    def __init__(
        self,
        state_file: Path,
        encode: Callable[[S], Any] = _identity,
        decode: Callable[[Any], S] = _identity,
    ) -> None:
        """
        Initialize the provider and load existing states.

        Args:
            state_file: Path to persist states
            encode: Converts a state to a JSON-serializable value
            decode: Converts a stored value back to a state
        """
        self.state_file = Path(state_file)
        self._encode = encode
        self._decode = decode
        self._states: dict[str, S] = {}
        self._lock = threading.Lock()

        self._load_state()

    def _load_state(self) -> None:
        """Load persisted states from file."""
        if not self.state_file.exists():
            logger.debug("no_existing_state", path=str(self.state_file))
            return

        try:
            data = json.loads(self.state_file.read_text())
            for cycle_id, value in data.get("states", {}).items():
                self._states[cycle_id] = self._decode(value)
        except (json.JSONDecodeError, KeyError, ValueError, AttributeError) as e:
            logger.warning("state_load_failed", path=str(self.state_file), error=str(e))
            return

        logger.info(
            "state_loaded",
            cycles=len(self._states),
            path=str(self.state_file),
        )

    def _save_state(self, states: dict[str, S]) -> None:
        """
        Write ``states`` to the file.

        Raises:
            TypeError: If an encoded state is not JSON-serializable
            AtomicWriteError: If the file cannot be written
        """
        data = {
            "saved_at": datetime.now(timezone.utc).isoformat(),
            "states": {
                cycle_id: self._encode(state)
                for cycle_id, state in states.items()
            },
        }
        atomic_write_json(self.state_file, data)
        logger.debug("state_saved", path=str(self.state_file))

    def get_current_state(self, cycle_id: Any) -> Optional[S]:
        with self._lock:
            return self._states.get(str(cycle_id))

    def initialize_state(self, cycle_id: Any, state: S) -> None:
        self.set_state(cycle_id, state)

    def set_state(self, cycle_id: Any, state: S) -> None:
        """Record ``state``; memory is only updated once the file is written."""
        with self._lock:
            states = dict(self._states)
            states[str(cycle_id)] = state
            self._save_state(states)
            self._states = states

    def remove(self, cycle_id: Any) -> Optional[S]:
        """Forget a cycle so it can be started again."""
        with self._lock:
            if str(cycle_id) not in self._states:
                return None
            states = dict(self._states)
            state = states.pop(str(cycle_id))
            self._save_state(states)
            self._states = states
            return state

    def clear(self) -> None:
        """Forget all cycles and delete the state file."""
        with self._lock:
            self._states = {}
            if self.state_file.exists():
                self.state_file.unlink()
