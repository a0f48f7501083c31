"""Helpers shared by statecycle tests."""

from __future__ import annotations

OPEN = "Open"
FIXED = "Fixed"
TESTED = "Tested"
CLOSED = "Closed"


class HookRecorder:
    """Collects hook invocations as ``(label, payload)`` tuples."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, object]] = []

    def hook(self, label: str):
        def _record(payload):
            self.calls.append((label, payload))

        return _record

    def failing(self, label: str, error: Exception | None = None):
        def _fail(payload):
            self.calls.append((label, payload))
            raise error or RuntimeError(f"{label} failed")

        return _fail

    @property
    def labels(self) -> list[str]:
        return [label for label, _ in self.calls]
