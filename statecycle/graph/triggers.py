"""Triggers that turn external input into automatic state transitions.

A trigger is registered together with an action and watches the action's
source state. When a state machine accepts input data, the triggers of the
current state are evaluated in registration order; the first one that
accepts the data moves the machine to the action's target state.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Optional

from statecycle.errors import ConfigurationError

Predicate = Callable[[Any, Any], bool]


class Trigger(ABC):
    """Predicate over input data and the payload of a transition."""

    @abstractmethod
    def accept(self, data: Any, payload: Any = None) -> bool:
        """Return True if ``data`` should fire the transition."""
        ...


@dataclass(frozen=True)
class EqualsTrigger(Trigger):
    """Accepts data equal to a fixed literal of the expected type."""

    value: Any
    accepted_types: ClassVar[tuple[type, ...]] = (object,)

    def __post_init__(self) -> None:
        if not self._is_accepted_type(self.value):
            raise ConfigurationError(
                f"{type(self).__name__} cannot watch value {self.value!r}"
            )

    @classmethod
    def _is_accepted_type(cls, data: Any) -> bool:
        # bool is an int subclass but never a valid int literal here
        if isinstance(data, bool) and int in cls.accepted_types:
            return False
        return isinstance(data, cls.accepted_types)

    def accept(self, data: Any, payload: Any = None) -> bool:
        return self._is_accepted_type(data) and data == self.value


@dataclass(frozen=True)
class CharTrigger(EqualsTrigger):
    """Accepts one exact character."""

    accepted_types: ClassVar[tuple[type, ...]] = (str,)

    def __post_init__(self) -> None:
        super().__post_init__()
        if len(self.value) != 1:
            raise ConfigurationError(
                f"CharTrigger needs a single character, got {self.value!r}"
            )


@dataclass(frozen=True)
class StringTrigger(EqualsTrigger):
    accepted_types: ClassVar[tuple[type, ...]] = (str,)


@dataclass(frozen=True)
class IntTrigger(EqualsTrigger):
    accepted_types: ClassVar[tuple[type, ...]] = (int,)


@dataclass(frozen=True)
class FloatTrigger(EqualsTrigger):
    accepted_types: ClassVar[tuple[type, ...]] = (float,)


@dataclass(frozen=True)
class ObjectTrigger(EqualsTrigger):
    """Accepts any data equal to the watched object."""

    def accept(self, data: Any, payload: Any = None) -> bool:
        return self.value == data


@dataclass(frozen=True)
class CustomTrigger(Trigger):
    """Wraps an arbitrary ``(data, payload) -> bool`` predicate."""

    predicate: Predicate
    name: Optional[str] = None

    def accept(self, data: Any, payload: Any = None) -> bool:
        return bool(self.predicate(data, payload))


def as_trigger(obj: Any) -> Trigger:
    """Coerce a trigger or a plain predicate into a Trigger."""
    if isinstance(obj, Trigger):
        return obj
    if callable(obj):
        return CustomTrigger(obj, name=getattr(obj, "__name__", None))
    raise ConfigurationError(f"Not a trigger: {obj!r}")


class TriggerBuilder:
    """
    Fluent helper collecting triggers for one action.

    Example:
        triggers = TriggerBuilder().chars("a", "A").ints(1).build()
        builder.action("Fix Issue", "Open", "Fixed", *triggers)
    """

    def __init__(self) -> None:
        self._triggers: list[Trigger] = []

    def chars(self, *chars: str) -> "TriggerBuilder":
        self._triggers.extend(CharTrigger(c) for c in chars)
        return self

    def strings(self, *texts: str) -> "TriggerBuilder":
        self._triggers.extend(StringTrigger(s) for s in texts)
        return self

    def ints(self, *numbers: int) -> "TriggerBuilder":
        self._triggers.extend(IntTrigger(i) for i in numbers)
        return self

    def floats(self, *numbers: float) -> "TriggerBuilder":
        self._triggers.extend(FloatTrigger(f) for f in numbers)
        return self

    def objects(self, *objects: Any) -> "TriggerBuilder":
        self._triggers.extend(ObjectTrigger(o) for o in objects)
        return self

    def custom(self, trigger: Trigger | Predicate) -> "TriggerBuilder":
        self._triggers.append(as_trigger(trigger))
        return self

    def build(self) -> tuple[Trigger, ...]:
        return tuple(self._triggers)
