"""Transition graph definition: states, actions, hooks and triggers."""

from statecycle.graph.builder import INITIAL_ACTION_NAME, StateBuilder, StateHooks
from statecycle.graph.model import Action, Direction, Hook, Route, TransitionGraph
from statecycle.graph.triggers import (
    CharTrigger,
    CustomTrigger,
    EqualsTrigger,
    FloatTrigger,
    IntTrigger,
    ObjectTrigger,
    StringTrigger,
    Trigger,
    TriggerBuilder,
    as_trigger,
)

__all__ = [
    # Model
    "Action",
    "Direction",
    "Hook",
    "Route",
    "TransitionGraph",
    # Builder
    "StateBuilder",
    "StateHooks",
    "INITIAL_ACTION_NAME",
    # Triggers
    "Trigger",
    "EqualsTrigger",
    "CharTrigger",
    "StringTrigger",
    "IntTrigger",
    "FloatTrigger",
    "ObjectTrigger",
    "CustomTrigger",
    "TriggerBuilder",
    "as_trigger",
]
