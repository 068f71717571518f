"""
branchtalk runtime

Generic layer underneath the dialogue package: event bus, input actions,
data components, configuration, the fixed-timestep loop and the UI seam.
"""

__version__ = "0.1.0"

from runtime.core import (
    EventBus,
    Event,
    DialogueEvent,
    Action,
    Component,
    DialogueConfig,
    TickLoop,
)

from runtime.input import InputHandler

__all__ = [
    "EventBus",
    "Event",
    "DialogueEvent",
    "Action",
    "Component",
    "DialogueConfig",
    "TickLoop",
    "InputHandler",
]
