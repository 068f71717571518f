"""
Core runtime module.

Exports:
- EventBus, Event, DialogueEvent: Event system
- Action, DEFAULT_KEY_BINDINGS: Input actions
- Component: Data record base
- DialogueConfig: Runtime configuration
- TickLoop: Fixed timestep driver
"""

from runtime.core.events import EventBus, Event, DialogueEvent
from runtime.core.actions import Action, DEFAULT_KEY_BINDINGS
from runtime.core.component import Component
from runtime.core.config import DialogueConfig
from runtime.core.loop import TickLoop

__all__ = [
    # Events
    "EventBus",
    "Event",
    "DialogueEvent",
    # Input
    "Action",
    "DEFAULT_KEY_BINDINGS",
    # Data
    "Component",
    # Config
    "DialogueConfig",
    "TickLoop",
]
