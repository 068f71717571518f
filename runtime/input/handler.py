"""
Input handler with action-based abstraction.

Translates raw pygame keyboard events into discrete conversation
Actions. Each key-down edge yields its action at most once per tick;
holding a key (or OS key repeat) does not fire it again.

Usage:
    for event in pygame.event.get():
        input_handler.process_event(event)

    for action in input_handler.poll():
        ...
"""

from __future__ import annotations

import logging
from enum import Enum

import pygame

from runtime.core.actions import Action, DEFAULT_KEY_BINDINGS
from runtime.core.events import EventBus


logger = logging.getLogger(__name__)


class InputEvent(Enum):
    """Input-specific events."""
    ACTION_PRESSED = "input.action_pressed"
    ACTION_RELEASED = "input.action_released"


class InputHandler:
    """
    Keyboard input source for the presentation adapter.

    Keys are mapped to Actions through rebindable bindings.
    """

    def __init__(self, event_bus: EventBus | None = None):
        self.event_bus = event_bus

        self._keys_pressed: set[int] = set()
        self._actions_pressed: set[Action] = set()

        # Actions whose key went down since the last poll, in arrival order
        self._pending: list[Action] = []

        # Key bindings (action -> list of keys)
        self._key_bindings = {action: list(keys) for action, keys in DEFAULT_KEY_BINDINGS.items()}
        self._reverse_key_bindings: dict[int, list[Action]] = {}
        self._rebuild_reverse_bindings()

    def _rebuild_reverse_bindings(self) -> None:
        """Build reverse lookup: key -> actions."""
        self._reverse_key_bindings.clear()
        for action, keys in self._key_bindings.items():
            for key in keys:
                self._reverse_key_bindings.setdefault(key, []).append(action)

    # Public API

    def is_action_pressed(self, action: Action) -> bool:
        """Check if an action is currently held down."""
        return action in self._actions_pressed

    def is_key_pressed(self, key: int) -> bool:
        """Check if a raw key is held down."""
        return key in self._keys_pressed

    def poll(self) -> list[Action]:
        """
        Drain the actions that fired since the previous poll.

        Call once per tick.
        """
        fired, self._pending = self._pending, []

        if self.event_bus:
            for action in fired:
                self.event_bus.publish(InputEvent.ACTION_PRESSED, action=action)

        return fired

    # Key binding management

    def bind_key(self, action: Action, key: int) -> None:
        """Add a key binding for an action."""
        keys = self._key_bindings.setdefault(action, [])
        if key not in keys:
            keys.append(key)
        self._rebuild_reverse_bindings()

    def unbind_key(self, action: Action, key: int) -> None:
        """Remove a key binding for an action."""
        if key in self._key_bindings.get(action, []):
            self._key_bindings[action].remove(key)
        self._rebuild_reverse_bindings()

    def get_bindings(self, action: Action) -> list[int]:
        """Get all key bindings for an action."""
        return self._key_bindings.get(action, []).copy()

    # Event processing

    def process_event(self, event: pygame.event.Event) -> None:
        """Process a pygame event."""
        if event.type == pygame.KEYDOWN:
            self._on_key_down(event.key)
        elif event.type == pygame.KEYUP:
            self._on_key_up(event.key)

    def _on_key_down(self, key: int) -> None:
        if key in self._keys_pressed:
            # Key repeat, not a new edge
            return

        self._keys_pressed.add(key)

        for action in self._reverse_key_bindings.get(key, []):
            self._actions_pressed.add(action)
            if action not in self._pending:
                self._pending.append(action)

    def _on_key_up(self, key: int) -> None:
        self._keys_pressed.discard(key)

        for action in self._reverse_key_bindings.get(key, []):
            # Keep the action held while another of its keys is still down
            still_pressed = any(
                other != key and other in self._keys_pressed
                for other in self._key_bindings.get(action, [])
            )
            if not still_pressed:
                self._actions_pressed.discard(action)
                if self.event_bus:
                    self.event_bus.publish(InputEvent.ACTION_RELEASED, action=action)
