"""
Input action definitions.

Actions abstract raw keys into the semantic inputs a conversation
understands. Dialogue code checks Actions, never key codes, so the
bindings can change without touching it.

Usage:
    for action in input_source.poll():
        if action is Action.SCROLL_DOWN:
            ...
"""

from enum import Enum, auto

import pygame


class Action(Enum):
    """Semantic conversation inputs."""

    SCROLL_UP = auto()
    SCROLL_DOWN = auto()
    CONFIRM = auto()   # Commit a reply, or advance an NPC line
    SKIP = auto()      # Finish the current reveal, or advance


DEFAULT_KEY_BINDINGS: dict[Action, list[int]] = {
    Action.SCROLL_UP: [pygame.K_w, pygame.K_UP],
    Action.SCROLL_DOWN: [pygame.K_s, pygame.K_DOWN],
    Action.CONFIRM: [pygame.K_RETURN, pygame.K_SPACE],
    Action.SKIP: [pygame.K_ESCAPE, pygame.K_x],
}
