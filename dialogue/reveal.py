"""
Typewriter reveal of a single line of text.

TextReveal is a resumable state object advanced by the caller once per
tick; it never blocks and never runs on its own thread.
"""

from __future__ import annotations

from typing import Callable, Optional


class TextReveal:
    """
    Reveals one line, one character per char_delay seconds.

    Attributes:
        target: Line being revealed
        shown: Text displayed so far
        active: A reveal is in progress
    """

    def __init__(self, char_delay: float = 0.02):
        self.char_delay = char_delay
        self.target = ""
        self.shown = ""
        self.active = False
        self._elapsed = 0.0

        self.on_complete: Optional[Callable[[str], None]] = None

    @property
    def is_complete(self) -> bool:
        return not self.active and self.shown == self.target

    def start(self, target: str) -> bool:
        """
        Begin revealing target.

        Returns:
            True if a new reveal started
        """
        if self.active:
            if target == self.target:
                return False
            self.cancel()

        if not target:
            # Nothing to emit
            self.target = ""
            self.shown = ""
            self._elapsed = 0.0
            return False

        if target == self.shown:
            # Already fully on screen
            self.target = target
            return False

        self.target = target
        self.shown = ""
        self._elapsed = 0.0
        self.active = True
        return True

    def step(self) -> None:
        """Emit exactly one character."""
        if not self.active:
            return

        if len(self.shown) < len(self.target):
            self.shown += self.target[len(self.shown)]

        if len(self.shown) >= len(self.target):
            self._finish()

    def update(self, dt: float) -> None:
        """Emit one character per elapsed char_delay."""
        if not self.active:
            return

        self._elapsed += dt
        while self.active and self._elapsed >= self.char_delay:
            self._elapsed -= self.char_delay
            self.step()

    def skip(self) -> bool:
        """
        Stop emitting and show the whole line now.

        Returns:
            True if a reveal was interrupted
        """
        if not self.active:
            return False
        self.cancel()
        return True

    def cancel(self) -> None:
        """Stop the reveal, leaving the full target on screen."""
        self.active = False
        self.shown = self.target
        self._elapsed = 0.0

    def reset(self) -> None:
        """Forget everything (conversation ended)."""
        self.target = ""
        self.shown = ""
        self.active = False
        self._elapsed = 0.0

    def _finish(self) -> None:
        self.active = False
        self.shown = self.target
        self._elapsed = 0.0
        if self.on_complete:
            self.on_complete(self.target)
