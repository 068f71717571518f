"""Input handling module."""

from runtime.input.handler import InputHandler, InputEvent

__all__ = [
    "InputHandler",
    "InputEvent",
]
