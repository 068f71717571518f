"""
Retained-mode widgets for conversation UI.

Widgets are DATA + BEHAVIOR (unlike components): they hold their own
visibility and text, and know whether they have been disposed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


# Option colors: plain text and the highlighted reply
COLOR_NORMAL: Tuple[int, int, int] = (0, 0, 0)
COLOR_SELECTED: Tuple[int, int, int] = (0, 0, 255)


@dataclass
class Rect:
    """UI rectangle."""
    x: float = 0
    y: float = 0
    width: float = 0
    height: float = 0


class Widget:
    """
    Base class for all UI widgets.

    A disposed widget is detached from its parent and must not be
    shown again.
    """

    def __init__(self, tag: str = ""):
        self.rect = Rect()
        self.visible: bool = True
        self.tag = tag
        self.parent: Optional[Panel] = None
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def is_shown(self) -> bool:
        """Visible here and in every ancestor."""
        if not self.visible or self._disposed:
            return False
        return self.parent.is_shown if self.parent else True

    def set_position(self, x: float, y: float) -> 'Widget':
        """Set position (fluent)."""
        self.rect.x = x
        self.rect.y = y
        return self

    def dispose(self) -> None:
        """Detach from parent and mark dead."""
        if self._disposed:
            return
        if self.parent:
            self.parent.remove_child(self)
        self._disposed = True

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(tag={self.tag!r}, visible={self.visible})"


class Label(Widget):
    """Simple text display widget."""

    def __init__(
        self,
        text: str = "",
        color: Tuple[int, int, int] = COLOR_NORMAL,
        tag: str = "",
    ):
        super().__init__(tag)
        self.text = text
        self.color = color


class Panel(Widget):
    """Widget that owns child widgets."""

    def __init__(self, tag: str = ""):
        super().__init__(tag)
        self._children: list[Widget] = []

    @property
    def children(self) -> list[Widget]:
        return list(self._children)

    def add_child(self, child: Widget) -> Widget:
        if child.disposed:
            raise ValueError(f"Cannot attach disposed widget {child!r}")
        if child.parent:
            child.parent.remove_child(child)
        child.parent = self
        self._children.append(child)
        return child

    def remove_child(self, child: Widget) -> None:
        if child in self._children:
            self._children.remove(child)
            child.parent = None

    def dispose(self) -> None:
        for child in list(self._children):
            child.dispose()
        super().dispose()
