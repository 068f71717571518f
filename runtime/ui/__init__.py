"""
UI module - rendering seam for conversations.

Provides:
- UISurface: interface the presentation adapter renders through
- WidgetSurface: retained-mode implementation
- Widget, Label, Panel: widget tree
"""

from runtime.ui.widgets import Widget, Label, Panel, Rect, COLOR_NORMAL, COLOR_SELECTED
from runtime.ui.surface import UISurface, WidgetSurface, OptionView

__all__ = [
    "Widget",
    "Label",
    "Panel",
    "Rect",
    "COLOR_NORMAL",
    "COLOR_SELECTED",
    "UISurface",
    "WidgetSurface",
    "OptionView",
]
