"""
UI surface - the rendering seam of a conversation.

The presentation adapter talks only to UISurface. WidgetSurface is the
retained-mode implementation: it builds a container with an NPC panel
(name + text), a player panel (one Label per reply option) and an
action indicator, and disposes option widgets when they are replaced.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence

from runtime.ui.widgets import Label, Panel, COLOR_NORMAL, COLOR_SELECTED


OPTION_SPACING = 20


@dataclass(frozen=True)
class OptionView:
    """One reply option as the surface should draw it."""
    text: str
    is_selected: bool = False


class UISurface(ABC):
    """Operations the presentation adapter may perform on the UI."""

    @abstractmethod
    def set_container_visible(self, visible: bool) -> None:
        """Show or hide the whole conversation UI."""

    @abstractmethod
    def set_speaker_panel_visible(self, is_player: bool) -> None:
        """Show the player's panel on player turns, the NPC's otherwise."""

    @abstractmethod
    def render_options(self, options: Sequence[OptionView]) -> None:
        """Create widgets for a new set of reply options."""

    @abstractmethod
    def clear_options(self) -> None:
        """Dispose every option widget currently rendered."""

    @abstractmethod
    def highlight_option(self, index: int) -> None:
        """Move the selection highlight to an already rendered option."""

    @abstractmethod
    def set_speaker_text(self, text: str) -> None:
        """Set the NPC line as currently revealed."""

    @abstractmethod
    def set_speaker_name(self, name: str) -> None:
        """Set the NPC name label."""

    @abstractmethod
    def set_pause_indicator_visible(self, visible: bool) -> None:
        """Show or hide the 'waiting on an action' indicator."""


class WidgetSurface(UISurface):
    """UISurface backed by the retained-mode widget tree."""

    def __init__(self):
        self.container = Panel(tag="dialogue_container")

        self.npc_panel = Panel(tag="npc_panel")
        self.npc_name = Label(tag="npc_name")
        self.npc_text = Label(tag="npc_text")
        self.npc_panel.add_child(self.npc_name)
        self.npc_panel.add_child(self.npc_text)

        self.player_panel = Panel(tag="player_panel")

        self.pause_indicator = Label(tag="pause_indicator")
        self.pause_indicator.visible = False

        self.container.add_child(self.npc_panel)
        self.container.add_child(self.player_panel)
        self.container.add_child(self.pause_indicator)
        self.container.visible = False

        self._option_labels: list[Label] = []

        # Every option widget ever created, for leak checks
        self.created_options: list[Label] = []

    @property
    def option_labels(self) -> list[Label]:
        return list(self._option_labels)

    @property
    def visible_option_texts(self) -> list[str]:
        return [label.text for label in self._option_labels if label.is_shown]

    @property
    def selected_index(self) -> int | None:
        for i, label in enumerate(self._option_labels):
            if label.color == COLOR_SELECTED:
                return i
        return None

    def set_container_visible(self, visible: bool) -> None:
        self.container.visible = visible

    def set_speaker_panel_visible(self, is_player: bool) -> None:
        self.player_panel.visible = is_player
        self.npc_panel.visible = not is_player

    def render_options(self, options: Sequence[OptionView]) -> None:
        self.clear_options()

        for i, option in enumerate(options):
            label = Label(
                option.text,
                color=COLOR_SELECTED if option.is_selected else COLOR_NORMAL,
                tag=f"option_{i}",
            )
            label.set_position(0, OPTION_SPACING - OPTION_SPACING * i)
            self.player_panel.add_child(label)
            self._option_labels.append(label)
            self.created_options.append(label)

    def clear_options(self) -> None:
        for label in self._option_labels:
            label.dispose()
        self._option_labels = []

    def highlight_option(self, index: int) -> None:
        for i, label in enumerate(self._option_labels):
            label.color = COLOR_SELECTED if i == index else COLOR_NORMAL

    def set_speaker_text(self, text: str) -> None:
        self.npc_text.text = text

    def set_speaker_name(self, name: str) -> None:
        self.npc_name.text = name

    def set_pause_indicator_visible(self, visible: bool) -> None:
        self.pause_indicator.visible = visible
