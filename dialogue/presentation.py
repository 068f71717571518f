"""
Presentation adapter - mirrors engine state onto a UI surface.

Every tick the adapter forwards input to the engine, lets the reveal
run, then re-syncs the surface from the engine's NodeData. It never
changes the tree position itself.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Protocol

from runtime.core.actions import Action
from runtime.ui.surface import OptionView, UISurface

if TYPE_CHECKING:
    from dialogue.engine import DialogueEngine
    from dialogue.models import AssignmentRecord, NodeData


logger = logging.getLogger(__name__)


class InputSource(Protocol):
    """Anything that yields the actions fired since the last tick."""

    def poll(self) -> list[Action]:
        ...


class PresentationAdapter:
    """
    Connects a DialogueEngine to a UISurface and an input source.

    Usage:
        adapter = PresentationAdapter(engine, WidgetSurface(), input_handler)
        adapter.begin(assignment)

        # every tick
        adapter.update(dt)
    """

    def __init__(
        self,
        engine: DialogueEngine,
        surface: UISurface,
        input_source: Optional[InputSource] = None,
    ):
        self.engine = engine
        self.surface = surface
        self.input_source = input_source

        # Option list currently on the surface, compared by identity
        self._rendered_options: Optional[list[str]] = None
        self._highlighted: Optional[int] = None

        self.surface.set_container_visible(False)

    def begin(self, assignment: AssignmentRecord) -> NodeData:
        """Clear the NPC widgets and start a conversation."""
        self.surface.set_speaker_text("")
        self.surface.set_speaker_name("")
        try:
            return self.engine.begin_conversation(assignment)
        finally:
            self.sync()

    def update(self, dt: float) -> None:
        """Run one tick: input, reveal, render."""
        if self.input_source is not None:
            for action in self.input_source.poll():
                self.handle_action(action)

        self.engine.update(dt)
        self.sync()

    def handle_action(self, action: Action) -> None:
        """Forward a single input action to the engine."""
        node = self.engine.node_data
        if not self.engine.is_active or node is None:
            return

        if action is Action.SKIP:
            self.engine.advance()

        elif action is Action.CONFIRM:
            if not node.is_player_turn:
                self.engine.advance()
            elif not node.action_paused:
                self.engine.confirm_option()

        elif node.action_paused:
            logger.debug("Ignoring %s while an action is paused", action.name)

        elif action is Action.SCROLL_UP:
            self.engine.select_option(-1)

        elif action is Action.SCROLL_DOWN:
            self.engine.select_option(1)

    def sync(self) -> None:
        """Push the engine's current state to the surface."""
        node = self.engine.node_data

        if not self.engine.is_active or node is None:
            self.surface.set_container_visible(False)
            self.surface.set_pause_indicator_visible(False)
            self._drop_options()
            return

        self.surface.set_container_visible(True)
        self.surface.set_speaker_panel_visible(node.is_player_turn)
        self.surface.set_pause_indicator_visible(node.action_paused)

        if node.is_player_turn:
            self._sync_options(node)
        else:
            self._drop_options()
            self.surface.set_speaker_text(self.engine.shown_text)
            self.surface.set_speaker_name(node.speaker_tag)

    def _sync_options(self, node: NodeData) -> None:
        if node.player_options is not self._rendered_options:
            # New node: old widgets go before new ones are made
            self.surface.clear_options()
            self.surface.render_options([
                OptionView(text, i == node.selected_option)
                for i, text in enumerate(node.player_options)
            ])
            self._rendered_options = node.player_options
            self._highlighted = node.selected_option

        elif node.selected_option != self._highlighted:
            self.surface.highlight_option(node.selected_option)
            self._highlighted = node.selected_option

    def _drop_options(self) -> None:
        if self._rendered_options is None:
            return
        self.surface.clear_options()
        self._rendered_options = None
        self._highlighted = None
