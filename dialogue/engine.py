"""
Dialogue engine - walks a dialogue tree one node at a time.

The engine owns the current NodeData and the reveal of the active line.
It never renders; the presentation adapter reads its state every tick.
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Optional

from runtime.core.config import DialogueConfig
from runtime.core.events import EventBus, DialogueEvent
from dialogue.dispatcher import ActionContext, ActionDispatcher
from dialogue.errors import DialogueStateError, NoTreeAssignedError
from dialogue.models import AssignmentRecord, NodeData, WorldState
from dialogue.reveal import TextReveal
from dialogue.routing import RepeatVisitRouter
from dialogue.store import DialogueStore


logger = logging.getLogger(__name__)


class ConversationState(Enum):
    """Lifecycle of the engine."""
    IDLE = auto()
    ACTIVE = auto()
    ENDED = auto()  # Only while CONVERSATION_ENDED handlers run


class DialogueEngine:
    """
    Conversation state machine.

    Handles:
    - Beginning a conversation (start override, repeat-visit routing)
    - Advancing through lines and nodes, interrupting reveals first
    - Reply selection and confirmation
    - Action dispatch and action pauses
    - End-of-tree detection

    Usage:
        engine = DialogueEngine(store, router=router, world=world)
        engine.begin_conversation(assignment)

        # every tick
        engine.update(dt)

        # on input
        engine.advance()
    """

    def __init__(
        self,
        store: DialogueStore,
        dispatcher: Optional[ActionDispatcher] = None,
        router: Optional[RepeatVisitRouter] = None,
        world: Optional[WorldState] = None,
        event_bus: Optional[EventBus] = None,
        config: Optional[DialogueConfig] = None,
    ):
        self.config = config or DialogueConfig()
        self.store = store
        self.dispatcher = dispatcher or ActionDispatcher.with_defaults(self.config)
        self.router = router or RepeatVisitRouter()
        self.world = world or WorldState()
        self.event_bus = event_bus or EventBus()

        self.reveal = TextReveal(self.config.reveal_char_delay)
        self.reveal.on_complete = self._on_reveal_complete

        self._state = ConversationState.IDLE
        self._node: Optional[NodeData] = None
        self._assignment: Optional[AssignmentRecord] = None

    # State

    @property
    def state(self) -> ConversationState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is ConversationState.ACTIVE

    @property
    def is_idle(self) -> bool:
        return self._state is ConversationState.IDLE

    @property
    def node_data(self) -> Optional[NodeData]:
        """Current snapshot (None while idle)."""
        return self._node

    @property
    def assignment(self) -> Optional[AssignmentRecord]:
        return self._assignment

    @property
    def shown_text(self) -> str:
        """NPC text as far as it has been revealed."""
        return self.reveal.shown

    @property
    def is_revealing(self) -> bool:
        return self.reveal.active

    # Conversation flow

    def begin_conversation(self, assignment: AssignmentRecord) -> NodeData:
        """
        Start talking to the character behind assignment.

        Raises:
            NoTreeAssignedError: The assignment has no dialogue tree; the
                engine stays idle
        """
        if not self.is_idle:
            self.end_conversation()

        self.reveal.reset()

        if assignment.tree_id is None:
            logger.warning("Cannot talk to %s: no dialogue tree assigned", assignment.identity)
            raise NoTreeAssignedError(assignment.identity)

        first = self.store.load_first_node(assignment)

        # Routing looks at visits before this one
        target = self.router.route(assignment, self.world)
        if target is not None:
            first = self.store.load_node(assignment, target)

        assignment.interaction_count += 1
        self._assignment = assignment
        self._state = ConversationState.ACTIVE

        logger.info(
            "Conversation with %s started (visit %d)",
            assignment.identity,
            assignment.interaction_count,
        )
        self.event_bus.publish(
            DialogueEvent.CONVERSATION_STARTED,
            identity=assignment.identity,
            tree_id=assignment.tree_id,
        )

        self._enter_node(first)
        return self._node

    def advance(self) -> Optional[NodeData]:
        """
        Move the conversation forward one step.

        A reveal in progress is finished instead of advancing. A paused
        action must be released by its handler before anything moves.
        """
        if not self.is_active or self._node is None:
            return self._node

        if self.reveal.skip():
            self._publish_text_completed(skipped=True)
            return self._node

        node = self._node

        if node.action_paused:
            result = self.dispatcher.resume(node.extra_data, node.active_line_index, self._context())
            if result is None:
                return node

            self._node = node.model_copy(update={"action_paused": False})
            self.event_bus.publish(
                DialogueEvent.ACTION_RESUMED,
                tag=node.extra_data,
                line_index=node.active_line_index,
            )
            if not result.advances_automatically:
                # Pause released; the line waits for the next advance
                return self._node

        elif not node.is_player_turn and node.extra_data:
            handled = self.dispatcher.has_handler(node.extra_data)
            result = self.dispatcher.dispatch(node.extra_data, node.active_line_index, self._context())

            if handled:
                self.event_bus.publish(
                    DialogueEvent.ACTION_DISPATCHED,
                    tag=node.extra_data,
                    line_index=node.active_line_index,
                    result=result,
                )

            if result.pause:
                self._node = node.model_copy(update={"action_paused": True})
                self.event_bus.publish(
                    DialogueEvent.ACTION_PAUSED,
                    tag=node.extra_data,
                    line_index=node.active_line_index,
                )
                return self._node

            if handled and not result.advances_automatically:
                # The action took this advance for itself
                return self._node

        return self._step()

    def select_option(self, delta: int) -> Optional[NodeData]:
        """Move the reply cursor by -1 or +1, clamped to the option list."""
        if delta not in (-1, 1):
            raise ValueError(f"Option delta must be -1 or +1, got {delta}")

        node = self._node
        if (
            not self.is_active
            or node is None
            or not node.is_player_turn
            or node.action_paused
            or not node.player_options
        ):
            return node

        index = max(0, min(node.selected_option + delta, len(node.player_options) - 1))
        if index != node.selected_option:
            self._node = node.model_copy(update={"selected_option": index})

        return self._node

    def confirm_option(self) -> Optional[NodeData]:
        """Commit the highlighted reply and follow it."""
        node = self._node
        if not self.is_active or node is None:
            return node

        if node.is_player_turn and not node.action_paused:
            logger.debug("Option %d chosen on node %s", node.selected_option, node.node_id)
            self.event_bus.publish(
                DialogueEvent.OPTION_SELECTED,
                node_id=node.node_id,
                option_index=node.selected_option,
                option_text=node.player_options[node.selected_option],
            )

        return self.advance()

    def jump_to_node(self, node_id: int) -> NodeData:
        """
        Move straight to node_id, skipping edges and actions.

        Raises:
            DialogueStateError: No conversation in progress
            UnknownNodeError: node_id is not in the tree
        """
        if not self.is_active or self._assignment is None:
            raise DialogueStateError("Cannot jump: no conversation in progress")

        node = self.store.load_node(self._assignment, node_id)
        logger.debug("Jumping to node %d", node_id)
        self._enter_node(node)
        return self._node

    def end_conversation(self) -> None:
        """Drop the current conversation and go idle. Safe to call twice."""
        if self.is_idle:
            return

        assignment = self._assignment

        self._state = ConversationState.ENDED
        self._node = None
        self._assignment = None
        self.reveal.reset()

        logger.info(
            "Conversation with %s ended",
            assignment.identity if assignment else "<unknown>",
        )
        self.event_bus.publish(
            DialogueEvent.CONVERSATION_ENDED,
            identity=assignment.identity if assignment else None,
        )

        self._state = ConversationState.IDLE

    # Per-tick and host hooks

    def update(self, dt: float) -> None:
        """Advance the reveal by dt seconds."""
        if self.is_active:
            self.reveal.update(dt)

    def confirm_action(self, tag: str) -> None:
        """Tell a paused action that the world condition it waits on is met."""
        self.world.confirm(tag)

    def rewrite_active_line(self, text: str) -> NodeData:
        """
        Replace the text of the active NPC line and reveal it again.

        Raises:
            DialogueStateError: Not on an NPC line, or its reveal is running
        """
        node = self._node
        if not self.is_active or node is None or node.is_player_turn:
            raise DialogueStateError("No NPC line to rewrite")
        if self.reveal.active:
            raise DialogueStateError("Cannot rewrite a line while it is being revealed")

        self._replace_active_line(text)
        self.reveal.start(self._node.active_line)
        return self._node

    # Internals

    def _step(self) -> NodeData:
        node = self._node

        if node.has_unread_lines:
            self._node = node.model_copy(update={"active_line_index": node.active_line_index + 1})
            self.event_bus.publish(
                DialogueEvent.LINE_ADVANCED,
                node_id=node.node_id,
                line_index=self._node.active_line_index,
            )
            self._activate_line()
            return self._node

        chosen = node.selected_option if node.is_player_turn else None
        following = self.store.load_next(self._assignment, node.node_id, chosen)

        if following is None:
            ended = NodeData.end()
            self._node = ended
            self.end_conversation()
            return ended

        self._enter_node(following)
        return self._node

    def _enter_node(self, node: NodeData) -> None:
        self._node = node

        logger.debug(
            "Entered node %s (%s)",
            node.node_id,
            "player" if node.is_player_turn else node.speaker_tag or "npc",
        )
        self.event_bus.publish(
            DialogueEvent.NODE_ENTERED,
            node_id=node.node_id,
            is_player_turn=node.is_player_turn,
            speaker=node.speaker_tag,
        )

        if node.is_player_turn:
            # NPC text stays as it was; nothing is revealing on a player turn
            self.reveal.cancel()
        else:
            self._activate_line()

    def _activate_line(self) -> None:
        """Substitute, then reveal, the line that just became active."""
        node = self._node

        if node.extra_data and self.dispatcher.has_substitution(node.extra_data):
            line = node.active_line
            rewritten = self.dispatcher.substitute(node.extra_data, line, self._context())
            if rewritten != line:
                self._replace_active_line(rewritten)

        self.reveal.start(self._node.active_line)

    def _replace_active_line(self, text: str) -> None:
        node = self._node
        lines = list(node.npc_lines)
        lines[node.active_line_index] = text
        self._node = node.model_copy(update={"npc_lines": lines})

    def _context(self) -> ActionContext:
        return ActionContext(
            assignment=self._assignment,
            world=self.world,
            node=self._node,
        )

    def _on_reveal_complete(self, text: str) -> None:
        self._publish_text_completed(skipped=False)

    def _publish_text_completed(self, skipped: bool) -> None:
        node = self._node
        self.event_bus.publish(
            DialogueEvent.TEXT_COMPLETED,
            node_id=node.node_id if node else None,
            line_index=node.active_line_index if node else None,
            skipped=skipped,
        )
