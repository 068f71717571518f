"""
Dialogue data models - authored trees, per-character records, node snapshots.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field, model_validator

from runtime.core.component import Component


class PlayerOption(Component):
    """A single reply the player can pick."""
    text: str
    next_node: Optional[int] = None  # None ends the conversation


class DialogueNode(Component):
    """
    One authored node, either an NPC turn or a player turn.

    Attributes:
        id: Stable id inside its tree
        is_player: True for a player reply node
        speaker_tag: Name shown for NPC lines
        text: NPC text; several lines are joined by the line delimiter
        next_node: Edge followed after an NPC node (None ends the tree)
        options: Replies offered on a player node
        extra_data: Optional action tag
    """
    id: int
    is_player: bool = False
    speaker_tag: str = ""
    text: str = ""
    next_node: Optional[int] = None
    options: list[PlayerOption] = Field(default_factory=list)
    extra_data: str = ""

    @model_validator(mode="after")
    def check_turn(self) -> DialogueNode:
        if self.is_player and not self.options:
            raise ValueError(f"Player node {self.id} has no options")
        if not self.is_player and self.options:
            raise ValueError(f"NPC node {self.id} cannot offer player options")
        return self

    @property
    def edges(self) -> list[Optional[int]]:
        """Every outgoing edge target."""
        if self.is_player:
            return [option.next_node for option in self.options]
        return [self.next_node]


class DialogueTree(Component):
    """
    A complete dialogue tree.

    Nodes live in an arena keyed by id; edges are ids, never object
    references, so cycles are harmless.
    """
    id: str
    start_node: int
    nodes: dict[int, DialogueNode]

    @model_validator(mode="after")
    def check_edges(self) -> DialogueTree:
        if self.start_node not in self.nodes:
            raise ValueError(f"Start node {self.start_node} not in tree {self.id!r}")

        for key, node in self.nodes.items():
            if key != node.id:
                raise ValueError(f"Node stored under {key} has id {node.id}")
            for target in node.edges:
                if target is not None and target not in self.nodes:
                    raise ValueError(
                        f"Node {node.id} in tree {self.id!r} links to missing node {target}"
                    )
        return self

    @classmethod
    def from_nodes(
        cls,
        tree_id: str,
        nodes: list[DialogueNode],
        start_node: Optional[int] = None,
    ) -> DialogueTree:
        """Build a tree from a node list; the first node is the default start."""
        if not nodes:
            raise ValueError(f"Dialogue tree {tree_id!r} has no nodes")
        return cls(
            id=tree_id,
            start_node=nodes[0].id if start_node is None else start_node,
            nodes={node.id: node for node in nodes},
        )


class AssignmentRecord(Component):
    """
    Per-character conversation metadata.

    Owned by whoever places the character; the engine only reads it and
    writes interaction_count / override_start_node.

    Attributes:
        identity: Dialogue name, the key for repeat-visit routing
        display_name: Name of the character in the world ([NAME] token)
        tree_id: Dialogue tree to run, None if nothing is assigned
        interaction_count: Times a conversation with this character began
        override_start_node: Forced entry node, None for the tree default
    """
    identity: str
    display_name: str = ""
    tree_id: Optional[str] = None
    interaction_count: int = Field(default=0, ge=0)
    override_start_node: Optional[int] = None

    @property
    def name(self) -> str:
        return self.display_name or self.identity


class WorldState(Component):
    """
    Persistent world flags shared by actions and routing rules.

    Attributes:
        flags: Named boolean facts (e.g. "got_item")
        confirmations: External confirmations waiting to release a pause
    """
    flags: dict[str, bool] = Field(default_factory=dict)
    confirmations: set[str] = Field(default_factory=set)

    def set_flag(self, key: str, value: bool = True) -> None:
        self.flags[key] = value

    def has_flag(self, key: str) -> bool:
        return self.flags.get(key, False)

    def confirm(self, tag: str) -> None:
        """Record that the world condition an action waits on is met."""
        self.confirmations.add(tag)

    def consume_confirmation(self, tag: str) -> bool:
        """Take a pending confirmation; True if one was present."""
        if tag in self.confirmations:
            self.confirmations.discard(tag)
            return True
        return False


class NodeData(Component):
    """
    Snapshot of where the conversation stands.

    Replaced wholesale on every move. Only the engine produces new
    snapshots.

    Attributes:
        node_id: Arena id of the active node (None once ended)
        is_player_turn: Whose turn owns this node
        is_end: Traversal tried to leave the tree
        speaker_tag: NPC display label (empty on player turns)
        npc_lines: Lines of an NPC node
        active_line_index: Line currently displayed
        player_options: Replies on a player turn
        selected_option: Highlighted reply
        extra_data: Action tag, empty for none
        action_paused: An action is holding advancement
    """
    node_id: Optional[int] = None
    is_player_turn: bool = False
    is_end: bool = False
    speaker_tag: str = ""
    npc_lines: list[str] = Field(default_factory=list)
    active_line_index: int = Field(default=0, ge=0)
    player_options: list[str] = Field(default_factory=list)
    selected_option: int = Field(default=0, ge=0)
    extra_data: str = ""
    action_paused: bool = False

    @model_validator(mode="after")
    def check_indices(self) -> NodeData:
        if self.is_end:
            return self
        if not self.is_player_turn and self.active_line_index >= max(len(self.npc_lines), 1):
            raise ValueError(
                f"Line index {self.active_line_index} out of range for {len(self.npc_lines)} lines"
            )
        if self.is_player_turn and self.player_options and self.selected_option >= len(self.player_options):
            raise ValueError(
                f"Option {self.selected_option} out of range for {len(self.player_options)} options"
            )
        return self

    @classmethod
    def end(cls) -> NodeData:
        """Terminal snapshot."""
        return cls(is_end=True)

    @property
    def active_line(self) -> str:
        """Text of the NPC line on display ('' on player turns)."""
        if self.is_player_turn or self.is_end or not self.npc_lines:
            return ""
        return self.npc_lines[self.active_line_index]

    @property
    def has_unread_lines(self) -> bool:
        return not self.is_player_turn and self.active_line_index < len(self.npc_lines) - 1
