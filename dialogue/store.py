"""
Dialogue store - holds authored trees and turns nodes into NodeData.

Trees are registered as validated DialogueTree models (or plain dicts
validated into them). The engine only ever asks the store for
snapshots; it never holds a node object.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from runtime.core.config import DialogueConfig
from dialogue.errors import NoTreeAssignedError, UnknownNodeError, UnknownTreeError
from dialogue.models import AssignmentRecord, DialogueNode, DialogueTree, NodeData


logger = logging.getLogger(__name__)


class DialogueStore:
    """
    In-memory arena of dialogue trees.

    Usage:
        store = DialogueStore()
        store.add_tree(DialogueTree.from_nodes("cap", [...]))
        first = store.load_first_node(assignment)
    """

    def __init__(self, config: DialogueConfig | None = None):
        self.config = config or DialogueConfig()
        self._trees: dict[str, DialogueTree] = {}

    def add_tree(self, tree: DialogueTree) -> DialogueTree:
        """Register a tree, replacing any previous tree with the same id."""
        if tree.id in self._trees:
            logger.debug("Replacing dialogue tree %r", tree.id)
        self._trees[tree.id] = tree
        return tree

    @classmethod
    def from_dict(cls, data: dict[str, Any], config: DialogueConfig | None = None) -> DialogueStore:
        """
        Build a store from {"trees": [tree_dict, ...]}.

        Each tree dict is validated by DialogueTree.
        """
        store = cls(config)
        for tree_data in data.get("trees", []):
            store.add_tree(DialogueTree.model_validate(tree_data))
        logger.info("Loaded %d dialogue trees", len(store._trees))
        return store

    def has_tree(self, tree_id: str) -> bool:
        return tree_id in self._trees

    def get_tree(self, tree_id: str) -> DialogueTree:
        tree = self._trees.get(tree_id)
        if tree is None:
            raise UnknownTreeError(tree_id)
        return tree

    # Snapshot loading

    def load_first_node(self, assignment: AssignmentRecord) -> NodeData:
        """Entry node of the assigned tree, honoring override_start_node."""
        tree = self._tree_for(assignment)

        start = tree.start_node
        if assignment.override_start_node is not None:
            start = assignment.override_start_node
            logger.debug("Start of %r overridden to node %d", tree.id, start)

        return self._snapshot(self._node(tree, start))

    def load_node(self, assignment: AssignmentRecord, node_id: int) -> NodeData:
        """Snapshot of an arbitrary node."""
        tree = self._tree_for(assignment)
        return self._snapshot(self._node(tree, node_id))

    def load_next(
        self,
        assignment: AssignmentRecord,
        current_id: int,
        chosen_option: Optional[int] = None,
    ) -> Optional[NodeData]:
        """
        Follow the outgoing edge of a node.

        On player nodes chosen_option picks the edge (defaults to 0).

        Returns:
            The next snapshot, or None when the edge leaves the tree
        """
        tree = self._tree_for(assignment)
        node = self._node(tree, current_id)

        if node.is_player:
            index = chosen_option or 0
            if not 0 <= index < len(node.options):
                raise IndexError(f"Option {index} out of range on node {node.id}")
            target = node.options[index].next_node
        else:
            target = node.next_node

        if target is None:
            return None

        return self._snapshot(self._node(tree, target))

    # Helpers

    def _tree_for(self, assignment: AssignmentRecord) -> DialogueTree:
        if assignment.tree_id is None:
            raise NoTreeAssignedError(assignment.identity)
        return self.get_tree(assignment.tree_id)

    def _node(self, tree: DialogueTree, node_id: int) -> DialogueNode:
        node = tree.nodes.get(node_id)
        if node is None:
            raise UnknownNodeError(tree.id, node_id)
        return node

    def _snapshot(self, node: DialogueNode) -> NodeData:
        if node.is_player:
            return NodeData(
                node_id=node.id,
                is_player_turn=True,
                player_options=[option.text for option in node.options],
                extra_data=node.extra_data,
            )

        return NodeData(
            node_id=node.id,
            speaker_tag=node.speaker_tag,
            npc_lines=node.text.split(self.config.line_delimiter),
            extra_data=node.extra_data,
        )
