"""
Dialogue errors.

All of these are fatal to the current conversation only.
"""

from __future__ import annotations


class DialogueError(Exception):
    """Base class for conversation failures."""


class NoTreeAssignedError(DialogueError):
    """A conversation was begun for an assignment with no dialogue tree."""

    def __init__(self, identity: str):
        super().__init__(f"No dialogue tree assigned to {identity!r}")
        self.identity = identity


class UnknownTreeError(DialogueError, KeyError):
    """The store has no tree under the requested id."""

    def __init__(self, tree_id: str):
        super().__init__(f"Dialogue tree not found: {tree_id!r}")
        self.tree_id = tree_id

    def __str__(self) -> str:
        return self.args[0]


class UnknownNodeError(DialogueError, KeyError):
    """A node id does not exist in the tree."""

    def __init__(self, tree_id: str, node_id: int):
        super().__init__(f"Node {node_id} not found in dialogue tree {tree_id!r}")
        self.tree_id = tree_id
        self.node_id = node_id

    def __str__(self) -> str:
        return self.args[0]


class DialogueStateError(DialogueError, RuntimeError):
    """Operation not allowed in the engine's current state."""
