"""
Dialogue module - branching NPC/player conversations.

Provides:
- Authored trees and the in-memory dialogue store
- The conversation engine (turns, replies, end of tree)
- extraData actions and text substitution
- Typewriter reveal
- Repeat-visit routing
- The presentation adapter that drives a UI surface
"""

from dialogue.errors import (
    DialogueError,
    NoTreeAssignedError,
    UnknownTreeError,
    UnknownNodeError,
    DialogueStateError,
)
from dialogue.models import (
    AssignmentRecord,
    DialogueNode,
    DialogueTree,
    NodeData,
    PlayerOption,
    WorldState,
)
from dialogue.store import DialogueStore
from dialogue.dispatcher import (
    ActionContext,
    ActionDispatcher,
    ActionHandler,
    ActionResult,
    ItemAction,
    StartNodeOverrideAction,
    name_substitution,
    NO_ACTION,
)
from dialogue.reveal import TextReveal
from dialogue.routing import RepeatVisitRouter, RouteRule, always, flag_is_set
from dialogue.engine import DialogueEngine, ConversationState
from dialogue.presentation import PresentationAdapter

__all__ = [
    "DialogueError",
    "NoTreeAssignedError",
    "UnknownTreeError",
    "UnknownNodeError",
    "DialogueStateError",
    "AssignmentRecord",
    "DialogueNode",
    "DialogueTree",
    "NodeData",
    "PlayerOption",
    "WorldState",
    "DialogueStore",
    "ActionContext",
    "ActionDispatcher",
    "ActionHandler",
    "ActionResult",
    "ItemAction",
    "StartNodeOverrideAction",
    "name_substitution",
    "NO_ACTION",
    "TextReveal",
    "RepeatVisitRouter",
    "RouteRule",
    "always",
    "flag_is_set",
    "DialogueEngine",
    "ConversationState",
    "PresentationAdapter",
]
