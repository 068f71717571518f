"""
Action dispatcher - side effects attached to nodes via extraData.

Handlers are looked up by tag in a registry, so new tags are added by
registering a handler, never by touching engine control flow. Text
substitutions (e.g. "itemLookUp") live in their own registry: they
rewrite a line before it is revealed and never pause or advance.

Usage:
    dispatcher = ActionDispatcher.with_defaults()
    dispatcher.register("shop", OpenShopAction())
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Union

from runtime.core.config import DialogueConfig
from dialogue.models import AssignmentRecord, NodeData, WorldState


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActionResult:
    """
    Outcome of running an action.

    Attributes:
        advances_automatically: The conversation steps on once the action ran
        pause: Hold advancement until the action is resumed

    A registered handler returning neither flag keeps the current line
    for this advance; the next advance dispatches again.
    """
    advances_automatically: bool = False
    pause: bool = False


NO_ACTION = ActionResult()


@dataclass
class ActionContext:
    """What a handler may look at and change."""
    assignment: AssignmentRecord
    world: WorldState
    node: NodeData


class ActionHandler:
    """
    Base class for tag handlers.

    Override handle(). Handlers that pause should override resume() to
    say when the pause may be released.
    """

    def handle(self, context: ActionContext, line_index: int) -> ActionResult:
        raise NotImplementedError

    def resume(self, context: ActionContext, line_index: int) -> Optional[ActionResult]:
        """Release the pause right away by default."""
        return ActionResult(advances_automatically=True)


class FunctionAction(ActionHandler):
    """Wraps a plain callable(context, line_index) -> ActionResult."""

    def __init__(self, func: Callable[[ActionContext, int], ActionResult]):
        self.func = func

    def handle(self, context: ActionContext, line_index: int) -> ActionResult:
        return self.func(context, line_index)


class ItemAction(ActionHandler):
    """
    Hands the player an item on the first line of its node.

    The first time through, sets the item flag and pauses until the
    world confirms the pickup; later lines, or a player who already has
    the item, just move on.
    """

    def __init__(self, flag: str = "got_item", confirmation: str = "item"):
        self.flag = flag
        self.confirmation = confirmation

    def handle(self, context: ActionContext, line_index: int) -> ActionResult:
        if line_index == 0 and not context.world.has_flag(self.flag):
            context.world.set_flag(self.flag)
            # Only a confirmation made during this pause may release it
            context.world.consume_confirmation(self.confirmation)
            return ActionResult(pause=True)
        return ActionResult(advances_automatically=True)

    def resume(self, context: ActionContext, line_index: int) -> Optional[ActionResult]:
        if context.world.consume_confirmation(self.confirmation):
            return ActionResult(advances_automatically=True)
        return None


class StartNodeOverrideAction(ActionHandler):
    """Changes where the character's next conversation starts."""

    def __init__(self, start_node: int = 16):
        self.start_node = start_node

    def handle(self, context: ActionContext, line_index: int) -> ActionResult:
        context.assignment.override_start_node = self.start_node
        logger.debug(
            "%s will now start at node %d", context.assignment.identity, self.start_node
        )
        return ActionResult(advances_automatically=True)


Substitution = Callable[[str, ActionContext], str]


def name_substitution(token: str = "[NAME]") -> Substitution:
    """Replace token with the assignment's display name."""

    def substitute(line: str, context: ActionContext) -> str:
        return line.replace(token, context.assignment.name)

    return substitute


class ActionDispatcher:
    """Registry of extraData tags and their handlers."""

    def __init__(self):
        self._handlers: dict[str, ActionHandler] = {}
        self._substitutions: dict[str, Substitution] = {}

    @classmethod
    def with_defaults(cls, config: DialogueConfig | None = None) -> ActionDispatcher:
        """Dispatcher with the stock item / insanity / itemLookUp tags."""
        config = config or DialogueConfig()
        dispatcher = cls()
        dispatcher.register("item", ItemAction())
        dispatcher.register("insanity", StartNodeOverrideAction())
        dispatcher.register_substitution("itemLookUp", name_substitution(config.name_token))
        return dispatcher

    # Registration

    def register(
        self,
        tag: str,
        handler: Union[ActionHandler, Callable[[ActionContext, int], ActionResult]],
    ) -> None:
        if not tag:
            raise ValueError("Action tag must not be empty")
        if not isinstance(handler, ActionHandler):
            handler = FunctionAction(handler)
        self._handlers[tag] = handler

    def unregister(self, tag: str) -> None:
        self._handlers.pop(tag, None)

    def has_handler(self, tag: str) -> bool:
        return tag in self._handlers

    def register_substitution(self, tag: str, substitution: Substitution) -> None:
        if not tag:
            raise ValueError("Substitution tag must not be empty")
        self._substitutions[tag] = substitution

    def has_substitution(self, tag: str) -> bool:
        return tag in self._substitutions

    # Dispatch

    def dispatch(self, extra_data: str, line_index: int, context: ActionContext) -> ActionResult:
        """Run the handler for extra_data; unknown tags do nothing."""
        handler = self._handlers.get(extra_data)
        if handler is None:
            if extra_data and extra_data not in self._substitutions:
                logger.debug("No action registered for tag %r", extra_data)
            return NO_ACTION

        result = handler.handle(context, line_index)
        logger.debug("Action %r on line %d -> %s", extra_data, line_index, result)
        return result

    def resume(
        self,
        extra_data: str,
        line_index: int,
        context: ActionContext,
    ) -> Optional[ActionResult]:
        """
        Ask whether a paused action may continue.

        Returns:
            The result to apply, or None while the pause must hold
        """
        handler = self._handlers.get(extra_data)
        if handler is None:
            # Nothing owns this pause any more
            logger.warning("Releasing pause held by unregistered tag %r", extra_data)
            return ActionResult(advances_automatically=True)
        return handler.resume(context, line_index)

    def substitute(self, extra_data: str, line: str, context: ActionContext) -> str:
        """Rewrite a line for extra_data, or return it untouched."""
        substitution = self._substitutions.get(extra_data)
        if substitution is None:
            return line
        return substitution(line, context)
