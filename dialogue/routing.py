"""
Repeat-visit routing - alternate entry nodes for characters met before.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from dialogue.models import AssignmentRecord, WorldState


logger = logging.getLogger(__name__)


RoutePredicate = Callable[[WorldState, AssignmentRecord], bool]


@dataclass(frozen=True)
class RouteRule:
    """Jump to target_node when predicate holds."""
    predicate: RoutePredicate
    target_node: int


def flag_is_set(flag: str) -> RoutePredicate:
    """Predicate: a world flag is set."""

    def predicate(world: WorldState, assignment: AssignmentRecord) -> bool:
        return world.has_flag(flag)

    return predicate


def always(world: WorldState, assignment: AssignmentRecord) -> bool:
    return True


class RepeatVisitRouter:
    """
    Rules keyed by assignment identity, evaluated in insertion order.

    Usage:
        router = RepeatVisitRouter()
        router.add_rule("Crazy Cap", flag_is_set("got_item"), 17)
    """

    def __init__(self, rules: dict[str, list[RouteRule]] | None = None):
        self._rules: dict[str, list[RouteRule]] = {
            identity: list(entries) for identity, entries in (rules or {}).items()
        }

    def add_rule(self, identity: str, predicate: RoutePredicate, target_node: int) -> None:
        self._rules.setdefault(identity, []).append(RouteRule(predicate, target_node))

    def rules_for(self, identity: str) -> list[RouteRule]:
        return list(self._rules.get(identity, []))

    def clear(self, identity: str | None = None) -> None:
        if identity is None:
            self._rules.clear()
        else:
            self._rules.pop(identity, None)

    def route(self, assignment: AssignmentRecord, world: WorldState) -> Optional[int]:
        """
        Target node for a repeat visit, or None to keep the default start.

        First visits (interaction_count == 0) are never routed.
        """
        if assignment.interaction_count <= 0:
            return None

        for rule in self._rules.get(assignment.identity, []):
            if rule.predicate(world, assignment):
                logger.debug(
                    "Repeat visit to %s routed to node %d", assignment.identity, rule.target_node
                )
                return rule.target_node

        return None
