"""
Component base class for data-only records.

Conversation state, authored nodes and per-character metadata are all
plain data. Logic lives in the engine, dispatcher and adapter that
operate on them.

Usage:
    class Mood(Component):
        level: int = 0
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Component(BaseModel):
    """
    Base class for all data records.

    Pydantic gives us:
    - Validation on construction and on assignment
    - Cheap wholesale copies (model_copy) for snapshot replacement
    - Type hints and default values
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        validate_assignment=True,
        extra='forbid',
    )

    @classmethod
    def get_type_name(cls) -> str:
        """Name used in logs and debug dumps."""
        return cls.__name__

    def clone(self) -> Component:
        """Create a deep copy of this component."""
        return self.model_copy(deep=True)
