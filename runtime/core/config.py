"""
Runtime configuration for conversations.
"""

from __future__ import annotations


class DialogueConfig:
    """Configuration for the conversation runtime."""

    def __init__(
        self,
        reveal_char_delay: float = 0.02,
        fixed_timestep: float = 1 / 60,
        max_frame_skip: int = 5,
        max_frame_time: float = 0.25,
        line_delimiter: str = "<br>",
        name_token: str = "[NAME]",
    ):
        if reveal_char_delay <= 0:
            raise ValueError("reveal_char_delay must be positive")
        if fixed_timestep <= 0:
            raise ValueError("fixed_timestep must be positive")

        self.reveal_char_delay = reveal_char_delay
        self.fixed_timestep = fixed_timestep
        self.max_frame_skip = max_frame_skip
        self.max_frame_time = max_frame_time
        self.line_delimiter = line_delimiter
        self.name_token = name_token

    def __repr__(self) -> str:
        return (
            f"DialogueConfig(reveal_char_delay={self.reveal_char_delay}, "
            f"fixed_timestep={self.fixed_timestep:.4f})"
        )
