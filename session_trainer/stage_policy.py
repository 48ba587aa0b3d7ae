"""Heuristic deciding when the conversation moves to the next stage."""
from __future__ import annotations

from .stages import LAST_STAGE_INDEX

MESSAGES_PER_STAGE = 4


def next_stage(total_message_count: int, current_stage_index: int) -> int:
    """Return the stage index that should follow an exchange.

    ``total_message_count`` is the length of the history sent with the
    exchange, counted before the new mentor message and reply are added.
    Stage ``n`` is left once that count reaches ``MESSAGES_PER_STAGE * (n + 1)``,
    one step per exchange and never past the last stage. With the opening
    case message present, sends one to five land in stages 0, 0, 1, 1, 2.
    """

    if total_message_count < 0:
        raise ValueError("total_message_count must be >= 0")
    if current_stage_index < 0 or current_stage_index > LAST_STAGE_INDEX:
        raise ValueError(f"current_stage_index out of range: {current_stage_index}")
    if current_stage_index >= LAST_STAGE_INDEX:
        return current_stage_index
    if total_message_count >= MESSAGES_PER_STAGE * (current_stage_index + 1):
        return current_stage_index + 1
    return current_stage_index


__all__ = ["MESSAGES_PER_STAGE", "next_stage"]
