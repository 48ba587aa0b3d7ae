"""Fixed catalog of pedagogical stages for a coaching session."""
from __future__ import annotations

from typing import List, Literal, Tuple

from pydantic import BaseModel, Field

StageId = Literal["clarify_goal", "solution_search", "wrap_up"]


class StageInfo(BaseModel):  # Static description of one stage
    id: StageId
    index: int
    title: str
    description: str
    goals: List[str] = Field(default_factory=list)
    key_questions: List[str] = Field(default_factory=list)

    model_config = {"frozen": True}


STAGES: Tuple[StageInfo, ...] = (
    StageInfo(
        id="clarify_goal",
        index=0,
        title="Clarify the goal",
        description="Turn the mentee's vague request into a concrete goal for today's meeting.",
        goals=["Understand the mentee's context", "Agree on a measurable goal for the session"],
        key_questions=[
            "What would you like to leave this meeting with?",
            "How will you know the problem is solved?",
        ],
    ),
    StageInfo(
        id="solution_search",
        index=1,
        title="Search for solutions",
        description="Help the mentee explore options and constraints without handing over a ready answer.",
        goals=["Surface options the mentee already sees", "Examine risks and constraints"],
        key_questions=[
            "What have you already tried?",
            "Which option would you test first and why?",
        ],
    ),
    StageInfo(
        id="wrap_up",
        index=2,
        title="Wrap up",
        description="Close the session with agreed next steps and a short reflection.",
        goals=["Fix concrete next steps", "Check what was valuable for the mentee"],
        key_questions=[
            "What is your first step after this meeting?",
            "What was most useful today?",
        ],
    ),
)

TOTAL_STAGES = len(STAGES)
LAST_STAGE_INDEX = TOTAL_STAGES - 1


def stage_at(index: int) -> StageInfo:
    """Return the stage at ``index``; raises IndexError outside ``0..LAST_STAGE_INDEX``."""

    if index < 0 or index > LAST_STAGE_INDEX:
        raise IndexError(f"stage index out of range: {index}")
    return STAGES[index]


__all__ = ["StageId", "StageInfo", "STAGES", "TOTAL_STAGES", "LAST_STAGE_INDEX", "stage_at"]
