"""Submission contract and assembly of the final session record."""
from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from .errors import StateError
from .stages import TOTAL_STAGES
from .types import ConversationState, Message

SubmissionKind = Literal["analysis", "question_answer", "ai_trainer", "ai_session_trainer"]


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def wire(self) -> Dict[str, Any]:
        """camelCase request body, without the local ``kind`` tag."""

        return self.model_dump(mode="json", by_alias=True, exclude={"kind"})


class AnswerEntry(_WireModel):  # Answer to one assignment question
    question_id: str
    answer: Union[str, int, float, List[str]]


class AnalysisSubmission(_WireModel):
    kind: Literal["analysis"] = "analysis"
    answers: List[AnswerEntry] = Field(default_factory=list)


class QuestionAnswerSubmission(_WireModel):
    kind: Literal["question_answer"] = "question_answer"
    answers: List[AnswerEntry] = Field(default_factory=list)


class AITrainerSubmission(_WireModel):
    kind: Literal["ai_trainer"] = "ai_trainer"
    chat_messages: List[Message] = Field(default_factory=list)
    completed_tasks: List[str] = Field(default_factory=list)


class AISessionTrainerSubmission(_WireModel):
    """Final record of a coaching rehearsal."""

    kind: Literal["ai_session_trainer"] = "ai_session_trainer"
    conversation_data: List[Message]
    session_summary: str = ""
    mentor_notes: str = ""
    expertise: str = ""
    completed_stages: int = Field(ge=1, le=TOTAL_STAGES)
    total_stages: int = TOTAL_STAGES


Submission = Annotated[
    Union[AnalysisSubmission, QuestionAnswerSubmission, AITrainerSubmission, AISessionTrainerSubmission],
    Field(discriminator="kind"),
]

SUBMISSION_ADAPTER: TypeAdapter[Submission] = TypeAdapter(Submission)


class SubmissionRecord(BaseModel):  # Persisted submission as returned by the backend
    id: Optional[int] = None
    assignment_id: Optional[int] = None
    user_id: Optional[int] = None
    status: str = "submitted"
    submitted_at: Optional[datetime] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


def build(
    state: ConversationState,
    mentor_notes: str,
    *,
    expertise: str = "",
    session_summary: str = "",
) -> AISessionTrainerSubmission:
    """Package the finished conversation; no I/O."""

    if not state.session_started:
        raise StateError("cannot build a submission before the session has started")
    return AISessionTrainerSubmission(
        conversation_data=[message.model_copy(deep=True) for message in state.messages],
        session_summary=session_summary,
        mentor_notes=mentor_notes,
        expertise=expertise,
        completed_stages=state.current_stage_index + 1,
        total_stages=TOTAL_STAGES,
    )


__all__ = [
    "SubmissionKind",
    "AnswerEntry",
    "AnalysisSubmission",
    "QuestionAnswerSubmission",
    "AITrainerSubmission",
    "AISessionTrainerSubmission",
    "Submission",
    "SUBMISSION_ADAPTER",
    "SubmissionRecord",
    "build",
]
