import pytest
from pydantic import ValidationError as SchemaError

from session_trainer.errors import StateError
from session_trainer.submission import (
    SUBMISSION_ADAPTER,
    AISessionTrainerSubmission,
    AITrainerSubmission,
    AnalysisSubmission,
    QuestionAnswerSubmission,
    SubmissionRecord,
    build,
)
from session_trainer.types import ConversationState, Message


def _state(stage: int = 1) -> ConversationState:
    state = ConversationState(case_generated=True, session_started=True)
    state.append(Message(id="case-1", sender="mentee", content="case", stage_id="clarify_goal"))
    state.append(Message(id="mentor-1", sender="mentor", content="hi", stage_id="clarify_goal"))
    state.advance_to(stage)
    return state


def test_build_requires_started_session():
    with pytest.raises(StateError):
        build(ConversationState(), "notes")


def test_completed_stages_follow_current_stage():
    submission = build(_state(1), "good session")
    assert submission.completed_stages == 2
    assert submission.total_stages == 3
    assert submission.mentor_notes == "good session"
    assert submission.kind == "ai_session_trainer"


@pytest.mark.parametrize("stage", [0, 1, 2])
def test_completed_stages_for_every_stage(stage):
    assert build(_state(stage), "").completed_stages == stage + 1


def test_submission_is_detached_and_frozen():
    state = _state(0)
    submission = build(state, "notes", expertise="product management", session_summary="summary")
    state.append(Message(id="mentor-2", sender="mentor", content="later"))

    assert len(submission.conversation_data) == 2
    with pytest.raises(SchemaError):
        submission.mentor_notes = "changed"


def test_wire_body_matches_backend_contract():
    body = build(_state(2), "notes", expertise="sales", session_summary="ok").wire()
    assert set(body) == {
        "conversationData",
        "sessionSummary",
        "mentorNotes",
        "expertise",
        "completedStages",
        "totalStages",
    }
    assert body["completedStages"] == 3
    assert body["conversationData"][0]["stageId"] == "clarify_goal"
    assert "status" not in body["conversationData"][0]


def test_tagged_union_dispatches_on_kind():
    parsed = SUBMISSION_ADAPTER.validate_python(
        {"kind": "question_answer", "answers": [{"questionId": "q1", "answer": "B"}]}
    )
    assert isinstance(parsed, QuestionAnswerSubmission)
    assert parsed.answers[0].question_id == "q1"

    assert isinstance(SUBMISSION_ADAPTER.validate_python({"kind": "analysis"}), AnalysisSubmission)
    assert isinstance(SUBMISSION_ADAPTER.validate_python({"kind": "ai_trainer"}), AITrainerSubmission)

    with pytest.raises(SchemaError):
        SUBMISSION_ADAPTER.validate_python({"kind": "essay"})


def test_session_trainer_submission_rejects_out_of_range_stage_count():
    with pytest.raises(SchemaError):
        AISessionTrainerSubmission(conversation_data=[], completed_stages=4)


def test_record_keeps_unknown_backend_fields():
    record = SubmissionRecord.model_validate(
        {"id": 5, "assignmentId": 42, "userId": 3, "status": "submitted", "score": None}
    )
    assert record.assignment_id == 42
    assert record.model_dump(by_alias=True)["score"] is None
