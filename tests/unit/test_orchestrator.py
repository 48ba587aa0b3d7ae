import pytest

from conftest import REF
from session_trainer.errors import ServiceError, StateError, ValidationError
from session_trainer.orchestrator import ConversationOrchestrator
from session_trainer.types import ConversationState, Message


def _started_state() -> ConversationState:
    state = ConversationState(case_generated=True, session_started=True)
    state.append(Message(id="case-1", sender="mentee", content="My case", stage_id="clarify_goal"))
    return state


def test_exchange_appends_mentor_then_resolved_reply(fake_client):
    fake_client.replies = ["I want a clearer roadmap."]
    orchestrator = ConversationOrchestrator(fake_client, REF)
    state = _started_state()

    orchestrator.send_message(state, "What would you like to get out of today?")

    assert [message.sender for message in state.messages] == ["mentee", "mentor", "mentee"]
    assert state.messages[1].content == "What would you like to get out of today?"
    assert state.messages[1].stage_id == "clarify_goal"
    assert state.messages[2].content == "I want a clearer roadmap."
    assert state.messages[2].status == "final"


def test_request_carries_prior_history_and_latest_content(fake_client):
    orchestrator = ConversationOrchestrator(fake_client, REF)
    state = _started_state()
    orchestrator.send_message(state, "First question")
    orchestrator.send_message(state, "Second question")

    message, history = fake_client.chat_calls[1]
    assert message == "Second question"
    assert [item.id for item in history] == [item.id for item in state.messages[:3]]


def test_placeholder_visible_while_request_is_pending(fake_client):
    seen = []

    def on_pending(state):
        seen.append((state.messages[-1].content, state.messages[-1].status, len(fake_client.chat_calls)))

    orchestrator = ConversationOrchestrator(fake_client, REF)
    orchestrator.send_message(_started_state(), "Hello", on_pending=on_pending)
    assert seen == [("", "pending", 0)]


@pytest.mark.parametrize("content", ["", "   "])
def test_empty_message_rejected_without_side_effects(fake_client, content):
    orchestrator = ConversationOrchestrator(fake_client, REF)
    state = _started_state()
    with pytest.raises(ValidationError):
        orchestrator.send_message(state, content)
    assert len(state.messages) == 1
    assert fake_client.chat_calls == []


def test_overlong_message_rejected(fake_client):
    orchestrator = ConversationOrchestrator(fake_client, REF, max_message_chars=10)
    with pytest.raises(ValidationError):
        orchestrator.send_message(_started_state(), "x" * 11)
    assert fake_client.chat_calls == []


def test_requires_started_session(fake_client):
    orchestrator = ConversationOrchestrator(fake_client, REF)
    with pytest.raises(StateError):
        orchestrator.send_message(ConversationState(), "Hello")
    assert fake_client.chat_calls == []


def test_failure_keeps_mentor_message_and_failed_placeholder(fake_client):
    fake_client.fail_chat = ServiceError("boom", status_code=500)
    orchestrator = ConversationOrchestrator(fake_client, REF)
    state = _started_state()

    with pytest.raises(ServiceError):
        orchestrator.send_message(state, "Hello")

    assert len(state.messages) == 3
    assert state.messages[1].content == "Hello"
    assert state.messages[2].content == ""
    assert state.messages[2].status == "failed"
    assert state.current_stage_index == 0


def test_stale_reply_is_not_applied(fake_client):
    orchestrator = ConversationOrchestrator(fake_client, REF)
    state = ConversationState(session_started=True)
    for index in range(8):
        state.append(Message(id=f"m{index}", sender="mentor" if index % 2 else "mentee", content="x"))

    orchestrator.send_message(state, "Hello", still_current=lambda: False)

    assert state.messages[-1].status == "pending"
    assert state.messages[-1].content == ""
    assert state.current_stage_index == 0


def test_stage_advances_from_history_length(fake_client):
    orchestrator = ConversationOrchestrator(fake_client, REF)
    state = _started_state()
    stages = []
    for turn in range(6):
        orchestrator.send_message(state, f"question {turn}")
        stages.append(state.current_stage_index)
    assert stages == [0, 0, 1, 1, 2, 2]
