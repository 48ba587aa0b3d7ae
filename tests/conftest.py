import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config.registry import CLIENT_KEY, bind_model, unbind_model
from services.sessions import clear_sessions
from session_trainer import AssignmentRef, Message, ServiceError, SubmissionRecord

REF = AssignmentRef(course_id=7, assignment_id=42)

CASE_TEXT = (
    "I am a junior product manager on a payments team. "
    "Our roadmap keeps slipping and I am not sure what to prioritise. "
    "Today I want to understand how to talk to my lead about it."
)


class FakeTrainerClient:
    """In-memory stand-in for the backend generation and submission endpoints."""

    def __init__(self, case_text: str = CASE_TEXT, replies: Optional[List[str]] = None) -> None:
        self.case_text = case_text
        self.replies = list(replies or [])
        self.case_calls: List[str] = []
        self.chat_calls: List[Tuple[str, List[Message]]] = []
        self.submissions: List[Any] = []
        self.fail_case: Optional[ServiceError] = None
        self.fail_chat: Optional[ServiceError] = None
        self.fail_submit: Optional[ServiceError] = None
        self.on_case: Optional[Callable[[], None]] = None
        self.on_chat: Optional[Callable[[], None]] = None
        self.on_submit: Optional[Callable[[], None]] = None

    def generate_case(self, ref: AssignmentRef, expertise: str) -> str:
        self.case_calls.append(expertise)
        if self.on_case is not None:
            self.on_case()
        if self.fail_case is not None:
            raise self.fail_case
        return self.case_text

    def chat(self, ref: AssignmentRef, message: str, history) -> str:
        self.chat_calls.append((message, [item.model_copy(deep=True) for item in history]))
        if self.on_chat is not None:
            self.on_chat()
        if self.fail_chat is not None:
            raise self.fail_chat
        if self.replies:
            return self.replies.pop(0)
        return f"Mentee reply #{len(self.chat_calls)}"

    def submit(self, ref: AssignmentRef, submission) -> SubmissionRecord:
        self.submissions.append(submission)
        if self.on_submit is not None:
            self.on_submit()
        if self.fail_submit is not None:
            raise self.fail_submit
        return SubmissionRecord(id=len(self.submissions), assignment_id=ref.assignment_id, status="submitted")


class FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None, *, invalid_json: bool = False) -> None:
        self.status_code = status_code
        self._body = body
        self._invalid_json = invalid_json

    def json(self) -> Any:
        if self._invalid_json:
            raise ValueError("not json")
        return self._body

    @property
    def text(self) -> str:
        return "" if self._body is None else str(self._body)


class FakeHttpClient:
    """Records POSTs and answers with queued responses."""

    def __init__(self, *responses: FakeResponse, error: Optional[Exception] = None) -> None:
        self.responses = list(responses)
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def post(self, url: str, *, json: Dict[str, Any], headers: Dict[str, str], timeout: float) -> FakeResponse:
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)


@pytest.fixture(autouse=True)
def clean_registry():
    try:
        yield
    finally:
        clear_sessions()
        unbind_model(CLIENT_KEY)


@pytest.fixture
def fake_client() -> FakeTrainerClient:
    return FakeTrainerClient()


@pytest.fixture
def bound_client(fake_client: FakeTrainerClient) -> FakeTrainerClient:
    bind_model(CLIENT_KEY, lambda: fake_client)
    return fake_client
