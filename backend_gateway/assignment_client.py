from __future__ import annotations  # Assignment endpoints used by the session trainer

import logging
from typing import Any, Callable, Dict, Optional, Sequence

from pydantic import BaseModel
from pydantic import ValidationError as SchemaError

from config import BackendRoute, route_from_settings
from session_trainer.errors import ServiceError
from session_trainer.submission import Submission, SubmissionRecord
from session_trainer.types import AssignmentRef, Message

from .backend_gateway import HttpClient, post_json

logger = logging.getLogger(__name__)


class GenerationReply(BaseModel):  # Reply shape of the case and chat endpoints
    response: str


def _session_trainer_path(ref: AssignmentRef, action: str) -> str:
    return f"/courses/{ref.course_id}/assignments/{ref.assignment_id}/ai-session-trainer-{action}"


# Submit endpoint per submission kind.
SUBMIT_PATHS: Dict[str, Callable[[AssignmentRef], str]] = {
    "analysis": lambda ref: f"/analysis-assignments/{ref.assignment_id}/submit",
    "question_answer": lambda ref: f"/course-assignments/{ref.assignment_id}/submit",
    "ai_trainer": lambda ref: f"/course-assignments/ai-trainer/{ref.assignment_id}/submit",
    "ai_session_trainer": lambda ref: _session_trainer_path(ref, "submit"),
}


class AssignmentClient:  # HTTP implementation of the trainer client protocol
    def __init__(self, route: Optional[BackendRoute] = None, *, client: Optional[HttpClient] = None) -> None:
        self._route = route or route_from_settings()
        self._client = client

    def generate_case(self, ref: AssignmentRef, expertise: str) -> str:
        data = post_json(
            _session_trainer_path(ref, "generate-case"),
            {"expertise": expertise},
            route=self._route,
            client=self._client,
        )
        return _reply_text(data)

    def chat(self, ref: AssignmentRef, message: str, history: Sequence[Message]) -> str:
        data = post_json(
            _session_trainer_path(ref, "chat"),
            {"message": message, "conversationHistory": [item.wire() for item in history]},
            route=self._route,
            client=self._client,
        )
        return _reply_text(data)

    def submit(self, ref: AssignmentRef, submission: Submission) -> SubmissionRecord:
        path = SUBMIT_PATHS[submission.kind](ref)
        data = post_json(path, submission.wire(), route=self._route, client=self._client)
        try:
            return SubmissionRecord.model_validate(data if isinstance(data, dict) else {})
        except SchemaError as exc:
            logger.error("Unexpected submission record: %s", exc)
            raise ServiceError("backend returned an invalid submission record") from exc


def _reply_text(data: Any) -> str:  # Validate `{response}` replies
    try:
        return GenerationReply.model_validate(data).response
    except SchemaError as exc:
        logger.error("Generation reply missing response: %s", exc)
        raise ServiceError("generation reply missing response field") from exc


__all__ = ["AssignmentClient", "GenerationReply", "SUBMIT_PATHS"]
