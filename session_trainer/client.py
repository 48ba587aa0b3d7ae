"""Interface the core expects from the backend collaborator."""
from __future__ import annotations

from typing import Protocol, Sequence

from .submission import Submission, SubmissionRecord
from .types import AssignmentRef, Message


class TrainerClient(Protocol):  # Generation and submission endpoints for one backend
    def generate_case(self, ref: AssignmentRef, expertise: str) -> str: ...

    def chat(self, ref: AssignmentRef, message: str, history: Sequence[Message]) -> str: ...

    def submit(self, ref: AssignmentRef, submission: Submission) -> SubmissionRecord: ...


__all__ = ["TrainerClient"]
