"""Turns a mentor's expertise description into a coaching scenario."""
from __future__ import annotations

import logging

from .client import TrainerClient
from .errors import ServiceError, ValidationError
from .types import AssignmentRef

logger = logging.getLogger(__name__)


class SessionCaseGenerator:
    """Requests one generated scenario per call; never touches session state."""

    def __init__(self, client: TrainerClient, ref: AssignmentRef) -> None:
        self._client = client
        self._ref = ref

    def generate_case(self, expertise_text: str) -> str:
        expertise = (expertise_text or "").strip()
        if not expertise:
            raise ValidationError("expertise must not be empty")
        logger.info(
            "Case request course=%s assignment=%s expertise=%s",
            self._ref.course_id,
            self._ref.assignment_id,
            expertise[:80],
        )
        scenario = self._client.generate_case(self._ref, expertise)
        if not isinstance(scenario, str) or not scenario.strip():
            raise ServiceError("generation service returned an empty case")
        return scenario


__all__ = ["SessionCaseGenerator"]
