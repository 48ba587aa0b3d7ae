"""Conversation loop between the mentor and the generated mentee."""
from __future__ import annotations

import logging
from typing import Callable, Optional

from .client import TrainerClient
from .errors import ServiceError, StateError, ValidationError
from .stage_policy import next_stage
from .stages import stage_at
from .types import AssignmentRef, ConversationState, Message, new_message_id

logger = logging.getLogger(__name__)

DEFAULT_MAX_MESSAGE_CHARS = 500


class ConversationOrchestrator:
    """Sends mentor messages and resolves the mentee placeholder in place.

    Each exchange appends a mentor message and a pending mentee placeholder,
    asks the generation service for a reply with the prior history, then
    resolves the placeholder by id. A failed exchange leaves both entries in
    the log with the placeholder marked ``failed``.
    """

    def __init__(
        self,
        client: TrainerClient,
        ref: AssignmentRef,
        *,
        max_message_chars: int = DEFAULT_MAX_MESSAGE_CHARS,
    ) -> None:
        self._client = client
        self._ref = ref
        self._max_message_chars = max_message_chars

    def send_message(
        self,
        state: ConversationState,
        content: str,
        *,
        still_current: Optional[Callable[[], bool]] = None,
        on_pending: Optional[Callable[[ConversationState], None]] = None,
    ) -> ConversationState:
        if not (content or "").strip():
            raise ValidationError("message must not be empty")
        if len(content) > self._max_message_chars:
            raise ValidationError(f"message exceeds {self._max_message_chars} characters")
        if not state.session_started:
            raise StateError("session has not started")

        stage = stage_at(state.current_stage_index)
        history = state.history()
        state.append(
            Message(id=new_message_id("mentor"), sender="mentor", content=content, stage_id=stage.id)
        )
        placeholder = state.append(
            Message(
                id=new_message_id("mentee"),
                sender="mentee",
                content="",
                stage_id=stage.id,
                status="pending",
            )
        )
        if on_pending is not None:
            on_pending(state)

        try:
            reply = self._client.chat(self._ref, content, history)
        except ServiceError:
            if still_current is None or still_current():
                state.mark_failed(placeholder.id)
            raise

        if still_current is not None and not still_current():
            logger.warning("Discarding stale reply for placeholder %s", placeholder.id)
            return state

        state.resolve_placeholder(placeholder.id, reply)
        advanced = next_stage(len(history), state.current_stage_index)
        if advanced != state.current_stage_index:
            logger.info(
                "Stage advance %s -> %s after %d messages",
                state.current_stage_index,
                advanced,
                len(history),
            )
            state.advance_to(advanced)
        return state


__all__ = ["ConversationOrchestrator", "DEFAULT_MAX_MESSAGE_CHARS"]
