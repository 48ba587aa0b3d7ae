"""Shared data model for the session trainer."""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr
from pydantic.alias_generators import to_camel

from .errors import StateError
from .stages import LAST_STAGE_INDEX, StageId

Sender = Literal["mentor", "mentee"]
MessageStatus = Literal["final", "pending", "failed"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_message_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex}"


class Message(BaseModel):  # Single entry of the conversation log
    id: str
    sender: Sender
    content: str = ""
    timestamp: datetime = Field(default_factory=_utcnow)
    stage_id: Optional[StageId] = None
    status: MessageStatus = Field(default="final", exclude=True)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def wire(self) -> Dict[str, Any]:
        """camelCase JSON shape used by the backend."""

        return self.model_dump(mode="json", by_alias=True)


class SessionCase(BaseModel):  # Generated coaching scenario, fixed for the session
    expertise_text: str
    generated_scenario: str

    model_config = ConfigDict(frozen=True)


class AssignmentRef(BaseModel):  # Course assignment a session belongs to
    course_id: int
    assignment_id: int

    model_config = ConfigDict(frozen=True)


class ConversationState(BaseModel):
    """Ordered message log plus stage progress of one session.

    The log is append-only. The only permitted edit is resolving a pending
    placeholder, once, addressed by message id.
    """

    messages: List[Message] = Field(default_factory=list)
    current_stage_index: int = Field(default=0, ge=0, le=LAST_STAGE_INDEX)
    case_generated: bool = False
    session_started: bool = False

    model_config = ConfigDict(validate_assignment=True)

    _index: Dict[str, int] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        self._index = {message.id: pos for pos, message in enumerate(self.messages)}

    def append(self, message: Message) -> Message:
        if message.id in self._index:
            raise StateError(f"duplicate message id: {message.id}")
        self._index[message.id] = len(self.messages)
        self.messages.append(message)
        return message

    def get(self, message_id: str) -> Message:
        pos = self._index.get(message_id)
        if pos is None:
            raise StateError(f"unknown message id: {message_id}")
        return self.messages[pos]

    def resolve_placeholder(self, message_id: str, content: str) -> Message:
        message = self.get(message_id)
        if message.status != "pending":
            raise StateError(f"message {message_id} is not a pending placeholder")
        resolved = message.model_copy(update={"content": content, "status": "final"})
        self.messages[self._index[message_id]] = resolved
        return resolved

    def mark_failed(self, message_id: str) -> Message:
        message = self.get(message_id)
        if message.status != "pending":
            raise StateError(f"message {message_id} is not a pending placeholder")
        failed = message.model_copy(update={"status": "failed"})
        self.messages[self._index[message_id]] = failed
        return failed

    def advance_to(self, stage_index: int) -> None:
        if stage_index < self.current_stage_index:
            raise StateError("stage index cannot decrease")
        if stage_index > LAST_STAGE_INDEX:
            raise StateError(f"stage index beyond last stage: {stage_index}")
        self.current_stage_index = stage_index

    def history(self) -> List[Message]:
        """Resolved messages, in order; pending and failed placeholders are left out."""

        return [message for message in self.messages if message.status == "final"]


__all__ = [
    "Sender",
    "MessageStatus",
    "Message",
    "SessionCase",
    "AssignmentRef",
    "ConversationState",
    "new_message_id",
]
