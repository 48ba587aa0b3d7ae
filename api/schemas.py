"""Pydantic schemas for the session trainer HTTP surface."""
from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class OpenReq(BaseModel):
    course_id: int
    assignment_id: int


class CaseReq(BaseModel):
    expertise: str


class MessageReq(BaseModel):
    content: str


class CompleteReq(BaseModel):
    mentor_notes: str = ""
    session_summary: str = ""


class MessageView(BaseModel):
    id: str
    sender: Literal["mentor", "mentee"]
    content: str
    timestamp: datetime
    stage_id: Optional[str] = None
    status: Literal["final", "pending", "failed"] = "final"


class StageView(BaseModel):
    index: int
    id: str
    title: str
    description: str
    key_questions: List[str] = Field(default_factory=list)


class SessionView(BaseModel):
    session_id: str
    course_id: int
    assignment_id: int
    phase: str
    stage: StageView
    total_stages: int
    messages: List[MessageView] = Field(default_factory=list)
    case_generated: bool = False
    session_started: bool = False
    busy: bool = False
    event_log: List[Dict] = Field(default_factory=list)


class CompleteResp(BaseModel):
    session: SessionView
    ui_message: str
    submission: Dict
    record: Dict


class CloseResp(BaseModel):
    closed: bool
