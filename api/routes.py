"""FastAPI routes for driving a coaching rehearsal session."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from fastapi import APIRouter, HTTPException

from api.schemas import (
    CaseReq,
    CloseResp,
    CompleteReq,
    CompleteResp,
    MessageReq,
    MessageView,
    OpenReq,
    SessionView,
    StageView,
)
from backend_gateway import AssignmentClient
from config.registry import CLIENT_KEY, get_model
from services.sessions import close_session, load_session, new_session
from session_trainer import (
    AssignmentRef,
    ServiceError,
    SessionSnapshot,
    StateError,
    TOTAL_STAGES,
    TrainerClient,
    TrainerSession,
    ValidationError,
)
from session_trainer.persona import apply_persona


router = APIRouter(prefix="/api/session-trainer/sessions")


def _client() -> TrainerClient:
    try:
        factory = get_model(CLIENT_KEY)
    except KeyError:
        return AssignmentClient()
    return factory()


def _session_or_404(session_id: str) -> TrainerSession:
    session = load_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="session not found")
    return session


@contextmanager
def _translate_errors() -> Iterator[None]:
    try:
        yield
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except StateError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except ServiceError as exc:
        raise HTTPException(status_code=502, detail=exc.message) from exc


def _view(snap: SessionSnapshot) -> SessionView:
    stage = snap.stage
    return SessionView(
        session_id=snap.session_id,
        course_id=snap.ref.course_id,
        assignment_id=snap.ref.assignment_id,
        phase=snap.phase,
        stage=StageView(
            index=stage.index,
            id=stage.id,
            title=stage.title,
            description=stage.description,
            key_questions=list(stage.key_questions),
        ),
        total_stages=TOTAL_STAGES,
        messages=[
            MessageView(
                id=message.id,
                sender=message.sender,
                content=message.content,
                timestamp=message.timestamp,
                stage_id=message.stage_id,
                status=message.status,
            )
            for message in snap.state.messages
        ],
        case_generated=snap.state.case_generated,
        session_started=snap.state.session_started,
        busy=snap.busy,
        event_log=snap.events,
    )


@router.post("", response_model=SessionView)
def open_session(req: OpenReq) -> SessionView:
    session = new_session(AssignmentRef(course_id=req.course_id, assignment_id=req.assignment_id), _client())
    return _view(session.snapshot())


@router.get("/{session_id}", response_model=SessionView)
def get_session(session_id: str) -> SessionView:
    return _view(_session_or_404(session_id).snapshot())


@router.post("/{session_id}/case", response_model=SessionView)
def generate_case(session_id: str, req: CaseReq) -> SessionView:
    session = _session_or_404(session_id)
    with _translate_errors():
        session.start(req.expertise)
    return _view(session.snapshot())


@router.post("/{session_id}/messages", response_model=SessionView)
def send_message(session_id: str, req: MessageReq) -> SessionView:
    session = _session_or_404(session_id)
    with _translate_errors():
        session.send_message(req.content)
    return _view(session.snapshot())


@router.post("/{session_id}/complete", response_model=CompleteResp)
def complete(session_id: str, req: CompleteReq) -> CompleteResp:
    session = _session_or_404(session_id)
    with _translate_errors():
        record = session.complete(req.mentor_notes, req.session_summary)
    snap = session.snapshot()
    if snap.submission is None:
        raise HTTPException(status_code=409, detail="session was reset while submitting")
    submission = snap.submission.wire()
    return CompleteResp(
        session=_view(snap),
        ui_message=apply_persona(
            "Your session was sent for review.",
            persona=session.persona,
            purpose="session_complete",
        ),
        submission=submission,
        record=record.model_dump(mode="json", by_alias=True),
    )


@router.post("/{session_id}/reset", response_model=SessionView)
def reset(session_id: str) -> SessionView:
    session = _session_or_404(session_id)
    with _translate_errors():
        session.reset()
    return _view(session.snapshot())


@router.delete("/{session_id}", response_model=CloseResp)
def close(session_id: str) -> CloseResp:
    if not close_session(session_id):
        raise HTTPException(status_code=404, detail="session not found")
    return CloseResp(closed=True)
