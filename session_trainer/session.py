"""Session object owning one rehearsal's state and lifecycle."""
from __future__ import annotations

import logging
import threading
import uuid
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Literal, Optional

from pydantic import BaseModel, Field

from observability import log_event, span

from .case_generator import SessionCaseGenerator
from .client import TrainerClient
from .errors import BusyError, ServiceError, StateError
from .orchestrator import DEFAULT_MAX_MESSAGE_CHARS, ConversationOrchestrator
from .persona import Persona, apply_persona
from .stages import StageInfo, stage_at
from .submission import AISessionTrainerSubmission, SubmissionRecord, build
from .types import AssignmentRef, ConversationState, Message, SessionCase, new_message_id

logger = logging.getLogger(__name__)

Phase = Literal["NOT_STARTED", "CASE_GENERATING", "ACTIVE", "COMPLETED"]


class SessionSnapshot(BaseModel):  # Detached copy handed to observers and the HTTP layer
    session_id: str
    ref: AssignmentRef
    phase: Phase
    generation: int
    busy: bool
    closed: bool
    state: ConversationState
    case: Optional[SessionCase] = None
    submission: Optional[AISessionTrainerSubmission] = None
    record: Optional[SubmissionRecord] = None
    events: List[Dict[str, Any]] = Field(default_factory=list)

    @property
    def stage(self) -> StageInfo:
        return stage_at(self.state.current_stage_index)


Observer = Callable[[SessionSnapshot], None]


class TrainerSession:
    """One mentor rehearsal: case generation, exchanges, completion.

    Phases run NOT_STARTED -> CASE_GENERATING -> ACTIVE -> COMPLETED and
    ``reset`` returns to NOT_STARTED from anywhere. Only one remote request
    may be outstanding at a time; a second caller gets ``BusyError``.
    Every reset or close bumps ``generation`` so replies that arrive for an
    older generation are dropped instead of landing in the fresh state.
    """

    def __init__(
        self,
        client: TrainerClient,
        ref: AssignmentRef,
        *,
        session_id: Optional[str] = None,
        persona: Persona = "Open Mentee",
        mentee_name: str = "Alex",
        max_message_chars: int = DEFAULT_MAX_MESSAGE_CHARS,
    ) -> None:
        self.session_id = session_id or str(uuid.uuid4())
        self.ref = ref
        self.persona = persona
        self.mentee_name = mentee_name
        self._client = client
        self._generator = SessionCaseGenerator(client, ref)
        self._orchestrator = ConversationOrchestrator(client, ref, max_message_chars=max_message_chars)
        self._guard = threading.Lock()
        # Held by reset/close and by each post-call currency check plus commit.
        self._commit_lock = threading.Lock()
        self._observers: List[Observer] = []
        self._generation = 0
        self._closed = False
        self.events: List[Dict[str, Any]] = []
        self._init_state()
        log_event("session_open", self.session_id, course_id=ref.course_id, assignment_id=ref.assignment_id)

    def _init_state(self) -> None:
        self._state = ConversationState()
        self._phase: Phase = "NOT_STARTED"
        self._case: Optional[SessionCase] = None
        self._submission: Optional[AISessionTrainerSubmission] = None
        self._record: Optional[SubmissionRecord] = None

    # -- read side -----------------------------------------------------------

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def busy(self) -> bool:
        return self._guard.locked()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def state(self) -> ConversationState:
        return self._state.model_copy(deep=True)

    @property
    def case(self) -> Optional[SessionCase]:
        return self._case

    @property
    def stage(self) -> StageInfo:
        return stage_at(self._state.current_stage_index)

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            session_id=self.session_id,
            ref=self.ref,
            phase=self._phase,
            generation=self._generation,
            busy=self.busy,
            closed=self._closed,
            state=self._state.model_copy(deep=True),
            case=self._case,
            submission=self._submission,
            record=self._record,
            events=list(self.events),
        )

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register ``observer`` for snapshots after each change; returns an unsubscribe callable."""

        self._observers.append(observer)

        def _unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return _unsubscribe

    def _notify(self) -> None:
        if not self._observers:
            return
        snap = self.snapshot()
        for observer in list(self._observers):
            observer(snap)

    # -- guards --------------------------------------------------------------

    def _ensure_open(self) -> None:
        if self._closed:
            raise StateError("session is closed")

    @contextmanager
    def _exclusive(self, operation: str) -> Iterator[int]:
        if not self._guard.acquire(blocking=False):
            raise BusyError(f"a request is already in flight; cannot {operation}")
        try:
            yield self._generation
        finally:
            self._guard.release()

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation and not self._closed

    # -- transitions ---------------------------------------------------------

    def start(self, expertise_text: str) -> ConversationState:
        """Generate the case and open stage 0 with the mentee's first message."""

        self._ensure_open()
        if self._phase != "NOT_STARTED":
            raise StateError(f"cannot generate a case in phase {self._phase}")
        with self._exclusive("generate a case") as generation:
            with self._commit_lock:
                if not self._is_current(generation):
                    return self.state
                state = self._state
                self._phase = "CASE_GENERATING"
            self._notify()
            try:
                with span(self, "generate_case"):
                    scenario = self._generator.generate_case(expertise_text)
            except Exception as exc:
                with self._commit_lock:
                    reverted = self._is_current(generation)
                    if reverted:
                        self._phase = "NOT_STARTED"
                log_event("case_failed", self.session_id, level=logging.WARNING, error=str(exc))
                if reverted:
                    self._notify()
                raise

            case = SessionCase(expertise_text=expertise_text.strip(), generated_scenario=scenario)
            opening = Message(
                id=new_message_id("case"),
                sender="mentee",
                content=apply_persona(
                    scenario,
                    persona=self.persona,
                    purpose="case_intro",
                    name=self.mentee_name,
                ),
                stage_id=stage_at(0).id,
            )
            with self._commit_lock:
                current = self._is_current(generation)
                if current:
                    state.append(opening)
                    state.case_generated = True
                    state.session_started = True
                    self._case = case
                    self._phase = "ACTIVE"
            if not current:
                log_event("stale_response", self.session_id, generation=generation, operation="generate_case")
                return self.state

            log_event("case_generated", self.session_id, phase="ACTIVE", stage=stage_at(0).id)
            self._notify()
            return self.state

    def send_message(self, content: str) -> ConversationState:
        """Run one mentor/mentee exchange."""

        self._ensure_open()
        if self._phase == "COMPLETED":
            raise StateError("session is already completed")
        if self._phase != "ACTIVE":
            raise StateError("session has not started")
        with self._exclusive("send a message") as generation:
            state = self._state
            before = state.current_stage_index
            try:
                with span(self, "chat"):
                    self._orchestrator.send_message(
                        state,
                        content,
                        still_current=lambda: self._is_current(generation),
                        on_pending=lambda _state: self._notify(),
                    )
            except ServiceError as exc:
                if self._is_current(generation):
                    log_event(
                        "message_failed",
                        self.session_id,
                        level=logging.WARNING,
                        messages=len(state.messages),
                        status=exc.status_code,
                        error=exc.message,
                    )
                    self._notify()
                raise

            if not self._is_current(generation):
                log_event("stale_response", self.session_id, generation=generation, operation="chat")
                return self.state

            log_event("message_sent", self.session_id, messages=len(state.messages), stage=self.stage.id)
            if state.current_stage_index != before:
                log_event(
                    "stage_advanced",
                    self.session_id,
                    from_stage=stage_at(before).id,
                    to_stage=self.stage.id,
                )
            self._notify()
            return self.state

    def complete(self, mentor_notes: str = "", session_summary: str = "") -> SubmissionRecord:
        """Assemble the submission and hand it to the backend."""

        self._ensure_open()
        if self._phase == "COMPLETED":
            raise StateError("session is already completed")
        with self._exclusive("complete the session") as generation:
            submission = build(
                self._state,
                mentor_notes,
                expertise=self._case.expertise_text if self._case else "",
                session_summary=session_summary,
            )
            try:
                with span(self, "submit"):
                    record = self._client.submit(self.ref, submission)
            except ServiceError as exc:
                log_event(
                    "submit_failed",
                    self.session_id,
                    level=logging.WARNING,
                    status=exc.status_code,
                    error=exc.message,
                )
                raise

            with self._commit_lock:
                current = self._is_current(generation)
                if current:
                    self._submission = submission
                    self._record = record
                    self._phase = "COMPLETED"
                    stage_id = self.stage.id
                    message_count = len(self._state.messages)
            if not current:
                log_event("stale_response", self.session_id, generation=generation, operation="submit")
                return record

            log_event(
                "session_completed",
                self.session_id,
                phase="COMPLETED",
                stage=stage_id,
                messages=message_count,
            )
            self._notify()
            return record

    def reset(self) -> ConversationState:
        """Return to NOT_STARTED with a fresh state; in-flight replies become stale."""

        self._ensure_open()
        with self._commit_lock:
            self._generation += 1
            self._init_state()
            self.events = []
            generation = self._generation
        log_event("session_reset", self.session_id, generation=generation)
        self._notify()
        return self.state

    def close(self) -> None:
        with self._commit_lock:
            if self._closed:
                return
            self._generation += 1
            self._closed = True
            self._observers.clear()
            generation = self._generation
        log_event("session_closed", self.session_id, generation=generation)


__all__ = ["Phase", "SessionSnapshot", "TrainerSession", "Observer"]
