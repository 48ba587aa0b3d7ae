"""Helpers for opening, looking up and closing trainer sessions."""
from __future__ import annotations

import threading
from typing import Dict, Optional

from config.settings import settings
from session_trainer import AssignmentRef, TrainerClient, TrainerSession

_SESSIONS: Dict[str, TrainerSession] = {}
_SESSIONS_GUARD = threading.Lock()


def new_session(ref: AssignmentRef, client: TrainerClient) -> TrainerSession:
    """Create and register a session with a generated identifier."""

    session = TrainerSession(
        client,
        ref,
        persona=settings.MENTEE_PERSONA,
        mentee_name=settings.MENTEE_NAME,
        max_message_chars=settings.MAX_MESSAGE_CHARS,
    )
    with _SESSIONS_GUARD:
        _SESSIONS[session.session_id] = session
    return session


def load_session(session_id: str) -> Optional[TrainerSession]:
    """Return the open session for ``session_id`` if present."""

    with _SESSIONS_GUARD:
        return _SESSIONS.get(session_id)


def close_session(session_id: str) -> bool:
    """Close and forget ``session_id``; late replies for it are discarded."""

    with _SESSIONS_GUARD:
        session = _SESSIONS.pop(session_id, None)
    if session is None:
        return False
    session.close()
    return True


def clear_sessions() -> None:
    with _SESSIONS_GUARD:
        sessions = list(_SESSIONS.values())
        _SESSIONS.clear()
    for session in sessions:
        session.close()
