"""Error taxonomy shared by the session trainer core and its collaborators."""
from __future__ import annotations

from typing import Optional


class TrainerError(RuntimeError):  # Base session trainer error
    pass


class ValidationError(TrainerError):
    """Malformed or missing input, rejected before any network call."""


class ServiceError(TrainerError):
    """A remote call failed (transport failure or non-2xx response)."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class StateError(TrainerError):
    """An operation was attempted out of order."""


class BusyError(StateError):  # Another request is outstanding for the session
    pass


__all__ = ["TrainerError", "ValidationError", "ServiceError", "StateError", "BusyError"]
