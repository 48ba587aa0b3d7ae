"""Observability utilities for the session trainer."""
from .logger import log_event
from .tracing import span

__all__ = ["log_event", "span"]
