"""Span helper for timing remote calls made on behalf of a session."""
from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Iterator


@contextmanager
def span(owner, name: str) -> Iterator[None]:
    # Bound at entry; a span outliving a reset lands in the discarded log.
    events = owner.events
    start = time.time()
    outcome = "ok"
    try:
        yield
    except Exception:
        outcome = "error"
        raise
    finally:
        elapsed_ms = int((time.time() - start) * 1000)
        events.append({"span": name, "ms": elapsed_ms, "outcome": outcome})


__all__ = ["span"]
