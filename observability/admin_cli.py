"""Lightweight CLI helpers for inspecting the JSON session event log."""
from __future__ import annotations

import argparse
import json
from collections import deque
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from observability.logger import LOG_FILE


def read_events(path: Path, *, session_id: Optional[str] = None, kind: Optional[str] = None) -> Iterable[Dict[str, Any]]:
    if not path.exists():
        return
    with path.open("r", encoding="utf-8") as handle:
        for line in handle:
            line = line.strip()
            if not line:
                continue
            try:
                event = json.loads(line)
            except json.JSONDecodeError:
                continue
            if session_id and event.get("session_id") != session_id:
                continue
            if kind and event.get("kind") != kind:
                continue
            yield event


def tail_events(path: Path, limit: int = 20, *, session_id: Optional[str] = None, kind: Optional[str] = None) -> List[Dict[str, Any]]:
    return list(deque(read_events(path, session_id=session_id, kind=kind), maxlen=limit))


def _render(event: Dict[str, Any]) -> str:
    extras = {key: value for key, value in event.items() if key not in {"ts", "trace", "kind", "session_id"}}
    return f"[{event.get('ts')}] {event.get('session_id')} {event.get('kind')} {json.dumps(extras, ensure_ascii=False)}"


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--log-file", default=LOG_FILE, help="JSON event log to read")
    parser.add_argument("--tail", type=int, default=20, help="Show the latest N events")
    parser.add_argument("--session", help="Only events for this session id")
    parser.add_argument("--kind", help="Only events of this kind, e.g. stage_advanced")
    args = parser.parse_args()

    for event in tail_events(Path(args.log_file), args.tail, session_id=args.session, kind=args.kind):
        print(_render(event))


if __name__ == "__main__":
    main()
