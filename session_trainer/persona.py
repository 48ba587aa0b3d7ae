"""Mentee persona phrasing for text shown around generated content."""
from __future__ import annotations

import re
from typing import Literal, Optional

Persona = Literal["Open Mentee", "Guarded Mentee"]
Purpose = Literal["case_intro", "session_complete"]

TEMPLATES_OPEN: dict[Purpose, str] = {
    "case_intro": "Hi! My name is {name}, and I have a situation I can't figure out. Here's what's happening:\n\n{core}",
    "session_complete": "Thanks for the session! {core}",
}

TEMPLATES_GUARDED: dict[Purpose, str] = {
    "case_intro": "Hello. I'm {name}. There is something at work I'd like to discuss.\n\n{core}",
    "session_complete": "Okay, thank you. {core}",
}

# Generated scenarios are kept whole; only short notices are trimmed.
_UNTRIMMED: frozenset[str] = frozenset({"case_intro"})


def _trim_sentences(text: str, max_sentences: int) -> str:
    text = (text or "").strip()
    if not text:
        return ""
    parts = re.split(r"(?<=[.!?])\s+", text)
    kept: list[str] = []
    for part in parts:
        if part:
            kept.append(part.strip())
        if len(kept) >= max_sentences:
            break
    if not kept:
        kept = [text]
    return " ".join(kept).strip()


def _choose_templates(persona: Persona) -> dict[Purpose, str]:
    if persona == "Guarded Mentee":
        return TEMPLATES_GUARDED
    return TEMPLATES_OPEN


def apply_persona(
    text: str,
    *,
    persona: Persona = "Open Mentee",
    purpose: Purpose = "case_intro",
    name: str = "Alex",
    max_sentences: Optional[int] = 2,
) -> str:
    """Wrap ``text`` in the persona's frame for ``purpose``."""

    template = _choose_templates(persona).get(purpose, "{core}")
    core = (text or "").strip()
    if purpose not in _UNTRIMMED and max_sentences:
        core = _trim_sentences(core, max_sentences)
    return template.replace("{name}", name).replace("{core}", core).strip()


__all__ = ["Persona", "Purpose", "apply_persona"]
