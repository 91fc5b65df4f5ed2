from __future__ import annotations

import re
import unicodedata
from typing import Iterable, Sequence

# Matched against accent-stripped, lower-cased text.
SCHEDULING_KEYWORDS: tuple[str, ...] = (
    "agenda",
    "agendar",
    "agendamento",
    "reuniao",
    "horario",
    "horarios",
    "disponivel",
    "disponibilidade",
    "marcar",
    "remarcar",
    "ligacao",
    "calendario",
    "amanha",
    "semana que vem",
    "call",
    "meeting",
    "schedule",
    "reschedule",
    "calendar",
    "available",
    "availability",
    "free slot",
    "tomorrow",
    "next week",
)

_KEYWORD_PATTERN = re.compile(r"\b(" + "|".join(re.escape(keyword) for keyword in SCHEDULING_KEYWORDS) + r")\b")


def normalize_text(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(char for char in decomposed if not unicodedata.combining(char)).lower()


def mentions_scheduling(text: str) -> bool:
    return bool(text) and _KEYWORD_PATTERN.search(normalize_text(text)) is not None


def needs_calendar(message: str, recent_messages: Sequence[str] = (), *, window: int = 4) -> bool:
    """Decide whether the turn is about scheduling.

    Only the current message and the last ``window`` recent messages are
    inspected, so an old scheduling exchange does not keep the calendar fetch
    switched on for the rest of the conversation.
    """

    candidates: Iterable[str] = [message, *(recent_messages[-window:] if window > 0 else ())]
    return any(mentions_scheduling(text) for text in candidates)
