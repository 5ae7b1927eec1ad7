from __future__ import annotations

from insights_service.domain.pipeline.constants import (
    RESPONSE_FORMAT_JSON,
    RESPONSE_SCHEMA_DESCRIPTION,
    SYSTEM_PROMPT,
    WINDOW_END_MARKER,
    WINDOW_START_MARKER,
)
from insights_service.domain.pipeline.models import InsightRequest, TextWindow


def build_window(text: str, *, head_chars: int, tail_chars: int) -> TextWindow:
    """Cut text into a head slice and a tail slice.

    Short documents are split at head_chars with no overlap, so the window
    never carries more than head_chars + tail_chars characters of the text.
    """
    if len(text) <= head_chars + tail_chars:
        return TextWindow(head=text[:head_chars], tail=text[head_chars:])
    tail = text[-tail_chars:] if tail_chars > 0 else ""
    return TextWindow(head=text[:head_chars], tail=tail)


def render_window(window: TextWindow) -> str:
    return f"{WINDOW_START_MARKER}\n{window.head}\n{WINDOW_END_MARKER}\n{window.tail}"


def build_user_prompt(window: TextWindow) -> str:
    return (
        "Analise este texto jurídico.\n"
        f"Retorne JSON: {RESPONSE_SCHEMA_DESCRIPTION}\n"
        f"Texto:\n{render_window(window)}"
    )


def build_insight_request(window: TextWindow, *, temperature: float) -> InsightRequest:
    return InsightRequest(
        system_prompt=SYSTEM_PROMPT,
        user_prompt=build_user_prompt(window),
        temperature=temperature,
        response_format=RESPONSE_FORMAT_JSON,
    )
