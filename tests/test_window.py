from __future__ import annotations

from datetime import datetime, timedelta, timezone

from insights_service.domain.pipeline.constants import SYSTEM_PROMPT, WINDOW_END_MARKER, WINDOW_START_MARKER
from insights_service.domain.pipeline.models import InsightResult
from insights_service.domain.pipeline.prompts import build_insight_request, build_window, render_window
from insights_service.domain.pipeline.stages.deadline import compute_deadline


def test_short_text_is_split_without_overlap() -> None:
    text = "abcdefghij"
    window = build_window(text, head_chars=6, tail_chars=6)
    assert window.head == "abcdef"
    assert window.tail == "ghij"
    assert window.head + window.tail == text


def test_long_text_keeps_head_and_tail_only() -> None:
    text = "H" * 100 + "m" * 1000 + "T" * 50
    window = build_window(text, head_chars=100, tail_chars=50)
    assert window.head == "H" * 100
    assert window.tail == "T" * 50
    assert window.document_chars == 150


def test_zero_tail_drops_tail() -> None:
    window = build_window("x" * 500, head_chars=100, tail_chars=0)
    assert window.head == "x" * 100
    assert window.tail == ""


def test_render_window_orders_markers() -> None:
    rendered = render_window(build_window("inicio...fim", head_chars=6, tail_chars=6))
    assert rendered.index(WINDOW_START_MARKER) < rendered.index("inicio") < rendered.index(WINDOW_END_MARKER)
    assert rendered.endswith("...fim")


def test_build_insight_request() -> None:
    request = build_insight_request(build_window("texto", head_chars=10, tail_chars=10), temperature=0.1)
    assert request.system_prompt == SYSTEM_PROMPT
    assert request.response_format == "json"
    assert request.temperature == 0.1
    assert "urgencia" in request.user_prompt
    assert "texto" in request.user_prompt


START = datetime(2026, 1, 31, 12, 30, tzinfo=timezone.utc)


def test_compute_deadline_crosses_month_boundary() -> None:
    insight = InsightResult(has_deadline=True, deadline_days=1)
    assert compute_deadline(insight, START) == datetime(2026, 2, 1, 12, 30, tzinfo=timezone.utc)


def test_compute_deadline_requires_flag_and_days() -> None:
    assert compute_deadline(InsightResult(has_deadline=False, deadline_days=5), START) is None
    assert compute_deadline(InsightResult(has_deadline=True, deadline_days=None), START) is None
    assert compute_deadline(InsightResult(has_deadline=True, deadline_days=0), START) == START


def test_compute_deadline_overflow_gives_none() -> None:
    insight = InsightResult(has_deadline=True, deadline_days=10**9)
    assert compute_deadline(insight, START) is None


def test_compute_deadline_is_calendar_days() -> None:
    insight = InsightResult(has_deadline=True, deadline_days=365)
    assert compute_deadline(insight, START) - START == timedelta(days=365)
