from __future__ import annotations

from insights_service.domain.pipeline.errors import ExtractionError
from insights_service.domain.pipeline.models import RunContext
from insights_service.domain.pipeline.prompts import build_window


def run_window(context: RunContext, *, head_chars: int, tail_chars: int) -> RunContext:
    """Reduce the extracted text to its head and tail slices."""
    if context.extracted is None:
        raise ExtractionError("extracted text is not set in RunContext for window stage")
    context.window = build_window(context.extracted.text, head_chars=head_chars, tail_chars=tail_chars)
    return context
