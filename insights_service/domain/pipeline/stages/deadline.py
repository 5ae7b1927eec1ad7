from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from insights_service.domain.pipeline.errors import PipelineError
from insights_service.domain.pipeline.models import InsightResult, RunContext

logger = logging.getLogger(__name__)


def compute_deadline(insight: InsightResult, started_at: datetime) -> Optional[datetime]:
    """Absolute deadline = run start + N calendar days. No business-day or holiday logic."""
    if not insight.has_deadline or insight.deadline_days is None:
        return None
    try:
        return started_at + timedelta(days=insight.deadline_days)
    except OverflowError:
        logger.warning("deadline_out_of_range", extra={"deadline_days": insight.deadline_days})
        return None


def run_deadline(context: RunContext) -> RunContext:
    if context.insight is None:
        raise PipelineError("insight is not set in RunContext for deadline stage")
    context.detected_deadline = compute_deadline(context.insight, context.started_at)
    return context
