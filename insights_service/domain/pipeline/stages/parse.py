from __future__ import annotations

import logging

from insights_service.domain.pipeline.models import RunContext
from insights_service.domain.pipeline.parsers import load_json_object, parse_insight

logger = logging.getLogger(__name__)


def run_parse(context: RunContext) -> RunContext:
    """Decode the completion leniently into an InsightResult.

    Unparseable output is treated as an empty object and fully defaulted.
    """
    content = context.completion_text or ""
    _, ok = load_json_object(content)
    if not ok:
        logger.warning("completion_not_json_object", extra={"preview": content[:200]})
    insight, defaulted = parse_insight(content)
    if defaulted:
        logger.warning("insight_fields_defaulted", extra={"fields": defaulted})
    context.insight = insight
    return context
