from __future__ import annotations

from insights_service.domain.pipeline.errors import PersistenceError
from insights_service.domain.pipeline.models import PersistedInsight, RunContext
from insights_service.domain.ports.insight_repository_port import InsightRepositoryPort


def build_record(context: RunContext) -> PersistedInsight:
    if context.payload is None or context.insight is None:
        raise PersistenceError("payload and insight are required for persist stage")
    return PersistedInsight(
        user_id=context.payload.user_id,
        case_id=context.payload.case_id,
        insight_json=context.insight.to_insight_json(),
        urgency=context.insight.urgency,
        detected_deadline=context.detected_deadline,
    )


async def run_persist(context: RunContext, *, repository: InsightRepositoryPort) -> RunContext:
    """Insert the insight row. This is the only externally visible side effect of a run."""
    record = build_record(context)
    try:
        insight_id = await repository.insert(record)
    except Exception as exc:
        raise PersistenceError(f"Insight insert failed: {exc}", cause=exc) from exc
    context.insight_id = str(insight_id)
    return context
