from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel

from insights_service.domain.pipeline.models import RunResult, Urgency


class AnalyzeResponse(BaseModel):
    success: bool = True
    run_id: str
    insight_id: str
    urgency: Urgency
    detected_deadline: Optional[datetime] = None
    insight: dict[str, Any]

    @classmethod
    def from_result(cls, result: RunResult) -> "AnalyzeResponse":
        return cls(
            run_id=result.run_id,
            insight_id=result.insight_id,
            urgency=result.urgency,
            detected_deadline=result.detected_deadline,
            insight=result.insight.to_insight_json(),
        )


class ErrorResponse(BaseModel):
    error: str
    code: str
    stage: str
    retryable: bool = False
    cause: Optional[str] = None
    details: Optional[dict[str, Any]] = None
