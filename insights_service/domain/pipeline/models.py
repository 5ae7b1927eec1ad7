"""Domain models for the insight pipeline."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from insights_service.domain.pipeline.constants import (
    DEFAULT_BUCKET,
    DEFAULT_TEMPERATURE,
    DEFAULT_WINDOW_HEAD_CHARS,
    DEFAULT_WINDOW_TAIL_CHARS,
)


class Urgency(str, Enum):
    ALTA = "Alta"
    MEDIA = "Média"
    BAIXA = "Baixa"


class TriggerPayload(BaseModel):
    """Reference to an uploaded document, as delivered by the upload trigger."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    storage_key: str = Field(alias="storageKey", min_length=1)
    user_id: str = Field(alias="userId", min_length=1)
    case_id: Optional[str] = Field(default=None, alias="caseId")
    document_name: Optional[str] = Field(default=None, alias="documentName")

    @field_validator("storage_key", "user_id", mode="before")
    @classmethod
    def _strip_required(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("case_id", mode="before")
    @classmethod
    def _case_id_to_str(cls, value: Any) -> Any:
        # processo ids arrive as integers from some tables
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("document_name", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ExtractedText(BaseModel):
    """Plain text pulled out of a PDF. Lives only for one run."""

    text: str
    page_count: int = 0


class InsightRequest(BaseModel):
    """Prompt payload sent to the completion service."""

    system_prompt: str
    user_prompt: str
    temperature: float
    response_format: str = "json"


class InsightResult(BaseModel):
    """Normalized model output after lenient parsing."""

    document_type: str = ""
    summary: str = ""
    has_deadline: bool = False
    deadline_days: Optional[int] = Field(default=None, ge=0)
    urgency: Urgency = Urgency.BAIXA
    recommendation: str = ""

    def to_insight_json(self) -> dict[str, Any]:
        """Serialize back to the completion contract's field names for storage."""
        return {
            "tipo_documento": self.document_type,
            "resumo": self.summary,
            "tem_prazo": self.has_deadline,
            "dias_prazo": self.deadline_days,
            "urgencia": self.urgency.value,
            "recomendacao": self.recommendation,
        }


class PersistedInsight(BaseModel):
    """Row written to the insights table at the end of a successful run."""

    user_id: str
    case_id: Optional[str] = None
    insight_json: dict[str, Any]
    urgency: Urgency
    detected_deadline: Optional[datetime] = None


class TextWindow(BaseModel):
    """Head and tail slices of a document forwarded to the completion service."""

    head: str
    tail: str = ""

    @property
    def document_chars(self) -> int:
        return len(self.head) + len(self.tail)


class PipelineOptions(BaseModel):
    """Per-deployment knobs for a pipeline run, built from settings."""

    bucket: str = DEFAULT_BUCKET
    head_chars: int = Field(default=DEFAULT_WINDOW_HEAD_CHARS, ge=0)
    tail_chars: int = Field(default=DEFAULT_WINDOW_TAIL_CHARS, ge=0)
    temperature: float = DEFAULT_TEMPERATURE
    fetch_timeout: float = 30.0
    completion_timeout: float = 60.0


class RunContext(BaseModel):
    """Context flowing between stages during a pipeline run."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    run_id: str
    started_at: datetime
    raw_event: Any = None
    payload: Optional[TriggerPayload] = None
    document_bytes: Optional[bytes] = None
    extracted: Optional[ExtractedText] = None
    window: Optional[TextWindow] = None
    request: Optional[InsightRequest] = None
    completion_text: Optional[str] = None
    insight: Optional[InsightResult] = None
    detected_deadline: Optional[datetime] = None
    insight_id: Optional[str] = None
    timings: dict[str, float] = {}


class RunResult(BaseModel):
    """Canonical final result shape for a successful run."""

    run_id: str
    insight_id: str
    user_id: str
    case_id: Optional[str] = None
    urgency: Urgency
    detected_deadline: Optional[datetime] = None
    insight: InsightResult
    timings: dict[str, float] = {}
