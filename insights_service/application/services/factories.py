from __future__ import annotations

from insights_service.core.config import Settings, get_settings
from insights_service.application.llm.adapters.llm_openai_adapter import LlmOpenAIAdapter
from insights_service.application.usecases.extract_insight import DocumentInsightExtractor
from insights_service.domain.pipeline.models import PipelineOptions
from insights_service.infrastructure.clients.completions_http import ChatCompletionsHttpClient
from insights_service.infrastructure.persistence.database import DatabaseManager
from insights_service.infrastructure.persistence.insight_repository import PostgresInsightRepository
from insights_service.infrastructure.storage.minio_adapter import MinioObjectStorage, build_minio_client


def build_pipeline_options(settings: Settings | None = None) -> PipelineOptions:
    s = settings or get_settings()
    return PipelineOptions(
        bucket=s.S3_BUCKET,
        head_chars=s.WINDOW_HEAD_CHARS,
        tail_chars=s.WINDOW_TAIL_CHARS,
        temperature=s.LLM_TEMPERATURE,
        fetch_timeout=s.FETCH_TIMEOUT_SECONDS,
        completion_timeout=s.LLM_TIMEOUT_SECONDS,
    )


def build_storage_adapter(settings: Settings | None = None) -> MinioObjectStorage:
    s = settings or get_settings()
    if not s.S3_ENDPOINT:
        raise RuntimeError("INSIGHTS_S3_ENDPOINT is not configured")
    client = build_minio_client(
        s.S3_ENDPOINT,
        s.S3_ACCESS_KEY,
        s.S3_SECRET_KEY.get_secret_value(),
        secure=s.S3_SECURE,
        region=s.S3_REGION,
        timeout_seconds=s.FETCH_TIMEOUT_SECONDS,
    )
    return MinioObjectStorage(client)


def build_llm_client(settings: Settings | None = None) -> LlmOpenAIAdapter:
    s = settings or get_settings()
    client = ChatCompletionsHttpClient(
        base_url=s.LLM_BASE_URL,
        api_key=s.LLM_API_KEY.get_secret_value(),
        timeout_seconds=s.LLM_TIMEOUT_SECONDS,
        verify_ssl=s.LLM_VERIFY_SSL,
    )
    return LlmOpenAIAdapter(client, model=s.LLM_MODEL, max_tokens=s.LLM_MAX_TOKENS)


def build_insight_repository(db_manager: DatabaseManager, settings: Settings | None = None) -> PostgresInsightRepository:
    s = settings or get_settings()
    return PostgresInsightRepository(db_manager, table=s.INSIGHTS_TABLE)


def build_extractor(db_manager: DatabaseManager, settings: Settings | None = None) -> DocumentInsightExtractor:
    s = settings or get_settings()
    return DocumentInsightExtractor(
        storage=build_storage_adapter(s),
        llm_client=build_llm_client(s),
        repository=build_insight_repository(db_manager, s),
        options=build_pipeline_options(s),
    )
