"""Postgres insight repository implementing InsightRepositoryPort.

Rows are append-only: this module has no update or delete path.
"""

import json
import logging
import re

from insights_service.domain.pipeline.constants import DEFAULT_INSIGHTS_TABLE
from insights_service.domain.pipeline.models import PersistedInsight
from insights_service.domain.ports.insight_repository_port import InsightRepositoryPort
from insights_service.infrastructure.persistence.database import DatabaseManager

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")


def _checked_table(table: str) -> str:
    if not _IDENTIFIER.match(table):
        raise ValueError(f"Invalid table name: {table!r}")
    return table


def create_table_sql(table: str) -> str:
    table = _checked_table(table)
    return f"""
        CREATE TABLE IF NOT EXISTS {table} (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id TEXT NOT NULL,
            processo_id TEXT,
            insight_json JSONB NOT NULL,
            nivel_urgencia TEXT NOT NULL,
            prazo_detectado TIMESTAMPTZ,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        );
        CREATE INDEX IF NOT EXISTS {table.replace('.', '_')}_nivel_urgencia_idx
            ON {table} (nivel_urgencia);
    """


class PostgresInsightRepository(InsightRepositoryPort):
    def __init__(self, db_manager: DatabaseManager, table: str = DEFAULT_INSIGHTS_TABLE) -> None:
        self._db = db_manager
        self._table = _checked_table(table)
        self._insert_sql = f"""
            INSERT INTO {self._table} (
                user_id, processo_id, insight_json, nivel_urgencia, prazo_detectado
            ) VALUES (
                $1, $2, $3::jsonb, $4, $5
            )
            RETURNING id
        """

    async def ensure_schema(self) -> None:
        async with self._db.acquire() as conn:
            await conn.execute(create_table_sql(self._table))

    async def insert(self, insight: PersistedInsight) -> str:
        async with self._db.acquire() as conn:
            record_id = await conn.fetchval(
                self._insert_sql,
                insight.user_id,
                insight.case_id,
                json.dumps(insight.insight_json, ensure_ascii=False),
                insight.urgency.value,
                insight.detected_deadline,
            )
        logger.info(
            f"DB INSERT SUCCESS | table={self._table} | id={record_id} | "
            f"urgency={insight.urgency.value} | deadline={insight.detected_deadline}"
        )
        return str(record_id)
