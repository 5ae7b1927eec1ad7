"""InsightRepositoryPort protocol for persisting insight records."""

from __future__ import annotations

from typing import Protocol

from insights_service.domain.pipeline.models import PersistedInsight


class InsightRepositoryPort(Protocol):  # pragma: no cover - contract
    """Append-only store for insights. Returns the new record id."""

    async def insert(self, insight: PersistedInsight) -> str: ...
