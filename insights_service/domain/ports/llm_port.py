"""CompletionPort protocol for the language-model completion service."""

from __future__ import annotations

from typing import Protocol


class CompletionPort(Protocol):  # pragma: no cover - contract
    """Abstraction over a chat-completion service returning raw message content."""

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float,
        response_format: str = "json",
    ) -> str: ...
