from __future__ import annotations

from insights_service.domain.ports.llm_port import CompletionPort
from insights_service.infrastructure.clients.completions_http import ChatCompletionsHttpClient


class LlmOpenAIAdapter(CompletionPort):
    def __init__(
        self,
        client: ChatCompletionsHttpClient,
        *,
        model: str = "llama3-70b-8192",
        max_tokens: int = 1500,
    ) -> None:
        self._client = client
        self._model = model
        self._max_tokens = max_tokens

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float,
        response_format: str = "json",
    ) -> str:
        data = await self._client.create(
            [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            model=self._model,
            temperature=temperature,
            max_tokens=self._max_tokens,
            response_format={"type": "json_object"} if response_format == "json" else None,
        )
        return self._client.extract_message_content(data)
