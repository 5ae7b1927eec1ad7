from __future__ import annotations

from typing import Any

import httpx


class ChatCompletionsHttpClient:
    """Thin async client for an OpenAI-compatible /chat/completions endpoint (Groq by default)."""

    def __init__(
        self,
        base_url: str | None,
        api_key: str | None,
        timeout_seconds: float,
        verify_ssl: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url
        self._api_key = api_key
        self._timeout_seconds = timeout_seconds
        self._verify_ssl = verify_ssl
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        if not self._base_url:
            raise RuntimeError("LLM base_url is not configured")
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout_seconds,
            verify=self._verify_ssl,
            transport=self._transport,
            headers=headers,
        )

    async def create(
        self,
        messages: list[dict[str, str]],
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        response_format: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if response_format is not None:
            payload["response_format"] = response_format
        async with self._client() as client:
            resp = await client.post("/chat/completions", json=payload)
            resp.raise_for_status()
            try:
                data = resp.json()
            except ValueError as exc:
                raise RuntimeError("LLM completion response not JSON") from exc
            if not isinstance(data, dict):
                raise RuntimeError("LLM completion response is not an object")
            return data

    @staticmethod
    def extract_message_content(data: dict[str, Any]) -> str:
        """Return choices[0].message.content.

        A response without choices is unusable; a choice with null content is
        returned as an empty string and left to the caller's defaults.
        """
        choices = data.get("choices")
        if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
            raise RuntimeError("LLM completion response has no choices")
        message = choices[0].get("message") or {}
        content = message.get("content") if isinstance(message, dict) else None
        if isinstance(content, str):
            return content
        return ""
