"""Async LLM provider integration for the DeepSeek chat completion API."""

from __future__ import annotations

import time
from typing import Any, Dict, List, Optional

import httpx

from ...core.errors import HttpFailureError, NoChoicesError, NonSuccessStatusError
from .base import LLMMessage, LLMProvider, LLMResponse


class DeepSeekProvider(LLMProvider):
    """DeepSeek chat completion provider."""

    name = "deepseek"

    def __init__(
        self,
        api_key: str,
        model: str = "deepseek-chat",
        *,
        base_url: str | None = None,
        timeout: float = 70.0,
        max_tokens: int = 500,
        temperature: float = 0.7,
        transport: httpx.AsyncBaseTransport | None = None,
        **kwargs: Any,
    ) -> None:
        self.base_url = (base_url or "https://api.deepseek.com").rstrip("/")
        self.timeout = timeout
        self.default_max_tokens = max_tokens
        self.default_temperature = temperature
        self._transport = transport
        self._chat_completions_path = "/v1/chat/completions"
        super().__init__(api_key, model, **kwargs)

    def _setup_client(self, **kwargs: Any) -> None:
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
        )

    async def _post(self, path: str, json: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = await self._client.post(path, json=json)
        except httpx.HTTPError as exc:
            self.logger.error(f"DeepSeek request error: {exc}")
            raise HttpFailureError(f"HTTP request failed: {exc}") from exc

        if not response.is_success:
            self.logger.error(f"DeepSeek API error ({response.status_code})")
            raise NonSuccessStatusError(response.status_code, response.text)

        try:
            return response.json()
        except ValueError as exc:
            raise HttpFailureError(f"Response body is not JSON: {exc}") from exc

    async def generate_response(
        self,
        messages: List[LLMMessage],
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        **kwargs: Any,
    ) -> LLMResponse:
        started_at = time.perf_counter()

        payload = self._build_payload(
            messages=messages,
            max_tokens=max_tokens,
            temperature=temperature,
        )

        data = await self._post(self._chat_completions_path, json=payload)

        choices = data.get("choices") or []
        if not choices:
            raise NoChoicesError("No response choices from API")

        choice = choices[0] or {}
        content = (choice.get("message") or {}).get("content")
        if content is None:
            raise NoChoicesError("First choice carries no message content")

        usage = data.get("usage") or {}
        return self._reply(
            str(content),
            started_at,
            tokens_used=usage.get("total_tokens"),
            finish_reason=choice.get("finish_reason"),
        )

    async def health_check(self) -> Dict[str, Any]:
        try:
            response = await self.generate_response(
                messages=[LLMMessage(role="user", content="ping")],
                max_tokens=4,
                temperature=0.0,
            )
            return {
                "status": "healthy",
                "provider": self.name,
                "model": self.model,
                "response_preview": response.content[:32],
            }
        except NonSuccessStatusError as exc:
            return {
                "status": "degraded" if exc.status_code == 429 else "error",
                "provider": self.name,
                "model": self.model,
                "error": str(exc),
            }
        except Exception as exc:
            return {
                "status": "error",
                "provider": self.name,
                "model": self.model,
                "error": str(exc),
            }

    async def close(self) -> None:
        await self._client.aclose()

    def _build_payload(
        self,
        *,
        messages: List[LLMMessage],
        max_tokens: Optional[int],
        temperature: Optional[float],
    ) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": msg.role, "content": msg.content}
                for msg in messages
            ],
            "max_tokens": max_tokens if max_tokens is not None else self.default_max_tokens,
            "temperature": temperature if temperature is not None else self.default_temperature,
        }
