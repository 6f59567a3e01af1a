"""
Provider interface for the language-model oracle.

A provider turns a list of chat messages into exactly one reply. It keeps
no conversation state between calls and never retries; transport, status
and empty-reply failures surface as ``ClassificationError`` subclasses.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

MessageRole = Literal["system", "user", "assistant"]


class LLMMessage(BaseModel):
    """One chat message sent to the oracle."""
    role: MessageRole
    content: str


class LLMResponse(BaseModel):
    """The first choice of a chat completion plus call metadata."""
    content: str
    model: Optional[str] = None
    tokens_used: Optional[int] = Field(default=None, description="Total tokens billed for the call")
    finish_reason: Optional[str] = None
    response_time_ms: Optional[float] = None


class LLMProvider(ABC):
    """Base class for chat-completion clients."""

    name: str = "base"

    def __init__(self, api_key: str, model: str, **kwargs: Any):
        self.api_key = api_key
        self.model = model
        self.logger = logging.getLogger(f"{__name__}.{self.name}")
        self._setup_client(**kwargs)

    @abstractmethod
    def _setup_client(self, **kwargs: Any) -> None:
        ...

    @abstractmethod
    async def generate_response(
        self,
        messages: List[LLMMessage],
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        **kwargs: Any,
    ) -> LLMResponse:
        """Send ``messages`` and return the first choice.

        ``max_tokens`` and ``temperature`` override the provider defaults
        for this call only.
        """

    @abstractmethod
    async def health_check(self) -> Dict[str, Any]:
        """Return ``{"status": "healthy" | "degraded" | "error", ...}``."""

    async def close(self) -> None:
        pass

    async def __aenter__(self) -> "LLMProvider":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def _reply(self, content: str, started_at: float, **metadata: Any) -> LLMResponse:
        elapsed_ms = (time.perf_counter() - started_at) * 1000
        return LLMResponse(content=content, model=self.model, response_time_ms=elapsed_ms, **metadata)
