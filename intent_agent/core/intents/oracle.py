"""Thin prompt-in, text-out wrapper around an LLM provider."""

import logging

from ...providers.llm import LLMMessage, LLMProvider


logger = logging.getLogger(__name__)


def system_persona(assistant_name: str) -> str:
    return (
        f"You are {assistant_name}, a helpful Web3 assistant that helps users with "
        "cryptocurrency projects, investments, and blockchain transactions. "
        "Provide clear, accurate, and friendly responses."
    )


class Oracle:
    """
    One request, one reply.

    Errors from the provider (``ClassificationError`` subclasses) propagate
    unchanged; nothing is retried.
    """

    def __init__(self, provider: LLMProvider, assistant_name: str = "Teemah AI"):
        self.provider = provider
        self.assistant_name = assistant_name

    async def ask(self, prompt: str) -> str:
        messages = [
            LLMMessage(role="system", content=system_persona(self.assistant_name)),
            LLMMessage(role="user", content=prompt),
        ]
        response = await self.provider.generate_response(messages)
        logger.debug(f"Oracle replied in {response.response_time_ms or 0:.0f} ms")
        return response.content

    async def close(self) -> None:
        await self.provider.close()
