"""
Tests for the DeepSeek oracle client, using httpx.MockTransport.
"""

import json

import httpx
import pytest

from intent_agent.core.errors import HttpFailureError, NoChoicesError, NonSuccessStatusError
from intent_agent.providers.llm import DeepSeekProvider, LLMMessage, create_provider, get_llm_provider


def _provider(handler):
    return DeepSeekProvider(
        api_key="test-key",
        model="deepseek-chat",
        base_url="https://api.deepseek.test",
        transport=httpx.MockTransport(handler),
    )


MESSAGES = [
    LLMMessage(role="system", content="persona"),
    LLMMessage(role="user", content="hi"),
]


@pytest.mark.asyncio
async def test_returns_first_choice_content():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={
            "choices": [
                {"message": {"content": "first"}, "finish_reason": "stop"},
                {"message": {"content": "second"}},
            ],
            "usage": {"total_tokens": 12},
        })

    provider = _provider(handler)
    response = await provider.generate_response(MESSAGES)
    await provider.close()

    assert response.content == "first"
    assert response.tokens_used == 12
    assert seen["url"] == "https://api.deepseek.test/v1/chat/completions"
    assert seen["auth"] == "Bearer test-key"
    assert seen["body"]["model"] == "deepseek-chat"
    assert seen["body"]["temperature"] == 0.7
    assert seen["body"]["max_tokens"] == 500
    assert [m["role"] for m in seen["body"]["messages"]] == ["system", "user"]


@pytest.mark.asyncio
async def test_non_success_status():
    provider = _provider(lambda request: httpx.Response(503, text="overloaded"))

    with pytest.raises(NonSuccessStatusError) as excinfo:
        await provider.generate_response(MESSAGES)

    assert excinfo.value.status_code == 503
    assert "overloaded" in str(excinfo.value)


@pytest.mark.asyncio
async def test_empty_choices():
    provider = _provider(lambda request: httpx.Response(200, json={"choices": []}))

    with pytest.raises(NoChoicesError):
        await provider.generate_response(MESSAGES)


@pytest.mark.asyncio
async def test_transport_failure():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    provider = _provider(handler)

    with pytest.raises(HttpFailureError):
        await provider.generate_response(MESSAGES)


@pytest.mark.asyncio
async def test_health_check_reports_status_errors():
    provider = _provider(lambda request: httpx.Response(429, text="slow down"))

    health = await provider.health_check()

    assert health["status"] == "degraded"
    assert health["provider"] == "deepseek"


def test_factory_resolves_alias_and_rejects_unknown_provider():
    provider = create_provider("DS", api_key="k", model="deepseek-chat")
    assert isinstance(provider, DeepSeekProvider)
    assert provider.name == "deepseek"

    with pytest.raises(ValueError, match="Unsupported provider 'openai'"):
        create_provider("openai", api_key="k", model="gpt")


def test_get_llm_provider_requires_a_key(monkeypatch):
    from intent_agent.config import settings

    monkeypatch.setattr(settings, "deepseek_api_key", "")
    with pytest.raises(ValueError, match="No API key configured"):
        get_llm_provider()

    provider = get_llm_provider(api_key="sk-explicit")
    assert provider.api_key == "sk-explicit"
    assert provider.model == settings.llm_model
