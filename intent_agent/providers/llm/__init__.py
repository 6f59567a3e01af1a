"""Oracle providers and the settings-driven factory that builds them."""

from typing import Any, Dict, Optional, Type

from .base import LLMMessage, LLMProvider, LLMResponse
from .deepseek import DeepSeekProvider

PROVIDER_REGISTRY: Dict[str, Type[LLMProvider]] = {
    DeepSeekProvider.name: DeepSeekProvider,
}

# Short names accepted in LLM_PROVIDER
PROVIDER_ALIASES: Dict[str, str] = {"ds": DeepSeekProvider.name}


def canonical_provider_name(name: str) -> str:
    key = name.strip().lower()
    return PROVIDER_ALIASES.get(key, key)


def create_provider(provider_name: str, api_key: str, model: str, **kwargs: Any) -> LLMProvider:
    """Instantiate a registered provider; raises ValueError for unknown names."""
    provider_class = PROVIDER_REGISTRY.get(canonical_provider_name(provider_name))
    if provider_class is None:
        raise ValueError(
            f"Unsupported provider '{provider_name}'. "
            f"Available providers: {', '.join(PROVIDER_REGISTRY)}"
        )
    return provider_class(api_key=api_key, model=model, **kwargs)


def get_llm_provider(
    provider_name: Optional[str] = None,
    model: Optional[str] = None,
    api_key: Optional[str] = None,
    **kwargs: Any,
) -> LLMProvider:
    """Build the configured oracle provider.

    Explicit arguments win over settings, so a key supplied at agent
    initialization replaces the configured one. Raises ValueError when no
    key is available.
    """
    from ...config import settings

    name = canonical_provider_name(provider_name or settings.llm_provider)
    api_key = api_key or settings.deepseek_api_key
    if not api_key:
        raise ValueError(f"No API key configured for provider: {name}")

    kwargs.setdefault("base_url", settings.llm_base_url)
    kwargs.setdefault("timeout", settings.llm_timeout_seconds)
    kwargs.setdefault("max_tokens", settings.max_tokens)
    kwargs.setdefault("temperature", settings.temperature)

    return create_provider(name, api_key, (model or "").strip() or settings.llm_model, **kwargs)


__all__ = [
    "LLMProvider",
    "LLMMessage",
    "LLMResponse",
    "DeepSeekProvider",
    "PROVIDER_REGISTRY",
    "canonical_provider_name",
    "create_provider",
    "get_llm_provider",
]
