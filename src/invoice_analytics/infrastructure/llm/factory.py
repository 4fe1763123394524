"""
LLM provider factory.

Creates the appropriate provider based on configuration. Providers are
constructed by the application lifespan and live on app.state.
"""

import httpx

from invoice_analytics.config import LLMSettings, get_logger
from invoice_analytics.core.exceptions import ConfigurationError
from invoice_analytics.core.interfaces import ILLMProvider, LLMProvider
from invoice_analytics.infrastructure.llm.base import BaseLLMProvider

logger = get_logger(__name__)


def create_llm_provider(
    settings: LLMSettings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ILLMProvider:
    """
    Build an LLM provider instance.

    Args:
        settings: LLM settings (provider type, endpoint, model)
        transport: Optional httpx transport, used by tests

    Returns:
        ILLMProvider instance owning its own HTTP client
    """
    provider_type = settings.provider

    if provider_type == LLMProvider.OPENAI_COMPATIBLE.value:
        from invoice_analytics.infrastructure.llm.openai_compatible import (
            OpenAICompatibleProvider,
        )

        provider: BaseLLMProvider = OpenAICompatibleProvider(settings, transport=transport)

    elif provider_type == LLMProvider.OLLAMA.value:
        from invoice_analytics.infrastructure.llm.ollama import OllamaProvider

        provider = OllamaProvider(settings, transport=transport)

    else:
        raise ConfigurationError(f"Unknown LLM provider: {provider_type}")

    logger.info("llm_provider_created", **provider.describe())
    return provider
