"""LLM infrastructure implementations."""

from invoice_analytics.core.interfaces.llm import ILLMProvider
from invoice_analytics.infrastructure.llm.base import BaseLLMProvider, CircuitBreaker, CircuitState
from invoice_analytics.infrastructure.llm.factory import create_llm_provider
from invoice_analytics.infrastructure.llm.ollama import OllamaProvider
from invoice_analytics.infrastructure.llm.openai_compatible import OpenAICompatibleProvider

__all__ = [
    # Interface
    "ILLMProvider",
    # Base
    "BaseLLMProvider",
    "CircuitBreaker",
    "CircuitState",
    # Providers
    "OpenAICompatibleProvider",
    "OllamaProvider",
    # Factory
    "create_llm_provider",
]
