"""
Abstract interfaces for LLM providers.

Defines the contract the OpenAI-compatible and Ollama providers fulfill.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class LLMProvider(str, Enum):
    """Supported LLM provider types."""

    OPENAI_COMPATIBLE = "openai_compatible"
    OLLAMA = "ollama"


@dataclass
class LLMResponse:
    """Response from a chat completion."""

    text: str
    model: str = ""
    done: bool = True
    done_reason: str | None = None
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    error: str | None = None


@dataclass
class HealthStatus:
    """LLM provider health status."""

    available: bool
    provider: str
    model: str | None = None
    error: str | None = None
    response_time_ms: float | None = None


class ILLMProvider(ABC):
    """
    Abstract interface for LLM providers.

    Implementations: OpenAICompatibleProvider, OllamaProvider
    """

    @abstractmethod
    async def chat(
        self,
        messages: list[dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int = 1024,
    ) -> LLMResponse:
        """
        Chat completion with message history.

        Args:
            messages: List of {"role": "user"|"assistant"|"system", "content": "..."}
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate

        Returns:
            LLMResponse with assistant reply
        """
        pass

    @abstractmethod
    async def check_health(self) -> HealthStatus:
        """Check if the LLM provider is reachable."""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Synchronous availability check (cached)."""
        pass

    @abstractmethod
    async def aclose(self) -> None:
        """Release the pooled HTTP client."""
        pass
