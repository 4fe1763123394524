"""
Ollama LLM provider implementation.

Local alternative to the hosted OpenAI-compatible endpoint; set
LLM_PROVIDER=ollama and LLM_BASE_URL=http://localhost:11434.
"""

import time

import httpx

from invoice_analytics.config import LLMSettings, get_logger
from invoice_analytics.core.exceptions import (
    LLMResponseError,
    LLMUnavailableError,
    ModelNotFoundError,
)
from invoice_analytics.core.interfaces import HealthStatus, LLMResponse
from invoice_analytics.infrastructure.llm.base import BaseLLMProvider

logger = get_logger(__name__)


class OllamaProvider(BaseLLMProvider):
    """Ollama HTTP API provider (chat only)."""

    provider_name = "ollama"

    def __init__(
        self,
        settings: LLMSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(settings)
        self.host = settings.base_url.rstrip("/")
        self.model = settings.model_name
        self.timeout = settings.timeout
        self.max_tokens = settings.max_tokens
        self.temperature = settings.temperature
        self._client = httpx.AsyncClient(
            base_url=self.host,
            timeout=self.timeout + 5,
            transport=transport,
        )

    async def _make_request(self, endpoint: str, payload: dict) -> dict:
        """Make HTTP request to Ollama API."""
        try:
            response = await self._client.post(endpoint, json=payload, timeout=self.timeout)
        except httpx.TimeoutException as e:
            raise TimeoutError(str(e) or "request timed out") from e
        except httpx.TransportError as e:
            raise ConnectionError(str(e) or type(e).__name__) from e

        if response.status_code == 404:
            model = payload.get("model", "unknown")
            raise ModelNotFoundError(model, "ollama")

        if response.status_code != 200:
            error_text = response.text[:200]
            raise LLMUnavailableError("ollama", f"HTTP {response.status_code}: {error_text}")

        return response.json()

    async def chat(
        self,
        messages: list[dict[str, str]],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """Chat completion with message history."""
        temperature = temperature if temperature is not None else self.temperature
        max_tokens = max_tokens or self.max_tokens

        payload = {
            "model": self.model,
            "messages": [
                {"role": msg.get("role", "user"), "content": msg.get("content", "")}
                for msg in messages
            ],
            "stream": False,
            "options": {
                "temperature": temperature,
                "num_predict": max_tokens,
            },
        }

        async def _do_chat() -> LLMResponse:
            start_time = time.time()
            result = await self._make_request("/api/chat", payload)
            elapsed = time.time() - start_time

            message = result.get("message", {})
            response_text = message.get("content", "")

            if not response_text.strip():
                raise LLMResponseError("Empty chat response", response_text)

            logger.info(
                "ollama_chat",
                model=self.model,
                messages=len(messages),
                response_len=len(response_text),
                elapsed_ms=int(elapsed * 1000),
            )

            return LLMResponse(
                text=response_text,
                model=self.model,
                done=result.get("done", True),
                done_reason=result.get("done_reason"),
            )

        return await self._call(_do_chat)

    async def check_health(self) -> HealthStatus:
        """Check if Ollama is running and the model is pulled."""
        start_time = time.time()

        try:
            response = await self._client.get("/api/tags", timeout=10)
        except httpx.TransportError:
            status = HealthStatus(
                available=False,
                provider="ollama",
                error=f"Cannot connect to Ollama at {self.host}. Is 'ollama serve' running?",
            )
            self._remember_health(status)
            return status

        if response.status_code != 200:
            status = HealthStatus(
                available=False,
                provider="ollama",
                error=f"HTTP {response.status_code}",
            )
            self._remember_health(status)
            return status

        models = [m.get("name", "") for m in response.json().get("models", [])]
        if self.model not in models and not any(self.model in m for m in models):
            status = HealthStatus(
                available=False,
                provider="ollama",
                model=self.model,
                error=f"Model '{self.model}' not installed. Run: ollama pull {self.model}",
            )
        else:
            status = HealthStatus(
                available=True,
                provider="ollama",
                model=self.model,
                response_time_ms=(time.time() - start_time) * 1000,
            )
        self._remember_health(status)
        return status

    async def aclose(self) -> None:
        await self._client.aclose()
