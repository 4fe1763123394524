"""
OpenAI-compatible chat-completion provider.

Talks to any endpoint implementing ``POST /chat/completions`` (Groq by
default). One pooled httpx.AsyncClient per provider instance, closed on
application shutdown.
"""

import time
from typing import Any

import httpx

from invoice_analytics.config import LLMSettings, get_logger
from invoice_analytics.core.exceptions import (
    LLMError,
    LLMResponseError,
    LLMUnavailableError,
    ModelNotFoundError,
)
from invoice_analytics.core.interfaces import HealthStatus, LLMResponse
from invoice_analytics.infrastructure.llm.base import BaseLLMProvider

logger = get_logger(__name__)


class OpenAICompatibleProvider(BaseLLMProvider):
    """Chat completions over the OpenAI wire format."""

    provider_name = "openai_compatible"

    def __init__(
        self,
        settings: LLMSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(settings)
        self.base_url = settings.base_url.rstrip("/")
        self.model = settings.model_name
        self.timeout = settings.timeout
        self.max_tokens = settings.max_tokens
        self.temperature = settings.temperature

        headers = {"Content-Type": "application/json"}
        if settings.api_key:
            headers["Authorization"] = f"Bearer {settings.api_key}"
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            transport=transport,
        )

    async def _make_request(self, method: str, path: str, payload: dict | None = None) -> dict:
        """Issue one HTTP request; transport failures become builtin errors."""
        try:
            response = await self._client.request(method, path, json=payload)
        except httpx.TimeoutException as e:
            raise TimeoutError(str(e) or "request timed out") from e
        except httpx.TransportError as e:
            raise ConnectionError(str(e) or type(e).__name__) from e

        if response.status_code == 404:
            raise ModelNotFoundError(self.model, self.provider_name)

        if response.status_code != 200:
            error_text = response.text[:200]
            raise LLMUnavailableError(
                self.provider_name, f"HTTP {response.status_code}: {error_text}"
            )

        try:
            return response.json()
        except ValueError as e:
            raise LLMResponseError("Response body is not JSON", response.text) from e

    @staticmethod
    def _first_choice_text(result: dict[str, Any]) -> str:
        choices = result.get("choices")
        if not isinstance(choices, list) or not choices:
            raise LLMResponseError("No choices in completion", str(result))
        message = choices[0].get("message") if isinstance(choices[0], dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str) or not content.strip():
            raise LLMResponseError("Empty chat response", str(result))
        return content.strip()

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
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

        async def _do_chat() -> LLMResponse:
            start_time = time.time()
            result = await self._make_request("POST", "/chat/completions", payload)
            elapsed = time.time() - start_time

            text = self._first_choice_text(result)
            usage = result.get("usage") or {}

            logger.info(
                "llm_chat",
                provider=self.provider_name,
                model=self.model,
                messages=len(messages),
                response_len=len(text),
                elapsed_ms=int(elapsed * 1000),
            )

            return LLMResponse(
                text=text,
                model=result.get("model", self.model),
                done_reason=result["choices"][0].get("finish_reason"),
                prompt_tokens=usage.get("prompt_tokens", 0),
                completion_tokens=usage.get("completion_tokens", 0),
                total_tokens=usage.get("total_tokens", 0),
            )

        return await self._call(_do_chat)

    async def check_health(self) -> HealthStatus:
        """Check that the endpoint answers and lists the configured model."""
        if not self.settings.api_key:
            status = HealthStatus(
                available=False,
                provider=self.provider_name,
                model=self.model,
                error="API key not configured (set LLM_API_KEY or GROQ_API_KEY)",
            )
            self._remember_health(status)
            return status

        start_time = time.time()
        try:
            data = await self._make_request("GET", "/models")
        except (TimeoutError, ConnectionError, LLMError) as e:
            status = HealthStatus(
                available=False,
                provider=self.provider_name,
                model=self.model,
                error=str(e),
            )
            self._remember_health(status)
            return status

        models = [m.get("id", "") for m in data.get("data", []) if isinstance(m, dict)]
        if models and self.model not in models:
            status = HealthStatus(
                available=False,
                provider=self.provider_name,
                model=self.model,
                error=f"Model '{self.model}' not offered by {self.base_url}",
            )
        else:
            status = HealthStatus(
                available=True,
                provider=self.provider_name,
                model=self.model,
                response_time_ms=(time.time() - start_time) * 1000,
            )
        self._remember_health(status)
        return status

    async def aclose(self) -> None:
        await self._client.aclose()
