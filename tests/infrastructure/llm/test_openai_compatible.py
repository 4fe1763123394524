"""Tests for the OpenAI-compatible provider over a mocked transport."""

import json

import httpx
import pytest

from invoice_analytics.config import LLMSettings
from invoice_analytics.core.exceptions import (
    CircuitBreakerOpenError,
    LLMResponseError,
    LLMTimeoutError,
    LLMUnavailableError,
    ModelNotFoundError,
)
from invoice_analytics.infrastructure.llm import OpenAICompatibleProvider


def _settings(**overrides) -> LLMSettings:
    values = {
        "base_url": "https://llm.test/v1",
        "api_key": "secret",
        "model_name": "test-model",
        "max_retries": 1,
        "failure_threshold": 2,
    }
    values.update(overrides)
    return LLMSettings(**values)


def _completion(content: str) -> dict:
    return {
        "model": "test-model",
        "choices": [{"message": {"role": "assistant", "content": content}, "finish_reason": "stop"}],
        "usage": {"prompt_tokens": 12, "completion_tokens": 5, "total_tokens": 17},
    }


class TestChat:
    async def test_posts_chat_completion(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=_completion("SELECT 1"))

        provider = OpenAICompatibleProvider(_settings(), transport=httpx.MockTransport(handler))
        try:
            response = await provider.chat(
                [{"role": "user", "content": "count invoices"}],
                temperature=0.3,
                max_tokens=64,
            )
        finally:
            await provider.aclose()

        assert response.text == "SELECT 1"
        assert response.total_tokens == 17
        assert response.done_reason == "stop"

        request = seen[0]
        assert request.method == "POST"
        assert request.url == "https://llm.test/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer secret"
        body = json.loads(request.content)
        assert body["model"] == "test-model"
        assert body["temperature"] == 0.3
        assert body["max_tokens"] == 64

    async def test_empty_choices(self):
        transport = httpx.MockTransport(lambda r: httpx.Response(200, json={"choices": []}))
        provider = OpenAICompatibleProvider(_settings(), transport=transport)
        with pytest.raises(LLMResponseError):
            await provider.chat([{"role": "user", "content": "x"}])
        await provider.aclose()

    async def test_non_json_body(self):
        transport = httpx.MockTransport(lambda r: httpx.Response(200, text="<html>"))
        provider = OpenAICompatibleProvider(_settings(), transport=transport)
        with pytest.raises(LLMResponseError):
            await provider.chat([{"role": "user", "content": "x"}])
        await provider.aclose()

    async def test_http_error(self):
        transport = httpx.MockTransport(lambda r: httpx.Response(503, text="overloaded"))
        provider = OpenAICompatibleProvider(_settings(), transport=transport)
        with pytest.raises(LLMUnavailableError) as exc_info:
            await provider.chat([{"role": "user", "content": "x"}])
        assert "HTTP 503" in exc_info.value.message
        await provider.aclose()

    async def test_unknown_model(self):
        transport = httpx.MockTransport(lambda r: httpx.Response(404))
        provider = OpenAICompatibleProvider(_settings(), transport=transport)
        with pytest.raises(ModelNotFoundError):
            await provider.chat([{"role": "user", "content": "x"}])
        await provider.aclose()

    async def test_timeout_is_not_retried(self):
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            raise httpx.ReadTimeout("slow", request=request)

        provider = OpenAICompatibleProvider(_settings(), transport=httpx.MockTransport(handler))
        with pytest.raises(LLMTimeoutError):
            await provider.chat([{"role": "user", "content": "x"}])
        await provider.aclose()

        assert calls == 1

    async def test_circuit_opens_after_repeated_failures(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        provider = OpenAICompatibleProvider(_settings(), transport=httpx.MockTransport(handler))
        for _ in range(2):
            with pytest.raises(LLMUnavailableError):
                await provider.chat([{"role": "user", "content": "x"}])

        with pytest.raises(CircuitBreakerOpenError):
            await provider.chat([{"role": "user", "content": "x"}])
        await provider.aclose()


class TestHealth:
    async def test_missing_api_key(self):
        provider = OpenAICompatibleProvider(_settings(api_key=""))
        status = await provider.check_health()
        assert status.available is False
        assert "API key" in status.error
        await provider.aclose()

    async def test_model_listed(self):
        payload = {"data": [{"id": "test-model"}, {"id": "other"}]}
        transport = httpx.MockTransport(lambda r: httpx.Response(200, json=payload))
        provider = OpenAICompatibleProvider(_settings(), transport=transport)

        status = await provider.check_health()

        assert status.available is True
        assert provider.is_available() is True
        await provider.aclose()

    async def test_model_missing(self):
        payload = {"data": [{"id": "other"}]}
        transport = httpx.MockTransport(lambda r: httpx.Response(200, json=payload))
        provider = OpenAICompatibleProvider(_settings(), transport=transport)

        status = await provider.check_health()

        assert status.available is False
        assert "test-model" in status.error
        await provider.aclose()

    async def test_unreachable(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        provider = OpenAICompatibleProvider(_settings(), transport=httpx.MockTransport(handler))
        status = await provider.check_health()
        assert status.available is False
        await provider.aclose()
