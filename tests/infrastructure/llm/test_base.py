"""Unit tests for the provider circuit breaker and retry wrapper."""

import pytest

from invoice_analytics.config import LLMSettings
from invoice_analytics.core.exceptions import (
    CircuitBreakerOpenError,
    LLMResponseError,
    LLMTimeoutError,
    LLMUnavailableError,
)
from invoice_analytics.core.interfaces import HealthStatus, LLMResponse
from invoice_analytics.infrastructure.llm.base import (
    BaseLLMProvider,
    CircuitBreaker,
    CircuitState,
)


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class FlakyProvider(BaseLLMProvider):
    provider_name = "flaky"

    def __init__(self, settings, failures):
        super().__init__(settings)
        self.failures = list(failures)
        self.attempts = 0

    async def _once(self) -> LLMResponse:
        self.attempts += 1
        if self.failures:
            raise self.failures.pop(0)
        return LLMResponse(text="SELECT 1")

    async def chat(self, messages, temperature=None, max_tokens=None):
        return await self._call(self._once)

    async def check_health(self):
        return HealthStatus(available=True, provider=self.provider_name)

    async def aclose(self):
        pass


def _settings(**overrides) -> LLMSettings:
    values = {"max_retries": 1, "retry_delay": 0.0, "failure_threshold": 2}
    values.update(overrides)
    return LLMSettings(**values)


class TestCircuitBreaker:
    def test_opens_at_threshold(self):
        breaker = CircuitBreaker("llm", failure_threshold=2, cooldown_seconds=60, clock=FakeClock())

        breaker.on_failure()
        assert breaker.state is CircuitState.CLOSED
        breaker.on_failure()

        assert breaker.state is CircuitState.OPEN
        with pytest.raises(CircuitBreakerOpenError) as exc_info:
            breaker.before_call()
        assert exc_info.value.details["cooldown_remaining"] == 60

    def test_half_open_after_cooldown(self):
        clock = FakeClock()
        breaker = CircuitBreaker("llm", failure_threshold=1, cooldown_seconds=30, clock=clock)
        breaker.on_failure()

        clock.now += 31
        breaker.before_call()

        assert breaker.state is CircuitState.HALF_OPEN
        breaker.on_success()
        assert breaker.state is CircuitState.CLOSED
        assert breaker.failures == 0

    def test_failure_while_half_open_reopens(self):
        clock = FakeClock()
        breaker = CircuitBreaker("llm", failure_threshold=5, cooldown_seconds=30, clock=clock)
        for _ in range(5):
            breaker.on_failure()
        clock.now += 31
        breaker.before_call()

        breaker.on_failure()

        assert breaker.state is CircuitState.OPEN
        assert breaker.cooldown_remaining == 30


class TestCall:
    async def test_success(self):
        provider = FlakyProvider(_settings(), [])
        response = await provider.chat([])
        assert response.text == "SELECT 1"
        assert provider.describe()["circuit"] == "closed"

    async def test_single_attempt_by_default(self):
        provider = FlakyProvider(_settings(), [TimeoutError("slow"), TimeoutError("slow")])

        with pytest.raises(LLMTimeoutError):
            await provider.chat([])

        assert provider.attempts == 1

    async def test_retries_when_configured(self):
        provider = FlakyProvider(_settings(max_retries=3), [ConnectionError("reset")])

        response = await provider.chat([])

        assert response.text == "SELECT 1"
        assert provider.attempts == 2

    async def test_connection_errors_open_circuit(self):
        provider = FlakyProvider(_settings(), [ConnectionError("refused")] * 2)

        for _ in range(2):
            with pytest.raises(LLMUnavailableError):
                await provider.chat([])

        assert provider.is_available() is False
        with pytest.raises(CircuitBreakerOpenError):
            await provider.chat([])

    async def test_bad_response_does_not_trip_circuit(self):
        provider = FlakyProvider(_settings(), [LLMResponseError("empty")] * 3)

        for _ in range(3):
            with pytest.raises(LLMResponseError):
                await provider.chat([])

        assert provider.circuit_breaker.state is CircuitState.CLOSED

    def test_failed_health_check_marks_unavailable(self):
        provider = FlakyProvider(_settings(), [])
        provider._remember_health(HealthStatus(available=False, provider="flaky"))
        assert provider.is_available() is False


class TestBreakerAccounting:
    async def test_http_unavailable_opens_circuit(self):
        outage = [LLMUnavailableError("flaky", "HTTP 503: Service Unavailable")] * 2
        provider = FlakyProvider(_settings(), outage)

        for _ in range(2):
            with pytest.raises(LLMUnavailableError):
                await provider.chat([])

        assert provider.circuit_breaker.state is CircuitState.OPEN
        with pytest.raises(CircuitBreakerOpenError):
            await provider.chat([])
        assert provider.attempts == 2

    async def test_failed_half_open_call_reopens(self):
        clock = FakeClock()
        provider = FlakyProvider(_settings(), [LLMResponseError("empty")])
        provider.circuit_breaker = CircuitBreaker(
            "flaky", failure_threshold=1, cooldown_seconds=30, clock=clock
        )
        provider.circuit_breaker.on_failure()
        clock.now += 31

        with pytest.raises(LLMResponseError):
            await provider.chat([])

        assert provider.circuit_breaker.state is CircuitState.OPEN
        with pytest.raises(CircuitBreakerOpenError):
            await provider.chat([])

    async def test_successful_half_open_call_closes(self):
        clock = FakeClock()
        provider = FlakyProvider(_settings(), [])
        provider.circuit_breaker = CircuitBreaker(
            "flaky", failure_threshold=1, cooldown_seconds=30, clock=clock
        )
        provider.circuit_breaker.on_failure()
        clock.now += 31

        await provider.chat([])

        assert provider.circuit_breaker.state is CircuitState.CLOSED
