"""
Shared resilience for the SQL-generating LLM providers.

Every chat completion goes through ``BaseLLMProvider._call``:

1. the circuit breaker refuses the call while the provider is cooling down
2. tenacity retries transport failures (one attempt unless configured)
3. builtin TimeoutError / ConnectionError become domain LLM errors

Non-2xx HTTP answers count as failures. A response the model got wrong
(bad JSON, empty text) only re-opens a half-open circuit; otherwise it
leaves the breaker alone.
"""

import time
from abc import ABC
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from invoice_analytics.config import LLMSettings, get_logger
from invoice_analytics.core.exceptions import (
    CircuitBreakerOpenError,
    LLMTimeoutError,
    LLMUnavailableError,
)
from invoice_analytics.core.interfaces import HealthStatus, ILLMProvider

logger = get_logger(__name__)

T = TypeVar("T")

HEALTH_CACHE_TTL = 30.0


class CircuitState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreaker:
    """
    Counts consecutive transport failures for one provider.

    After ``failure_threshold`` failures the circuit opens and calls are
    refused for ``cooldown_seconds``. The first call after the cooldown is
    let through (half-open); its outcome closes or re-opens the circuit.
    """

    def __init__(
        self,
        provider: str,
        failure_threshold: int = 3,
        cooldown_seconds: int = 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.provider = provider
        self.failure_threshold = failure_threshold
        self.cooldown_seconds = cooldown_seconds
        self._clock = clock
        self.failures = 0
        self.state = CircuitState.CLOSED
        self._opened_at = 0.0

    @property
    def cooldown_remaining(self) -> int:
        if self.state is not CircuitState.OPEN:
            return 0
        return max(0, int(self.cooldown_seconds - (self._clock() - self._opened_at)))

    def before_call(self) -> None:
        """Raise CircuitBreakerOpenError while the cooldown is running."""
        if self.state is not CircuitState.OPEN:
            return
        remaining = self.cooldown_remaining
        if remaining > 0:
            raise CircuitBreakerOpenError(self.provider, remaining)
        self.state = CircuitState.HALF_OPEN
        logger.info("circuit_breaker_half_open", provider=self.provider)

    def on_success(self) -> None:
        if self.state is not CircuitState.CLOSED:
            logger.info("circuit_breaker_closed", provider=self.provider)
        self.failures = 0
        self.state = CircuitState.CLOSED

    def on_failure(self) -> None:
        self.failures += 1
        if self.state is CircuitState.HALF_OPEN or self.failures >= self.failure_threshold:
            self.state = CircuitState.OPEN
            self._opened_at = self._clock()
            logger.warning(
                "circuit_breaker_opened",
                provider=self.provider,
                failures=self.failures,
                cooldown=self.cooldown_seconds,
            )


def _log_retry(retry_state: RetryCallState) -> None:
    error = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning("llm_retry", attempt=retry_state.attempt_number, error=str(error))


class BaseLLMProvider(ILLMProvider, ABC):
    """Base class for providers; subclasses implement the HTTP calls."""

    provider_name = "llm"

    def __init__(self, settings: LLMSettings) -> None:
        self.settings = settings
        self.circuit_breaker = CircuitBreaker(
            self.provider_name,
            failure_threshold=settings.failure_threshold,
            cooldown_seconds=settings.cooldown_seconds,
        )
        self._last_health: HealthStatus | None = None
        self._last_health_at = 0.0

    def _retrying(self) -> AsyncRetrying:
        delay = self.settings.retry_delay
        return AsyncRetrying(
            stop=stop_after_attempt(max(1, self.settings.max_retries)),
            wait=wait_exponential(
                multiplier=delay,
                min=delay,
                max=delay * self.settings.retry_multiplier**3,
            ),
            retry=retry_if_exception_type((TimeoutError, ConnectionError)),
            before_sleep=_log_retry,
            reraise=True,
        )

    async def _call(self, operation: Callable[[], Awaitable[T]]) -> T:
        """
        Run ``operation`` behind the circuit breaker and retry policy.

        Raises:
            CircuitBreakerOpenError: Provider is cooling down
            LLMTimeoutError: Every attempt timed out
            LLMUnavailableError: Provider could not be reached
        """
        self.circuit_breaker.before_call()

        try:
            result = await self._retrying()(operation)
        except TimeoutError as e:
            self.circuit_breaker.on_failure()
            raise LLMTimeoutError(self.settings.timeout) from e
        except (ConnectionError, OSError) as e:
            self.circuit_breaker.on_failure()
            raise LLMUnavailableError(self.provider_name, str(e)) from e
        except LLMUnavailableError:
            # Non-2xx answers such as 503 count like transport failures
            self.circuit_breaker.on_failure()
            raise
        except Exception:
            if self.circuit_breaker.state is CircuitState.HALF_OPEN:
                self.circuit_breaker.on_failure()
            raise

        self.circuit_breaker.on_success()
        return result

    def _remember_health(self, status: HealthStatus) -> None:
        self._last_health = status
        self._last_health_at = time.monotonic()

    def is_available(self) -> bool:
        """Cheap check: circuit closed and no recent failed health check."""
        if self.circuit_breaker.state is CircuitState.OPEN:
            return False
        fresh = time.monotonic() - self._last_health_at < HEALTH_CACHE_TTL
        if self._last_health is not None and fresh:
            return self._last_health.available
        return True

    def describe(self) -> dict[str, Any]:
        """Provider identity and breaker state for logs."""
        return {
            "provider": self.provider_name,
            "model": self.settings.model_name,
            "circuit": self.circuit_breaker.state.value,
            "failures": self.circuit_breaker.failures,
        }
