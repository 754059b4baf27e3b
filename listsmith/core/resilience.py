"""
Resilience patterns for outbound text-generation calls.

- CircuitBreaker: stops calling the LLM provider after repeated failures
  and lets a single probe through once the cooldown has passed.
- RetryPolicy: exponential backoff with jitter for
  transient failures (timeouts, 429s, 5xx).
"""

import asyncio
import logging
import random
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from listsmith.core.exceptions import CircuitBreakerOpenError

logger = logging.getLogger(__name__)


# ─── Circuit Breaker ──────────────────────────────────────────


class CircuitState(StrEnum):
    """Circuit breaker states."""
    CLOSED = "closed"        # Normal operation, requests flow through
    OPEN = "open"            # Failures exceeded threshold, requests blocked
    HALF_OPEN = "half_open"  # Cooldown expired, testing with single request


class CircuitBreaker:
    """
    Circuit breaker that counts failures inside a sliding window.

    States:
        CLOSED: Normal. Failures are recorded; a success clears them.
        OPEN: ``failure_threshold`` failures within ``window_seconds`` trip
              the breaker; every call raises CircuitBreakerOpenError until
              ``cooldown_seconds`` have elapsed.
        HALF_OPEN: One probe call is let through. Success closes the
              breaker, failure re-opens it for another cooldown.

    Usage:
        breaker = CircuitBreaker(name="openai")
        async with breaker:
            reply = await post_completion(payload)
    """

    def __init__(
        self,
        name: str,
        failure_threshold: int = 5,
        cooldown_seconds: int = 120,
        window_seconds: int = 600,
    ):
        self.name = name
        self.failure_threshold = failure_threshold
        self.cooldown_seconds = cooldown_seconds
        self.window_seconds = window_seconds

        self._state = CircuitState.CLOSED
        self._failure_timestamps: list[float] = []
        self._opened_at: float = 0.0

    @property
    def state(self) -> CircuitState:
        """Current state; an expired cooldown moves OPEN to HALF_OPEN."""
        if self._state == CircuitState.OPEN:
            elapsed = time.monotonic() - self._opened_at
            if elapsed >= self.cooldown_seconds:
                self._state = CircuitState.HALF_OPEN
                logger.info(
                    f"Circuit breaker '{self.name}' transitioned to HALF_OPEN "
                    f"after {elapsed:.0f}s cooldown"
                )
        return self._state

    @property
    def failure_count(self) -> int:
        """Failures currently inside the tracking window."""
        self._prune_old_failures()
        return len(self._failure_timestamps)

    @property
    def cooldown_remaining(self) -> float:
        """Seconds remaining in the cooldown period (0 if not open)."""
        if self._state != CircuitState.OPEN:
            return 0.0
        elapsed = time.monotonic() - self._opened_at
        return max(0.0, self.cooldown_seconds - elapsed)

    def _prune_old_failures(self) -> None:
        cutoff = time.monotonic() - self.window_seconds
        self._failure_timestamps = [t for t in self._failure_timestamps if t > cutoff]

    def _open(self, now: float) -> None:
        self._state = CircuitState.OPEN
        self._opened_at = now

    def record_success(self) -> None:
        """Close the circuit and forget recorded failures."""
        if self._state == CircuitState.HALF_OPEN:
            logger.info(f"Circuit breaker '{self.name}' CLOSED after successful probe")

        self._state = CircuitState.CLOSED
        self._failure_timestamps.clear()

    def record_failure(self) -> None:
        """Record a failed call; may trip the circuit to OPEN."""
        now = time.monotonic()
        self._failure_timestamps.append(now)
        self._prune_old_failures()

        if self._state == CircuitState.HALF_OPEN:
            self._open(now)
            logger.warning(f"Circuit breaker '{self.name}' re-OPENED (probe failed)")
        elif len(self._failure_timestamps) >= self.failure_threshold:
            self._open(now)
            logger.warning(
                f"Circuit breaker '{self.name}' OPENED "
                f"({len(self._failure_timestamps)} failures in "
                f"{self.window_seconds}s window)"
            )

    async def __aenter__(self) -> "CircuitBreaker":
        if self.state == CircuitState.OPEN:
            raise CircuitBreakerOpenError(
                source=self.name,
                cooldown_remaining=self.cooldown_remaining,
            )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is None:
            self.record_success()
        else:
            self.record_failure()
        return False


# ─── Retry with Exponential Backoff ───────────────────────────


@dataclass(frozen=True)
class RetryPolicy:
    """
    Exponential backoff schedule.

    With base_delay=1 and multiplier=2 the waits are ~1s, ~2s, ~4s,
    each jittered by ±jitter_pct.
    """

    max_retries: int = 2
    base_delay: float = 1.0
    multiplier: float = 2.0
    jitter_pct: float = 0.25
    retryable_exceptions: tuple[type[Exception], ...] = (Exception,)

    def delay_for(self, attempt: int) -> float:
        """Backoff delay (seconds) after the given zero-based attempt."""
        delay = self.base_delay * (self.multiplier ** attempt)
        jitter = delay * self.jitter_pct * (2 * random.random() - 1)
        return max(0.0, delay + jitter)

    async def run(
        self,
        func: Callable[..., Awaitable[Any]],
        *args: Any,
        **kwargs: Any,
    ) -> Any:
        """Await ``func`` until it succeeds or the retry budget is spent."""
        name = getattr(func, "__name__", repr(func))

        for attempt in range(self.max_retries + 1):
            try:
                return await func(*args, **kwargs)
            except self.retryable_exceptions as e:
                if attempt == self.max_retries:
                    logger.error(f"{name} failed after {self.max_retries + 1} attempts: {e}")
                    raise

                delay = self.delay_for(attempt)
                logger.warning(
                    f"{name} attempt {attempt + 1}/{self.max_retries + 1} failed: {e}. "
                    f"Retrying in {delay:.1f}s..."
                )
                await asyncio.sleep(delay)
