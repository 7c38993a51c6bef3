"""Rate limiting utilities for Google API clients.

Provides a token bucket limiter with exponential backoff for throttled or
failing requests. The bucket starts full, each request consumes one token,
and tokens are replenished continuously from the elapsed time.
"""

import asyncio
import math
import random
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

import structlog

from ..config import RateLimitProfile, RetryConfig, settings

logger = structlog.get_logger(__name__)

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RateLimiterStats:
    """Point-in-time view of a limiter, for observability and tests."""

    tokens: float
    is_in_backoff: bool
    remaining_backoff_ms: float
    backoff_attempt: int


class RateLimiter:
    """Token bucket rate limiter with exponential backoff.

    Features:
    - Smooth rate limiting with a burst allowance of ``burst_size``
    - Lazy token replenishment from a monotonic clock
    - Exponential backoff with jitter after 429 / 5xx responses
    - FIFO admission of concurrent ``acquire`` callers

    All state belongs to one client. Every mutation reads the clock once,
    and no mutation spans an ``await``, so the event loop never observes a
    half-updated bucket.
    """

    def __init__(
        self,
        profile: RateLimitProfile,
        retry_config: Optional[RetryConfig] = None,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ):
        """Initialize the rate limiter.

        Args:
            profile: Token bucket profile (capacity and refill rate)
            retry_config: Backoff policy; defaults to the global settings
            clock: Monotonic clock returning seconds
            sleep: Async sleep taking seconds
        """
        self.profile = profile
        self.retry_config = retry_config or settings.retry
        self._clock = clock
        self._sleep = sleep
        self._tokens_per_ms = profile.tokens_per_ms
        self._tokens = float(profile.burst_size)
        self._last_refill = self._now_ms()
        self._backoff_until = 0.0
        self._backoff_attempt = 0
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        """Wait until a token is available, then consume it."""
        async with self._lock:
            while True:
                remaining = self.get_remaining_backoff_ms()
                if remaining > 0:
                    logger.debug("Waiting for backoff to expire", remaining_ms=round(remaining, 1))
                    await self._sleep(remaining / 1000)

                self._refill(self._now_ms())
                if self._tokens >= 1:
                    self._tokens -= 1
                    return

                wait_ms = self._wait_time_ms()
                logger.debug(
                    "Rate limit bucket empty, waiting for refill",
                    wait_ms=wait_ms,
                    tokens=round(self._tokens, 3),
                )
                await self._sleep(wait_ms / 1000)

    def try_acquire(self) -> bool:
        """Consume a token without waiting.

        Returns:
            True if a token was consumed, False if in backoff or empty
        """
        now = self._now_ms()
        if now < self._backoff_until:
            return False

        self._refill(now)
        if self._tokens >= 1:
            self._tokens -= 1
            return True
        return False

    async def backoff(self, suggested_delay_ms: Optional[float] = None) -> None:
        """Enter backoff after a throttled or failed request and wait it out.

        Args:
            suggested_delay_ms: Server-provided delay hint; when absent the
                exponential schedule is used
        """
        self._backoff_attempt += 1

        if suggested_delay_ms is not None:
            delay = max(0.0, float(suggested_delay_ms))
        else:
            delay = self._calculate_backoff_delay()

        jitter = delay * self.retry_config.jitter_factor * random.random()
        total = delay + jitter

        now = self._now_ms()
        self._backoff_until = max(self._backoff_until, now + total)

        logger.info(
            "Backing off",
            attempt=self._backoff_attempt,
            delay_ms=round(total, 1),
            suggested=suggested_delay_ms is not None,
        )
        await self._sleep(total / 1000)

    def reset_backoff(self) -> None:
        """Clear backoff state. Called after every successful request."""
        self._backoff_attempt = 0
        self._backoff_until = 0.0

    def is_in_backoff(self) -> bool:
        """Check if currently in a backoff window."""
        return self._now_ms() < self._backoff_until

    def get_remaining_backoff_ms(self) -> float:
        """Milliseconds left in the current backoff window."""
        return max(0.0, self._backoff_until - self._now_ms())

    def get_token_count(self) -> float:
        """Current token count after replenishment."""
        self._refill(self._now_ms())
        return self._tokens

    @property
    def backoff_attempt(self) -> int:
        """Consecutive backoffs since the last success or reset."""
        return self._backoff_attempt

    def get_stats(self) -> RateLimiterStats:
        """Snapshot of the limiter state."""
        now = self._now_ms()
        self._refill(now)
        return RateLimiterStats(
            tokens=self._tokens,
            is_in_backoff=now < self._backoff_until,
            remaining_backoff_ms=max(0.0, self._backoff_until - now),
            backoff_attempt=self._backoff_attempt,
        )

    def _now_ms(self) -> float:
        return self._clock() * 1000

    def _refill(self, now: float) -> None:
        elapsed = max(0.0, now - self._last_refill)
        self._tokens = min(
            float(self.profile.burst_size),
            self._tokens + elapsed * self._tokens_per_ms,
        )
        self._last_refill = now

    def _wait_time_ms(self) -> int:
        """Milliseconds until one full token has accrued."""
        tokens_needed = 1 - self._tokens
        return max(1, math.ceil(tokens_needed / self._tokens_per_ms))

    def _calculate_backoff_delay(self) -> float:
        """Exponential delay for the current attempt, capped at the maximum."""
        config = self.retry_config
        delay = config.initial_backoff_ms * (config.backoff_multiplier ** self._backoff_attempt)
        return min(delay, config.max_backoff_ms)
