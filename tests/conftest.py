"""Shared fixtures for unit tests."""

from typing import List

import pytest

from google_workspace_client.config import HttpConfig, RetryConfig, Settings


class FakeClock:
    """Monotonic clock whose ``sleep`` advances time instead of waiting."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += max(0.0, seconds)


@pytest.fixture
def clock() -> FakeClock:
    """Fake clock starting at t=1000s."""
    return FakeClock()


@pytest.fixture
def retry_config() -> RetryConfig:
    """Default retry policy, independent of the environment."""
    return RetryConfig(
        max_retries=3,
        initial_backoff_ms=1000,
        max_backoff_ms=30_000,
        backoff_multiplier=2.0,
        jitter_factor=0.1,
    )


@pytest.fixture
def app_settings(retry_config) -> Settings:
    """Settings with two network attempts so transport tests stay short."""
    return Settings(
        retry=retry_config,
        http=HttpConfig(timeout_seconds=5.0, network_retry_attempts=2),
    )


@pytest.fixture
def client_kwargs(clock, app_settings) -> dict:
    """Constructor kwargs wiring a client to the fake clock."""
    return {"app_settings": app_settings, "clock": clock, "sleep": clock.sleep}
