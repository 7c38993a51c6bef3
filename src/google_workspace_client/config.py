"""Configuration management for the Google Workspace API clients.

Uses Pydantic settings for validation and environment variable loading.
Per-client configuration (access token, refresh callback, rate limit
overrides) is carried by ``ClientConfig``; process-wide retry, transport and
logging settings come from the environment through ``Settings``.
"""

from typing import Any, Awaitable, Callable, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

TokenRefreshCallback = Callable[[], Awaitable[str]]


class RateLimitProfile(BaseModel):
    """Token bucket profile for one Google API.

    Immutable: overrides produce a new profile via ``merged_with``.
    """

    model_config = ConfigDict(frozen=True)

    requests_per_minute: int = Field(
        gt=0,
        description="Project-wide requests per minute (informational)",
    )
    requests_per_user_per_minute: float = Field(
        gt=0,
        description="Per-user requests per window; drives the refill rate",
    )
    burst_size: int = Field(
        gt=0,
        description="Bucket capacity",
    )
    window_ms: int = Field(
        default=60_000,
        gt=0,
        description="Window the per-user rate is measured over, in milliseconds",
    )

    @property
    def tokens_per_ms(self) -> float:
        """Refill rate in tokens per millisecond."""
        return self.requests_per_user_per_minute / self.window_ms

    def merged_with(
        self, overrides: Optional[Union["RateLimitOverrides", Dict[str, Any]]]
    ) -> "RateLimitProfile":
        """Return a new profile with the non-empty override fields applied."""
        if overrides is None:
            return self
        if isinstance(overrides, dict):
            overrides = RateLimitOverrides(**overrides)
        values = self.model_dump()
        values.update(overrides.model_dump(exclude_none=True))
        return RateLimitProfile(**values)


class RateLimitOverrides(BaseModel):
    """Partial ``RateLimitProfile``; unset fields keep the API default."""

    model_config = ConfigDict(extra="forbid")

    requests_per_minute: Optional[int] = Field(default=None, gt=0)
    requests_per_user_per_minute: Optional[float] = Field(default=None, gt=0)
    burst_size: Optional[int] = Field(default=None, gt=0)
    window_ms: Optional[int] = Field(default=None, gt=0)


class ClientConfig(BaseModel):
    """Configuration for constructing one API client.

    Each client takes its own copy; nothing here is shared between clients.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    access_token: str = Field(
        description="OAuth access token presented as a bearer credential",
    )
    on_token_expired: Optional[TokenRefreshCallback] = Field(
        default=None,
        description="Async callback returning a fresh access token after a 401",
    )
    rate_limits: Optional[RateLimitOverrides] = Field(
        default=None,
        description="Partial override of the API's default rate limit profile",
    )


class RetryConfig(BaseSettings):
    """Retry and backoff policy for the request pipeline."""

    model_config = SettingsConfigDict(env_prefix="GOOGLE_API_RETRY_")

    max_retries: int = Field(
        default=3,
        ge=0,
        description="Retries for rate-limited and server-error responses",
    )
    initial_backoff_ms: float = Field(
        default=1000,
        gt=0,
        description="Base backoff delay in milliseconds",
    )
    max_backoff_ms: float = Field(
        default=30_000,
        gt=0,
        description="Upper bound for a single backoff delay in milliseconds",
    )
    backoff_multiplier: float = Field(
        default=2.0,
        ge=1.0,
        description="Exponential growth factor per consecutive backoff",
    )
    jitter_factor: float = Field(
        default=0.1,
        ge=0.0,
        le=1.0,
        description="Maximum random jitter as a fraction of the delay",
    )

    @field_validator("max_backoff_ms")
    def validate_max_backoff(cls, v: float, info) -> float:
        """Ensure the cap is not below the initial delay."""
        initial = info.data.get("initial_backoff_ms")
        if initial is not None and v < initial:
            raise ValueError("max_backoff_ms must be >= initial_backoff_ms")
        return v


class HttpConfig(BaseSettings):
    """Transport settings for the underlying httpx client."""

    model_config = SettingsConfigDict(env_prefix="GOOGLE_API_HTTP_")

    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Per-request timeout in seconds",
    )
    network_retry_attempts: int = Field(
        default=3,
        ge=1,
        description="Attempts for a request that fails at the network level",
    )


class LoggingConfig(BaseSettings):
    """Structured logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Log level",
    )
    format: Literal["json", "text"] = Field(
        default="json",
        description="Log format",
    )


class Settings(BaseSettings):
    """Root settings container."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    service_name: str = Field(
        default="google-workspace-client",
        description="Service name for observability",
    )

    retry: RetryConfig = Field(default_factory=RetryConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# Global settings instance
settings = Settings()
