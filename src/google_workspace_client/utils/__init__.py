"""Utility modules for the Google Workspace API clients."""

from .errors import (
    GoogleApiError,
    TokenExpiredError,
    RateLimitError,
    PermissionDeniedError,
    NotFoundError,
    TransportError,
    create_api_error,
    parse_error_response,
)
from .rate_limit import RateLimiter, RateLimiterStats

__all__ = [
    # Error classes
    "GoogleApiError",
    "TokenExpiredError",
    "RateLimitError",
    "PermissionDeniedError",
    "NotFoundError",
    "TransportError",
    "create_api_error",
    "parse_error_response",
    # Rate limiting
    "RateLimiter",
    "RateLimiterStats",
]
