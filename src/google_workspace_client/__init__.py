"""Self-throttling async clients for Google Drive, Sheets and Calendar.

Example:
    from google_workspace_client import ClientConfig, google_api_client

    async with google_api_client("drive", ClientConfig(access_token=token)) as drive:
        files = await drive.list_all_files(max_total=200)
"""

from .client import (
    GoogleApiClient,
    GoogleCalendarClient,
    GoogleDriveClient,
    GoogleSheetsClient,
)
from .config import (
    ClientConfig,
    HttpConfig,
    LoggingConfig,
    RateLimitOverrides,
    RateLimitProfile,
    RetryConfig,
    Settings,
    settings,
)
from .constants import API_ENDPOINTS, API_RATE_LIMITS, GOOGLE_MIME_TYPES, ApiType
from .factory import create_google_api_clients, google_api_client
from .logging_config import configure_logging
from .utils import (
    GoogleApiError,
    NotFoundError,
    PermissionDeniedError,
    RateLimiter,
    RateLimiterStats,
    RateLimitError,
    TokenExpiredError,
    TransportError,
    create_api_error,
    parse_error_response,
)

__all__ = [
    # Factory
    "google_api_client",
    "create_google_api_clients",
    # Clients
    "GoogleApiClient",
    "GoogleDriveClient",
    "GoogleSheetsClient",
    "GoogleCalendarClient",
    # Configuration
    "ApiType",
    "ClientConfig",
    "RateLimitProfile",
    "RateLimitOverrides",
    "RetryConfig",
    "HttpConfig",
    "LoggingConfig",
    "Settings",
    "settings",
    "configure_logging",
    "API_ENDPOINTS",
    "API_RATE_LIMITS",
    "GOOGLE_MIME_TYPES",
    # Rate limiting
    "RateLimiter",
    "RateLimiterStats",
    # Errors
    "GoogleApiError",
    "TokenExpiredError",
    "RateLimitError",
    "PermissionDeniedError",
    "NotFoundError",
    "TransportError",
    "create_api_error",
    "parse_error_response",
]
