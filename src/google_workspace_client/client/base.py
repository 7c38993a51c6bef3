"""Base Google API client with rate limiting, retries and token refresh.

Every request made by the Drive, Sheets and Calendar clients goes through
``GoogleApiClient.request``:

    pending -> gated (rate limiter) -> in-flight -> succeeded
                                                  -> refresh and retry (401)
                                                  -> back off and retry (429, 5xx)
                                                  -> fail

The retry and refresh paths are an explicit bounded loop. Each logical
request gets ``max_retries`` backoff retries; a 401 gets one token refresh
unless the previous response was also a 401 after a refresh. Every transport
call, including network-level retries, first takes a rate limiter token.
"""

import asyncio
import logging
import time
from typing import Any, Dict, Optional, Union

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
)

from ..config import ClientConfig, RateLimitProfile, Settings, settings as default_settings
from ..constants import API_ENDPOINTS, API_RATE_LIMITS, HTTP_NO_CONTENT, HTTP_RATE_LIMITED, HTTP_UNAUTHORIZED
from ..schemas.base import ApiModel
from ..utils.errors import (
    GoogleApiError,
    RateLimitError,
    TokenExpiredError,
    TransportError,
    create_api_error,
)
from ..utils.rate_limit import Clock, RateLimiter, RateLimiterStats, Sleep

logger = logging.getLogger(__name__)


class GoogleApiClient:
    """Async base client shared by all Google Workspace API clients.

    Features:
    - Token bucket rate limiting per client instance
    - Automatic access token refresh on 401 via the configured callback
    - Backoff and retry on 429 and 5xx responses
    - Typed errors for every failed response
    - Network error retries with tenacity
    """

    def __init__(
        self,
        config: Union[ClientConfig, Dict[str, Any]],
        api_type: str,
        http_client: Optional[httpx.AsyncClient] = None,
        app_settings: Optional[Settings] = None,
        clock: Optional[Clock] = None,
        sleep: Optional[Sleep] = None,
    ):
        """Initialize the client.

        Args:
            config: Access token, optional refresh callback and rate limit overrides
            api_type: One of "drive", "sheets", "calendar"
            http_client: Optional httpx client for API requests
            app_settings: Retry/transport settings; defaults to the global settings
            clock: Monotonic clock in seconds, for the rate limiter
            sleep: Async sleep in seconds, for backoff and network retries
        """
        if isinstance(config, dict):
            config = ClientConfig(**config)
        if api_type not in API_ENDPOINTS:
            raise ValueError(f"Unknown API type: {api_type!r}")

        self._settings = app_settings or default_settings
        self._api_type = api_type
        self._base_url = API_ENDPOINTS[api_type]
        self._access_token = config.access_token
        self._on_token_expired = config.on_token_expired
        self._sleep = sleep or asyncio.sleep

        self._rate_limit_profile: RateLimitProfile = API_RATE_LIMITS[api_type].merged_with(
            config.rate_limits
        )
        self._rate_limiter = RateLimiter(
            self._rate_limit_profile,
            retry_config=self._settings.retry,
            clock=clock or time.monotonic,
            sleep=self._sleep,
        )

        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(self._settings.http.timeout_seconds)
        )

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit - close HTTP client."""
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client if this client created it."""
        if self._owns_http_client:
            await self._http_client.aclose()

    @property
    def api_type(self) -> str:
        return self._api_type

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def rate_limit_profile(self) -> RateLimitProfile:
        return self._rate_limit_profile

    def set_access_token(self, token: str) -> None:
        """Replace the access token used for subsequent requests."""
        self._access_token = token

    def get_rate_limiter_stats(self) -> RateLimiterStats:
        """Rate limiter state for debugging and monitoring."""
        return self._rate_limiter.get_stats()

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json_data: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Make an authenticated, rate-limited API request.

        Args:
            method: HTTP method (GET, POST, etc.)
            path: Path relative to the API base URL, or an absolute URL
            params: Query parameters; None values are dropped
            json_data: JSON body (dict or ApiModel)
            headers: Extra headers, layered over the defaults

        Returns:
            Parsed JSON response, or None for empty responses

        Raises:
            TokenExpiredError: 401 with no refresh callback, or again after a refresh
            RateLimitError: 429 after retries are exhausted
            PermissionDeniedError: 403
            NotFoundError: 404
            GoogleApiError: Any other failure status
            TransportError: Network failure after network retries
        """
        url = self._build_url(path)
        query = _clean_params(params)
        body = json_data.to_api() if isinstance(json_data, ApiModel) else json_data
        max_retries = self._settings.retry.max_retries
        retry_count = 0
        refreshed = False

        while True:
            response = await self._send(method, url, params=query, json_data=body, headers=headers)

            if response.is_success:
                self._rate_limiter.reset_backoff()
                logger.debug(
                    "Google API request succeeded: api_type=%s, method=%s, url=%s, status_code=%s",
                    self._api_type,
                    method,
                    url,
                    response.status_code,
                )
                return self._parse_json(response)

            error = self._classify(response)
            status = response.status_code

            if status == HTTP_UNAUTHORIZED:
                if self._on_token_expired is None or refreshed:
                    logger.error(
                        "Google API authentication failed: api_type=%s, url=%s, refreshed=%s",
                        self._api_type,
                        url,
                        refreshed,
                    )
                    raise error
                refreshed = True
                await self._refresh_access_token()
                continue

            # Only consecutive 401s share one refresh
            refreshed = False

            if _is_retryable_status(status):
                if retry_count < max_retries:
                    retry_count += 1
                    hint = error.retry_after_ms if isinstance(error, RateLimitError) else None
                    logger.warning(
                        "Google API request failed, retrying: api_type=%s, url=%s, status_code=%s, attempt=%s/%s",
                        self._api_type,
                        url,
                        status,
                        retry_count,
                        max_retries,
                    )
                    await self._rate_limiter.backoff(hint)
                    continue

                logger.error(
                    "Google API retries exhausted: api_type=%s, url=%s, status_code=%s, retries=%s",
                    self._api_type,
                    url,
                    status,
                    max_retries,
                )
            else:
                logger.error(
                    "Google API client error: api_type=%s, url=%s, status_code=%s, error=%s",
                    self._api_type,
                    url,
                    status,
                    error.message,
                )
            raise error

    async def request_bytes(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> bytes:
        """Fetch binary content.

        Acquires a rate limit token and resets backoff on success like
        ``request``, but reads the body as bytes and does not retry or
        refresh on failure.

        Raises:
            GoogleApiError: Typed error for any failure status
            TransportError: Network failure after network retries
        """
        url = self._build_url(path)
        response = await self._send(
            "GET", url, params=_clean_params(params), headers=headers, binary=True
        )

        if not response.is_success:
            error = self._classify(response)
            logger.error(
                "Google API binary download failed: api_type=%s, url=%s, status_code=%s",
                self._api_type,
                url,
                response.status_code,
            )
            raise error

        self._rate_limiter.reset_backoff()
        return response.content

    async def get(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Make a GET request."""
        return await self.request("GET", path, params=params, headers=headers)

    async def post(
        self,
        path: str,
        data: Any = None,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Make a POST request."""
        return await self.request("POST", path, params=params, json_data=data, headers=headers)

    async def put(
        self,
        path: str,
        data: Any = None,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Make a PUT request."""
        return await self.request("PUT", path, params=params, json_data=data, headers=headers)

    async def patch(
        self,
        path: str,
        data: Any = None,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Make a PATCH request."""
        return await self.request("PATCH", path, params=params, json_data=data, headers=headers)

    async def delete(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Make a DELETE request."""
        return await self.request("DELETE", path, params=params, headers=headers)

    async def _send(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        json_data: Any = None,
        headers: Optional[Dict[str, str]] = None,
        binary: bool = False,
    ) -> httpx.Response:
        """Issue one HTTP request, retrying network-level failures.

        Every attempt takes a rate limiter token, and the limiter backs off
        between attempts.

        Raises:
            TransportError: If the network failure persists
        """
        request_headers = httpx.Headers({"Authorization": f"Bearer {self._access_token}"})
        if binary:
            request_headers["Accept"] = "*/*"
        else:
            request_headers["Accept"] = "application/json"
            request_headers["Content-Type"] = "application/json"
        if headers:
            request_headers.update(headers)

        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception_type(httpx.TransportError),
                stop=stop_after_attempt(self._settings.http.network_retry_attempts),
                before_sleep=before_sleep_log(logger, logging.WARNING),
                sleep=self._network_backoff,
                reraise=True,
            ):
                with attempt:
                    await self._rate_limiter.acquire()
                    return await self._http_client.request(
                        method,
                        url,
                        params=params,
                        json=json_data,
                        headers=request_headers,
                    )
        except httpx.TimeoutException as e:
            logger.error(
                "Timeout calling Google API: api_type=%s, url=%s, error=%s",
                self._api_type,
                url,
                str(e),
            )
            raise TransportError(
                f"Request to Google {self._api_type} API timed out",
                api_type=self._api_type,
                details={"error": str(e)},
            ) from e
        except httpx.TransportError as e:
            logger.error(
                "Network error calling Google API: api_type=%s, url=%s, error=%s",
                self._api_type,
                url,
                str(e),
            )
            raise TransportError(
                f"Network error calling Google {self._api_type} API",
                api_type=self._api_type,
                details={"error": str(e)},
            ) from e

        raise RuntimeError(f"Unexpected retry loop exit for {method} {url}")

    async def _network_backoff(self, seconds: float) -> None:
        """Sleep hook for network retries; waits out a limiter backoff instead."""
        await self._rate_limiter.backoff()

    async def _refresh_access_token(self) -> None:
        """Obtain a new access token from the configured callback."""
        logger.info("Access token expired, attempting refresh: api_type=%s", self._api_type)
        token = await self._on_token_expired()
        if not token:
            raise TokenExpiredError(
                "Token refresh returned an empty access token",
                api_type=self._api_type,
            )
        self.set_access_token(token)
        logger.info("Successfully refreshed access token: api_type=%s", self._api_type)

    def _classify(self, response: httpx.Response) -> GoogleApiError:
        return create_api_error(
            response.status_code,
            response.text,
            self._api_type,
            retry_after=response.headers.get("Retry-After"),
        )

    def _parse_json(self, response: httpx.Response) -> Any:
        if response.status_code == HTTP_NO_CONTENT or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise GoogleApiError(
                response.status_code,
                "Invalid JSON in Google API response",
                api_type=self._api_type,
                response_body=response.text[:500],
            ) from e

    def _build_url(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self._base_url}{path}"


def _is_retryable_status(status: int) -> bool:
    return status == HTTP_RATE_LIMITED or 500 <= status < 600


def _clean_params(params: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not params:
        return None
    return {key: value for key, value in params.items() if value is not None}
