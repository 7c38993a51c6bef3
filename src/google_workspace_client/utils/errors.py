"""Exception classes and error classification for Google API responses.

Every failed response is turned into exactly one typed exception by
``create_api_error`` so callers can tell failure kinds apart without
matching on message text.
"""

import json
import re
from typing import Any, Dict, Optional

from ..constants import HTTP_FORBIDDEN, HTTP_NOT_FOUND, HTTP_RATE_LIMITED, HTTP_UNAUTHORIZED


class GoogleApiError(Exception):
    """Base exception for all Google API errors."""

    default_retriable = False

    def __init__(
        self,
        status: int,
        message: str,
        api_type: Optional[str] = None,
        response_body: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize API error.

        Args:
            status: HTTP status code (0 when no response was received)
            message: Error message
            api_type: API that raised the error ("drive", "sheets", "calendar")
            response_body: Raw response body for diagnostics
            details: Additional error details
        """
        super().__init__(message)
        self.status = status
        self.message = message
        self.api_type = api_type
        self.response_body = response_body
        self.details = details or {}

    @property
    def retriable(self) -> bool:
        """Whether the pipeline may retry after this error."""
        return self.default_retriable or self.status >= 500

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for serialization.

        Returns:
            Dictionary representation of the error
        """
        return {
            "status": self.status,
            "message": self.message,
            "api_type": self.api_type,
            "details": self.details,
            "retriable": self.retriable,
            "error_type": self.__class__.__name__,
        }


class TokenExpiredError(GoogleApiError):
    """The access token was rejected (401)."""

    def __init__(
        self,
        message: str = "Access token has expired",
        api_type: Optional[str] = None,
        response_body: Optional[str] = None,
    ):
        super().__init__(
            401,
            message,
            api_type=api_type,
            response_body=response_body,
            details={"requires_reauth": True},
        )


class RateLimitError(GoogleApiError):
    """Rate limit exceeded (429).

    Google quotas are per user and per project; the server may suggest how
    long to wait before the next attempt.
    """

    default_retriable = True

    def __init__(
        self,
        retry_after_ms: Optional[float] = None,
        message: str = "Rate limit exceeded",
        api_type: Optional[str] = None,
        response_body: Optional[str] = None,
    ):
        """Initialize rate limit error.

        Args:
            retry_after_ms: Suggested delay before retrying, in milliseconds
            message: Error message
            api_type: API that raised the error
            response_body: Raw response body
        """
        details = {}
        if retry_after_ms is not None:
            details["retry_after_ms"] = retry_after_ms
        super().__init__(
            429,
            message,
            api_type=api_type,
            response_body=response_body,
            details=details,
        )
        self.retry_after_ms = retry_after_ms


class PermissionDeniedError(GoogleApiError):
    """The caller lacks permission for the resource (403)."""

    def __init__(
        self,
        message: str = "Permission denied",
        api_type: Optional[str] = None,
        response_body: Optional[str] = None,
    ):
        super().__init__(403, message, api_type=api_type, response_body=response_body)


class NotFoundError(GoogleApiError):
    """The requested resource does not exist (404)."""

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        api_type: Optional[str] = None,
        response_body: Optional[str] = None,
    ):
        if message is None:
            message = (
                f"{resource} not found: {resource_id}"
                if resource_id
                else f"{resource} not found"
            )
        details = {"resource": resource}
        if resource_id:
            details["resource_id"] = resource_id
        super().__init__(
            404,
            message,
            api_type=api_type,
            response_body=response_body,
            details=details,
        )


class TransportError(GoogleApiError):
    """The request never produced an HTTP response (network failure, timeout)."""

    default_retriable = True

    def __init__(
        self,
        message: str,
        api_type: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(0, message, api_type=api_type, details=details)


_DIGITS = re.compile(r"(\d+)")


def parse_error_response(body: Optional[str]) -> Optional[Dict[str, Any]]:
    """Parse a Google API error body.

    Args:
        body: Raw response text

    Returns:
        The ``error`` object of the body, or None if the body is not a JSON
        object carrying one
    """
    if not body:
        return None
    try:
        parsed = json.loads(body)
    except ValueError:
        return None
    if not isinstance(parsed, dict):
        return None
    error = parsed.get("error")
    return error if isinstance(error, dict) else None


def _retry_hint_ms(error: Optional[Dict[str, Any]], retry_after: Optional[str]) -> Optional[float]:
    """Extract a retry delay in milliseconds from a header or the error body."""
    if retry_after is not None:
        seconds = str(retry_after).strip()
        if seconds.isascii() and seconds.isdecimal():
            return int(seconds) * 1000

    if not error:
        return None
    errors = error.get("errors")
    if not isinstance(errors, list) or not errors or not isinstance(errors[0], dict):
        return None
    detail = errors[0].get("message")
    if not isinstance(detail, str):
        return None
    match = _DIGITS.search(detail)
    return int(match.group(1)) * 1000 if match else None


def create_api_error(
    status: int,
    body: Optional[str],
    api_type: Optional[str] = None,
    retry_after: Optional[str] = None,
) -> GoogleApiError:
    """Create the typed error for a failed response.

    Args:
        status: HTTP status code
        body: Raw response body
        api_type: API that produced the response
        retry_after: Value of the ``Retry-After`` header, if any

    Returns:
        GoogleApiError subclass matching the status code
    """
    error = parse_error_response(body)
    message = error.get("message") if error else None
    if not isinstance(message, str) or not message:
        message = f"API error: {status}"

    if status == HTTP_UNAUTHORIZED:
        return TokenExpiredError(message, api_type=api_type, response_body=body)
    if status == HTTP_FORBIDDEN:
        return PermissionDeniedError(message, api_type=api_type, response_body=body)
    if status == HTTP_NOT_FOUND:
        return NotFoundError(message=message, api_type=api_type, response_body=body)
    if status == HTTP_RATE_LIMITED:
        return RateLimitError(
            _retry_hint_ms(error, retry_after),
            message,
            api_type=api_type,
            response_body=body,
        )
    return GoogleApiError(status, message, api_type=api_type, response_body=body)
