"""Factory functions for building typed Google API clients.

Example:
    sheets = google_api_client("sheets", ClientConfig(access_token=token))
    spreadsheets = await sheets.list_spreadsheets()

    calendar = google_api_client(
        "calendar",
        ClientConfig(access_token=token, on_token_expired=refresh_token),
    )
    events = await calendar.get_upcoming_events()
"""

from typing import Any, Dict, Literal, TypedDict, Union, overload

from .client import GoogleCalendarClient, GoogleDriveClient, GoogleSheetsClient
from .config import ClientConfig
from .constants import API_TYPES

AnyClient = Union[GoogleDriveClient, GoogleSheetsClient, GoogleCalendarClient]

_CLIENT_CLASSES = {
    "drive": GoogleDriveClient,
    "sheets": GoogleSheetsClient,
    "calendar": GoogleCalendarClient,
}


class GoogleApiClients(TypedDict):
    drive: GoogleDriveClient
    sheets: GoogleSheetsClient
    calendar: GoogleCalendarClient


@overload
def google_api_client(
    api: Literal["drive"], config: Union[ClientConfig, Dict[str, Any]], **kwargs: Any
) -> GoogleDriveClient: ...


@overload
def google_api_client(
    api: Literal["sheets"], config: Union[ClientConfig, Dict[str, Any]], **kwargs: Any
) -> GoogleSheetsClient: ...


@overload
def google_api_client(
    api: Literal["calendar"], config: Union[ClientConfig, Dict[str, Any]], **kwargs: Any
) -> GoogleCalendarClient: ...


def google_api_client(
    api: str,
    config: Union[ClientConfig, Dict[str, Any]],
    **kwargs: Any,
) -> AnyClient:
    """Create the typed client for ``api``.

    Each client gets its own rate limiter sized for that API.

    Args:
        api: "drive", "sheets" or "calendar"
        config: Access token, optional refresh callback and rate limit overrides
        **kwargs: Passed to the client constructor (http_client, app_settings, ...)

    Raises:
        ValueError: If ``api`` is not a known API type
    """
    try:
        client_class = _CLIENT_CLASSES[api]
    except KeyError:
        raise ValueError(
            f"Unknown API type: {api!r} (expected one of {', '.join(API_TYPES)})"
        ) from None
    return client_class(config, **kwargs)


def create_google_api_clients(
    config: Union[ClientConfig, Dict[str, Any]],
    **kwargs: Any,
) -> GoogleApiClients:
    """Create Drive, Sheets and Calendar clients from one config.

    The clients share no state: each copies the token into its own
    credential and builds its own rate limiter.
    """
    return GoogleApiClients(
        drive=google_api_client("drive", config, **kwargs),
        sheets=google_api_client("sheets", config, **kwargs),
        calendar=google_api_client("calendar", config, **kwargs),
    )
