"""Google Workspace API client modules."""

from .base import GoogleApiClient
from .calendar_api import GoogleCalendarClient
from .drive_api import GoogleDriveClient
from .sheets_api import GoogleSheetsClient

__all__ = [
    "GoogleApiClient",
    "GoogleDriveClient",
    "GoogleSheetsClient",
    "GoogleCalendarClient",
]
