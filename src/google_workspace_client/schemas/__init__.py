"""Request body schemas for the Google Workspace API clients."""

from .base import ApiModel
from .calendar import EventAttendee, EventDateTime, EventReminders, NewEvent, Reminder
from .drive import FileMetadata, Permission
from .sheets import BatchUpdateValuesRequest, CellValue, ValueRange

__all__ = [
    "ApiModel",
    # Drive
    "FileMetadata",
    "Permission",
    # Sheets
    "CellValue",
    "ValueRange",
    "BatchUpdateValuesRequest",
    # Calendar
    "EventDateTime",
    "EventAttendee",
    "Reminder",
    "EventReminders",
    "NewEvent",
]
