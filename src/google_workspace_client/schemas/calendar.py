"""Calendar request body schemas."""

from __future__ import annotations

from typing import Literal

from pydantic import model_validator

from .base import ApiModel


class EventDateTime(ApiModel):
    """Start or end of an event: ``date`` for all-day, ``date_time`` otherwise."""

    date: str | None = None
    date_time: str | None = None
    time_zone: str | None = None

    @model_validator(mode="after")
    def check_date_or_date_time(self) -> "EventDateTime":
        if not self.date and not self.date_time:
            raise ValueError("Either date or date_time is required")
        return self


class EventAttendee(ApiModel):
    email: str
    optional: bool | None = None


class Reminder(ApiModel):
    method: Literal["email", "popup"]
    minutes: int


class EventReminders(ApiModel):
    use_default: bool
    overrides: list[Reminder] | None = None


class NewEvent(ApiModel):
    """Input for creating an event."""

    summary: str
    description: str | None = None
    location: str | None = None
    start: EventDateTime
    end: EventDateTime
    attendees: list[EventAttendee] | None = None
    recurrence: list[str] | None = None
    reminders: EventReminders | None = None
    color_id: str | None = None
    visibility: Literal["default", "public", "private", "confidential"] | None = None
