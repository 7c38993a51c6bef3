"""Google Calendar API v3 client."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Union
from urllib.parse import quote

from .base import GoogleApiClient
from ..config import ClientConfig
from ..schemas.calendar import NewEvent

logger = logging.getLogger(__name__)

CALENDAR_LIST_PATH = "/users/me/calendarList"


def _calendar_path(calendar_id: str) -> str:
    return f"/calendars/{quote(calendar_id, safe='')}"


def _event_path(calendar_id: str, event_id: str) -> str:
    return f"{_calendar_path(calendar_id)}/events/{quote(event_id, safe='')}"


def _rfc3339(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


class GoogleCalendarClient(GoogleApiClient):
    """Async client for Google Calendar API v3.

    Use ``"primary"`` as the calendar ID for the user's primary calendar.
    """

    def __init__(
        self,
        config: Union[ClientConfig, Dict[str, Any]],
        now: Optional[Callable[[], datetime]] = None,
        **kwargs: Any,
    ):
        super().__init__(config, "calendar", **kwargs)
        self._now = now or (lambda: datetime.now(timezone.utc))

    async def list_calendars(self, page_size: int = 25) -> List[Dict[str, Any]]:
        """List the first page of the user's calendars."""
        response = await self.get(CALENDAR_LIST_PATH, {"maxResults": page_size}) or {}
        return response.get("items", [])

    async def list_all_calendars(self) -> List[Dict[str, Any]]:
        """List all of the user's calendars across pages."""
        all_calendars: List[Dict[str, Any]] = []
        page_token: Optional[str] = None

        while True:
            response = await self.get(
                CALENDAR_LIST_PATH,
                {"maxResults": 250, "pageToken": page_token},
            ) or {}
            all_calendars.extend(response.get("items", []))
            page_token = response.get("nextPageToken")
            if not page_token:
                return all_calendars

    async def get_calendar(self, calendar_id: str) -> Dict[str, Any]:
        """Get a calendar's metadata."""
        return await self.get(_calendar_path(calendar_id))

    async def list_events(
        self,
        calendar_id: str,
        max_results: Optional[int] = None,
        page_token: Optional[str] = None,
        time_min: Optional[str] = None,
        time_max: Optional[str] = None,
        query: Optional[str] = None,
        single_events: Optional[bool] = None,
        order_by: Optional[str] = None,
        show_deleted: Optional[bool] = None,
        show_hidden_invitations: Optional[bool] = None,
        time_zone: Optional[str] = None,
        sync_token: Optional[str] = None,
    ) -> Dict[str, Any]:
        """List events from a calendar.

        Args:
            calendar_id: Calendar ID
            max_results: Events per page (1-2500)
            page_token: Token for the next page
            time_min: Lower bound (RFC 3339) for event end time
            time_max: Upper bound (RFC 3339) for event start time
            query: Free text filter
            single_events: Expand recurring events into instances
            order_by: "startTime" (requires single_events) or "updated"
            show_deleted: Include cancelled events
            show_hidden_invitations: Include hidden invitations
            time_zone: Time zone used in the response
            sync_token: Token from a previous listing's ``nextSyncToken``

        Returns:
            Response with ``items`` and optional ``nextPageToken`` / ``nextSyncToken``
        """
        params = {
            "maxResults": max_results,
            "pageToken": page_token,
            "timeMin": time_min,
            "timeMax": time_max,
            "q": query,
            "singleEvents": single_events,
            "orderBy": order_by,
            "showDeleted": show_deleted,
            "showHiddenInvitations": show_hidden_invitations,
            "timeZone": time_zone,
            "syncToken": sync_token,
        }
        response = await self.get(f"{_calendar_path(calendar_id)}/events", params) or {}

        logger.info(
            "Listed calendar events: calendar_id=%s, event_count=%s, has_next_page=%s",
            calendar_id,
            len(response.get("items", [])),
            bool(response.get("nextPageToken")),
        )
        return response

    async def list_all_events(
        self,
        calendar_id: str,
        max_total: Optional[int] = None,
        max_results: int = 250,
        **options: Any,
    ) -> List[Dict[str, Any]]:
        """List all events, following ``nextPageToken`` until exhausted.

        Args:
            calendar_id: Calendar ID
            max_total: Stop and truncate once this many events are collected
            max_results: Events per page
            **options: Any other ``list_events`` argument except ``page_token``
        """
        options.pop("page_token", None)
        all_events: List[Dict[str, Any]] = []
        page_token: Optional[str] = None

        while True:
            response = await self.list_events(
                calendar_id,
                max_results=max_results,
                page_token=page_token,
                **options,
            )
            all_events.extend(response.get("items", []))

            if max_total is not None and len(all_events) >= max_total:
                return all_events[:max_total]

            page_token = response.get("nextPageToken")
            if not page_token:
                return all_events

    async def get_event(self, calendar_id: str, event_id: str) -> Dict[str, Any]:
        """Get a single event."""
        return await self.get(_event_path(calendar_id, event_id))

    async def create_event(
        self,
        calendar_id: str,
        event: Union[NewEvent, Dict[str, Any]],
        send_updates: Optional[str] = None,
        conference_data_version: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Create an event.

        Args:
            calendar_id: Calendar ID
            event: Event to create
            send_updates: Who gets notified: "all", "externalOnly" or "none"
            conference_data_version: 1 to allow creating a Meet conference

        Returns:
            Created event
        """
        params = {
            "sendUpdates": send_updates,
            "conferenceDataVersion": conference_data_version,
        }
        created = await self.post(f"{_calendar_path(calendar_id)}/events", event, params=params)
        logger.info(
            "Created calendar event: calendar_id=%s, event_id=%s",
            calendar_id,
            created.get("id") if created else None,
        )
        return created

    async def update_event(
        self,
        calendar_id: str,
        event_id: str,
        event: Dict[str, Any],
        send_updates: Optional[str] = None,
        conference_data_version: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Patch an existing event with the given fields."""
        params = {
            "sendUpdates": send_updates,
            "conferenceDataVersion": conference_data_version,
        }
        return await self.patch(_event_path(calendar_id, event_id), event, params=params)

    async def delete_event(
        self,
        calendar_id: str,
        event_id: str,
        send_updates: Optional[str] = None,
    ) -> None:
        """Delete an event."""
        logger.info("Deleting calendar event: calendar_id=%s, event_id=%s", calendar_id, event_id)
        await self.delete(_event_path(calendar_id, event_id), {"sendUpdates": send_updates})

    async def quick_add(self, calendar_id: str, text: str) -> Dict[str, Any]:
        """Create an event from natural language, e.g. "Lunch tomorrow at noon"."""
        return await self.post(
            f"{_calendar_path(calendar_id)}/events/quickAdd",
            params={"text": text},
        )

    async def get_upcoming_events(
        self,
        days: int = 7,
        max_results: int = 10,
    ) -> List[Dict[str, Any]]:
        """Upcoming events on the primary calendar, sorted by start time.

        Args:
            days: Number of days to look ahead
            max_results: Maximum events to return
        """
        now = self._now()
        response = await self.list_events(
            "primary",
            time_min=_rfc3339(now),
            time_max=_rfc3339(now + timedelta(days=days)),
            single_events=True,
            order_by="startTime",
            max_results=max_results,
        )
        return response.get("items", [])
