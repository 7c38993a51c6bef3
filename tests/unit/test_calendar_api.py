"""Unit tests for the Google Calendar client."""

import json
from datetime import datetime, timezone

import httpx
import pytest
import respx

from google_workspace_client.client.calendar_api import GoogleCalendarClient
from google_workspace_client.schemas.calendar import EventDateTime, NewEvent

CALENDAR = "https://www.googleapis.com/calendar/v3"
CALENDAR_HOST = "www.googleapis.com"
FIXED_NOW = datetime(2026, 1, 22, 10, 0, tzinfo=timezone.utc)


@pytest.mark.asyncio
class TestGoogleCalendarClient:
    """Test cases for GoogleCalendarClient."""

    @pytest.fixture
    def api_client(self, client_kwargs):
        """Create a Google Calendar client with a fixed current time."""
        return GoogleCalendarClient(
            {"access_token": "test_access_token"},
            now=lambda: FIXED_NOW,
            **client_kwargs,
        )

    # Calendars

    @respx.mock
    async def test_list_calendars(self, api_client):
        route = respx.get(f"{CALENDAR}/users/me/calendarList").mock(
            return_value=httpx.Response(200, json={"items": [{"id": "primary"}]})
        )

        result = await api_client.list_calendars()

        assert result == [{"id": "primary"}]
        assert route.calls.last.request.url.params["maxResults"] == "25"

    @respx.mock
    async def test_list_all_calendars(self, api_client):
        route = respx.get(f"{CALENDAR}/users/me/calendarList").mock(
            side_effect=[
                httpx.Response(200, json={"items": [{"id": "a"}], "nextPageToken": "p2"}),
                httpx.Response(200, json={"items": [{"id": "b"}]}),
            ]
        )

        result = await api_client.list_all_calendars()

        assert [c["id"] for c in result] == ["a", "b"]
        assert route.calls[0].request.url.params["maxResults"] == "250"
        assert route.calls[1].request.url.params["pageToken"] == "p2"

    @respx.mock
    async def test_get_calendar_escapes_id(self, api_client):
        route = respx.route(method="GET", host=CALENDAR_HOST).mock(
            return_value=httpx.Response(200, json={"id": "team@group.calendar.google.com"})
        )

        await api_client.get_calendar("team@group.calendar.google.com")

        request = route.calls.last.request
        assert request.url.path == "/calendar/v3/calendars/team@group.calendar.google.com"

    # Events

    @respx.mock
    async def test_list_events(self, api_client):
        route = respx.get(f"{CALENDAR}/calendars/primary/events").mock(
            return_value=httpx.Response(
                200, json={"items": [{"id": "e1"}], "nextPageToken": "next"}
            )
        )

        result = await api_client.list_events(
            "primary",
            max_results=50,
            time_min="2026-01-01T00:00:00Z",
            query="standup",
            single_events=True,
            show_deleted=False,
        )

        assert result["nextPageToken"] == "next"
        params = route.calls.last.request.url.params
        assert params["maxResults"] == "50"
        assert params["timeMin"] == "2026-01-01T00:00:00Z"
        assert params["q"] == "standup"
        assert params["singleEvents"] == "true"
        assert params["showDeleted"] == "false"
        assert "timeMax" not in params
        assert "syncToken" not in params

    @respx.mock
    async def test_list_all_events_follows_pages(self, api_client):
        route = respx.get(f"{CALENDAR}/calendars/primary/events").mock(
            side_effect=[
                httpx.Response(200, json={"items": [{"id": "e1"}, {"id": "e2"}], "nextPageToken": "p2"}),
                httpx.Response(200, json={"items": [{"id": "e3"}]}),
            ]
        )

        events = await api_client.list_all_events("primary", single_events=True)

        assert [e["id"] for e in events] == ["e1", "e2", "e3"]
        first, second = (call.request.url.params for call in route.calls)
        assert first["maxResults"] == "250"
        assert first["singleEvents"] == "true"
        assert "pageToken" not in first
        assert second["pageToken"] == "p2"

    @respx.mock
    async def test_list_all_events_truncates_at_max_total(self, api_client):
        route = respx.get(f"{CALENDAR}/calendars/primary/events").mock(
            return_value=httpx.Response(
                200, json={"items": [{"id": "e1"}, {"id": "e2"}], "nextPageToken": "more"}
            )
        )

        events = await api_client.list_all_events("primary", max_total=3)

        assert len(events) == 3
        assert route.call_count == 2

    @respx.mock
    async def test_get_event(self, api_client):
        respx.get(f"{CALENDAR}/calendars/primary/events/evt1").mock(
            return_value=httpx.Response(200, json={"id": "evt1", "summary": "Standup"})
        )

        result = await api_client.get_event("primary", "evt1")

        assert result["summary"] == "Standup"

    @respx.mock
    async def test_create_event(self, api_client):
        """Test that the event model is sent with camelCase field names."""
        route = respx.post(f"{CALENDAR}/calendars/primary/events").mock(
            return_value=httpx.Response(200, json={"id": "created1"})
        )
        event = NewEvent(
            summary="Planning",
            start=EventDateTime(date_time="2026-01-23T09:00:00Z", time_zone="UTC"),
            end=EventDateTime(date_time="2026-01-23T10:00:00Z", time_zone="UTC"),
        )

        result = await api_client.create_event("primary", event, send_updates="all")

        assert result["id"] == "created1"
        request = route.calls.last.request
        assert request.url.params["sendUpdates"] == "all"
        assert "conferenceDataVersion" not in request.url.params
        assert json.loads(request.content) == {
            "summary": "Planning",
            "start": {"dateTime": "2026-01-23T09:00:00Z", "timeZone": "UTC"},
            "end": {"dateTime": "2026-01-23T10:00:00Z", "timeZone": "UTC"},
        }

    @respx.mock
    async def test_update_event(self, api_client):
        route = respx.patch(f"{CALENDAR}/calendars/primary/events/evt1").mock(
            return_value=httpx.Response(200, json={"id": "evt1", "summary": "Moved"})
        )

        result = await api_client.update_event("primary", "evt1", {"summary": "Moved"})

        assert result["summary"] == "Moved"
        assert json.loads(route.calls.last.request.content) == {"summary": "Moved"}

    @respx.mock
    async def test_delete_event(self, api_client):
        route = respx.delete(f"{CALENDAR}/calendars/primary/events/evt1").mock(
            return_value=httpx.Response(204)
        )

        assert await api_client.delete_event("primary", "evt1", send_updates="none") is None
        assert route.calls.last.request.url.params["sendUpdates"] == "none"

    @respx.mock
    async def test_quick_add(self, api_client):
        route = respx.post(f"{CALENDAR}/calendars/primary/events/quickAdd").mock(
            return_value=httpx.Response(200, json={"id": "quick1"})
        )

        result = await api_client.quick_add("primary", "Lunch tomorrow at noon")

        assert result["id"] == "quick1"
        assert route.calls.last.request.url.params["text"] == "Lunch tomorrow at noon"

    @respx.mock
    async def test_get_upcoming_events(self, api_client):
        """Test the window and ordering of upcoming events."""
        route = respx.get(f"{CALENDAR}/calendars/primary/events").mock(
            return_value=httpx.Response(200, json={"items": [{"id": "e1"}, {"id": "e2"}]})
        )

        events = await api_client.get_upcoming_events()

        assert [e["id"] for e in events] == ["e1", "e2"]
        params = route.calls.last.request.url.params
        assert params["timeMin"] == "2026-01-22T10:00:00Z"
        assert params["timeMax"] == "2026-01-29T10:00:00Z"
        assert params["singleEvents"] == "true"
        assert params["orderBy"] == "startTime"
        assert params["maxResults"] == "10"

    @respx.mock
    async def test_get_upcoming_events_custom_window(self, api_client):
        route = respx.get(f"{CALENDAR}/calendars/primary/events").mock(
            return_value=httpx.Response(200, json={})
        )

        assert await api_client.get_upcoming_events(days=1, max_results=3) == []
        params = route.calls.last.request.url.params
        assert params["timeMax"] == "2026-01-23T10:00:00Z"
        assert params["maxResults"] == "3"


class TestEventSchemas:
    """Validation of calendar request bodies."""

    def test_event_date_time_requires_a_value(self):
        with pytest.raises(ValueError):
            EventDateTime(time_zone="UTC")

    def test_all_day_event(self):
        assert EventDateTime(date="2026-01-23").to_api() == {"date": "2026-01-23"}
