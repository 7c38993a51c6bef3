"""Unit tests for the Google Sheets client."""

import json

import httpx
import pytest
import respx

from google_workspace_client.client.sheets_api import GoogleSheetsClient
from google_workspace_client.schemas.sheets import BatchUpdateValuesRequest, ValueRange

SHEETS_HOST = "sheets.googleapis.com"


@pytest.mark.asyncio
class TestGoogleSheetsClient:
    """Test cases for GoogleSheetsClient."""

    @pytest.fixture
    def api_client(self, client_kwargs):
        """Create a Google Sheets client instance."""
        return GoogleSheetsClient({"access_token": "test_access_token"}, **client_kwargs)

    @respx.mock
    async def test_list_spreadsheets_uses_drive_files(self, api_client):
        """Test that spreadsheets are listed through the Drive files endpoint."""
        route = respx.get("https://www.googleapis.com/drive/v3/files").mock(
            return_value=httpx.Response(200, json={"files": [{"id": "s1", "name": "Budget"}]})
        )

        result = await api_client.list_spreadsheets(page_size=10)

        assert result == [{"id": "s1", "name": "Budget"}]
        params = route.calls.last.request.url.params
        assert params["q"] == "mimeType='application/vnd.google-apps.spreadsheet'"
        assert params["orderBy"] == "modifiedTime desc"
        assert params["pageSize"] == "10"
        assert params["fields"].startswith("files(")
        assert api_client.get_rate_limiter_stats().tokens == 9

    @respx.mock
    async def test_get_spreadsheet(self, api_client):
        route = respx.get(f"https://{SHEETS_HOST}/v4/spreadsheets/sheet123").mock(
            return_value=httpx.Response(
                200, json={"spreadsheetId": "sheet123", "properties": {"title": "Budget"}}
            )
        )

        result = await api_client.get_spreadsheet("sheet123")

        assert result["properties"]["title"] == "Budget"
        assert "includeGridData" not in route.calls.last.request.url.params

    @respx.mock
    async def test_get_spreadsheet_with_grid_data(self, api_client):
        route = respx.get(f"https://{SHEETS_HOST}/v4/spreadsheets/sheet123").mock(
            return_value=httpx.Response(200, json={"spreadsheetId": "sheet123"})
        )

        await api_client.get_spreadsheet("sheet123", include_grid_data=True)

        assert route.calls.last.request.url.params["includeGridData"] == "true"

    @respx.mock
    async def test_get_values(self, api_client):
        route = respx.route(method="GET", host=SHEETS_HOST).mock(
            return_value=httpx.Response(
                200,
                json={"range": "Sheet1!A1:B2", "values": [["Name", "Score"], ["Ada", "10"]]},
            )
        )

        values = await api_client.get_values(
            "sheet123", "Sheet1!A1:B2", value_render_option="UNFORMATTED_VALUE"
        )

        assert values == [["Name", "Score"], ["Ada", "10"]]
        request = route.calls.last.request
        assert request.url.path == "/v4/spreadsheets/sheet123/values/Sheet1!A1:B2"
        assert request.url.params["valueRenderOption"] == "UNFORMATTED_VALUE"

    @respx.mock
    async def test_get_values_empty_range(self, api_client):
        respx.route(method="GET", host=SHEETS_HOST).mock(
            return_value=httpx.Response(200, json={"range": "Sheet1!A1:B2"})
        )

        assert await api_client.get_values("sheet123", "Sheet1!A1:B2") == []

    @respx.mock
    async def test_batch_get_values(self, api_client):
        route = respx.route(method="GET", host=SHEETS_HOST).mock(
            return_value=httpx.Response(
                200, json={"spreadsheetId": "sheet123", "valueRanges": [{}, {}]}
            )
        )

        result = await api_client.batch_get_values("sheet123", ["A1:B2", "Sheet2!C1"])

        assert len(result["valueRanges"]) == 2
        request = route.calls.last.request
        assert request.url.path == "/v4/spreadsheets/sheet123/values:batchGet"
        assert request.url.params.get_list("ranges") == ["A1:B2", "Sheet2!C1"]

    @respx.mock
    async def test_update_values(self, api_client):
        """Test that update sends a ROWS value range with USER_ENTERED input."""
        route = respx.route(method="PUT", host=SHEETS_HOST).mock(
            return_value=httpx.Response(200, json={"updatedCells": 2})
        )

        result = await api_client.update_values("sheet123", "Sheet1!A1:B1", [["a", 1]])

        assert result == {"updatedCells": 2}
        request = route.calls.last.request
        assert request.url.path == "/v4/spreadsheets/sheet123/values/Sheet1!A1:B1"
        assert request.url.params["valueInputOption"] == "USER_ENTERED"
        assert "includeValuesInResponse" not in request.url.params
        assert json.loads(request.content) == {
            "range": "Sheet1!A1:B1",
            "majorDimension": "ROWS",
            "values": [["a", 1]],
        }

    @respx.mock
    async def test_batch_update_values(self, api_client):
        route = respx.route(method="POST", host=SHEETS_HOST).mock(
            return_value=httpx.Response(200, json={"totalUpdatedCells": 3})
        )
        request_body = BatchUpdateValuesRequest(
            value_input_option="RAW",
            data=[
                ValueRange(range="A1", values=[[1]]),
                ValueRange(range="B1:C1", values=[["x", True]]),
            ],
        )

        await api_client.batch_update_values("sheet123", request_body)

        request = route.calls.last.request
        assert request.url.path == "/v4/spreadsheets/sheet123/values:batchUpdate"
        assert json.loads(request.content) == {
            "valueInputOption": "RAW",
            "data": [
                {"range": "A1", "majorDimension": "ROWS", "values": [[1]]},
                {"range": "B1:C1", "majorDimension": "ROWS", "values": [["x", True]]},
            ],
        }

    @respx.mock
    async def test_append_values(self, api_client):
        route = respx.route(method="POST", host=SHEETS_HOST).mock(
            return_value=httpx.Response(200, json={"updates": {"updatedRows": 1}})
        )

        await api_client.append_values(
            "sheet123", "Log!A:C", [["2026-01-01", "ok", 3]], insert_data_option="INSERT_ROWS"
        )

        request = route.calls.last.request
        assert request.url.path == "/v4/spreadsheets/sheet123/values/Log!A:C:append"
        assert request.url.params["valueInputOption"] == "USER_ENTERED"
        assert request.url.params["insertDataOption"] == "INSERT_ROWS"
        assert json.loads(request.content)["values"] == [["2026-01-01", "ok", 3]]

    @respx.mock
    async def test_append_row(self, api_client):
        route = respx.route(method="POST", host=SHEETS_HOST).mock(
            return_value=httpx.Response(200, json={"updates": {"updatedRows": 1}})
        )

        await api_client.append_row("sheet123", "Log", ["a", "b"])

        request = route.calls.last.request
        assert request.url.path == "/v4/spreadsheets/sheet123/values/Log!A:Z:append"
        assert json.loads(request.content) == {
            "range": "Log!A:Z",
            "majorDimension": "ROWS",
            "values": [["a", "b"]],
        }

    @respx.mock
    async def test_clear_values(self, api_client):
        route = respx.route(method="POST", host=SHEETS_HOST).mock(
            return_value=httpx.Response(200, json={"clearedRange": "Sheet1!A1:Z100"})
        )

        assert await api_client.clear_values("sheet123", "Sheet1!A1:Z100") is None
        assert route.calls.last.request.url.path == "/v4/spreadsheets/sheet123/values/Sheet1!A1:Z100:clear"

    @respx.mock
    async def test_create_spreadsheet(self, api_client):
        route = respx.post(f"https://{SHEETS_HOST}/v4/spreadsheets").mock(
            return_value=httpx.Response(200, json={"spreadsheetId": "new123"})
        )

        result = await api_client.create_spreadsheet("Q3 Report")

        assert result["spreadsheetId"] == "new123"
        assert json.loads(route.calls.last.request.content) == {"properties": {"title": "Q3 Report"}}
