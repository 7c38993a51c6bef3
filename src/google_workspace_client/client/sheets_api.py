"""Google Sheets API v4 client."""

import logging
from typing import Any, Dict, List, Optional, Sequence, Union
from urllib.parse import quote

from .base import GoogleApiClient
from .drive_api import DEFAULT_FILE_FIELDS
from ..config import ClientConfig
from ..constants import API_ENDPOINTS, GOOGLE_MIME_TYPES
from ..schemas.sheets import BatchUpdateValuesRequest, CellValue

logger = logging.getLogger(__name__)


def _spreadsheet_path(spreadsheet_id: str) -> str:
    return f"/spreadsheets/{quote(spreadsheet_id, safe='')}"


def _values_path(spreadsheet_id: str, range_: str) -> str:
    return f"{_spreadsheet_path(spreadsheet_id)}/values/{quote(range_, safe='')}"


class GoogleSheetsClient(GoogleApiClient):
    """Async client for Google Sheets API v4.

    Provides methods for:
    - Listing spreadsheets (through the Drive files endpoint)
    - Getting spreadsheet metadata
    - Reading, updating, appending and clearing cell values
    - Batch reads and writes
    """

    def __init__(self, config: Union[ClientConfig, Dict[str, Any]], **kwargs: Any):
        super().__init__(config, "sheets", **kwargs)

    async def list_spreadsheets(self, page_size: int = 25) -> List[Dict[str, Any]]:
        """List spreadsheets the user can access, most recently modified first.

        The Drive files endpoint is called through this client's own rate
        limiter and retry pipeline.
        """
        params = {
            "q": f"mimeType='{GOOGLE_MIME_TYPES['SPREADSHEET']}'",
            "fields": f"files({DEFAULT_FILE_FIELDS})",
            "orderBy": "modifiedTime desc",
            "pageSize": page_size,
        }
        response = await self.get(f"{API_ENDPOINTS['drive']}/files", params) or {}
        files = response.get("files", [])

        logger.info("Listed spreadsheets: count=%s", len(files))
        return files

    async def get_spreadsheet(
        self,
        spreadsheet_id: str,
        include_grid_data: bool = False,
    ) -> Dict[str, Any]:
        """Get a spreadsheet's metadata, optionally with cell data."""
        params = {"includeGridData": True} if include_grid_data else None
        return await self.get(_spreadsheet_path(spreadsheet_id), params)

    async def get_values(
        self,
        spreadsheet_id: str,
        range_: str,
        value_render_option: Optional[str] = None,
        date_time_render_option: Optional[str] = None,
    ) -> List[List[CellValue]]:
        """Get values from a range.

        Args:
            spreadsheet_id: The spreadsheet ID
            range_: A1 notation range (e.g. "Sheet1!A1:B10")
            value_render_option: "FORMATTED_VALUE", "UNFORMATTED_VALUE" or "FORMULA"
            date_time_render_option: "SERIAL_NUMBER" or "FORMATTED_STRING"

        Returns:
            Rows of cell values; empty if the range has no data
        """
        params = {
            "valueRenderOption": value_render_option,
            "dateTimeRenderOption": date_time_render_option,
        }
        response = await self.get(_values_path(spreadsheet_id, range_), params) or {}
        return response.get("values", [])

    async def batch_get_values(
        self,
        spreadsheet_id: str,
        ranges: Sequence[str],
        value_render_option: Optional[str] = None,
        date_time_render_option: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Get values from several ranges in one request.

        Returns:
            Response with ``spreadsheetId`` and one ``valueRanges`` entry per range
        """
        params = {
            "ranges": list(ranges),
            "valueRenderOption": value_render_option,
            "dateTimeRenderOption": date_time_render_option,
        }
        return await self.get(f"{_spreadsheet_path(spreadsheet_id)}/values:batchGet", params)

    async def update_values(
        self,
        spreadsheet_id: str,
        range_: str,
        values: List[List[CellValue]],
        value_input_option: str = "USER_ENTERED",
        include_values_in_response: bool = False,
    ) -> Dict[str, Any]:
        """Overwrite values in a range.

        Args:
            spreadsheet_id: The spreadsheet ID
            range_: A1 notation range
            values: Rows of values to write
            value_input_option: "RAW" stores values as-is, "USER_ENTERED"
                parses them as if typed into the UI
            include_values_in_response: Echo the written values back

        Returns:
            Update result with the updated range and counts
        """
        params = {
            "valueInputOption": value_input_option,
            "includeValuesInResponse": True if include_values_in_response else None,
        }
        body = {"range": range_, "majorDimension": "ROWS", "values": values}
        return await self.put(_values_path(spreadsheet_id, range_), body, params=params)

    async def batch_update_values(
        self,
        spreadsheet_id: str,
        request: Union[BatchUpdateValuesRequest, Dict[str, Any]],
    ) -> Dict[str, Any]:
        """Update several ranges in one request."""
        return await self.post(f"{_spreadsheet_path(spreadsheet_id)}/values:batchUpdate", request)

    async def append_values(
        self,
        spreadsheet_id: str,
        range_: str,
        values: List[List[CellValue]],
        value_input_option: str = "USER_ENTERED",
        insert_data_option: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Append rows after the table found in ``range_``.

        Args:
            spreadsheet_id: The spreadsheet ID
            range_: A1 notation of the table (e.g. "Sheet1!A:Z")
            values: Rows to append
            value_input_option: "RAW" or "USER_ENTERED"
            insert_data_option: "OVERWRITE" or "INSERT_ROWS"
        """
        params = {
            "valueInputOption": value_input_option,
            "insertDataOption": insert_data_option,
        }
        body = {"range": range_, "majorDimension": "ROWS", "values": values}
        return await self.post(f"{_values_path(spreadsheet_id, range_)}:append", body, params=params)

    async def append_row(
        self,
        spreadsheet_id: str,
        sheet_name: str,
        values: List[CellValue],
    ) -> Dict[str, Any]:
        """Append a single row to a sheet (tab)."""
        return await self.append_values(spreadsheet_id, f"{sheet_name}!A:Z", [values])

    async def clear_values(self, spreadsheet_id: str, range_: str) -> None:
        """Clear values (not formatting) in a range."""
        await self.post(f"{_values_path(spreadsheet_id, range_)}:clear")

    async def create_spreadsheet(self, title: str) -> Dict[str, Any]:
        """Create a new spreadsheet."""
        logger.info("Creating spreadsheet: title=%s", title)
        return await self.post("/spreadsheets", {"properties": {"title": title}})
