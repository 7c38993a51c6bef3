"""Google Drive API v3 client.

File listing (single page and auto-paginated), metadata, binary download,
metadata create/update/delete, sharing permissions and storage quota.
"""

import logging
from typing import Any, Dict, List, Optional, Union
from urllib.parse import quote

from .base import GoogleApiClient
from ..config import ClientConfig
from ..schemas.drive import FileMetadata, Permission

logger = logging.getLogger(__name__)

DEFAULT_FILE_FIELDS = "id,name,mimeType,modifiedTime,webViewLink,iconLink"

DETAILED_FILE_FIELDS = (
    "id,name,mimeType,modifiedTime,createdTime,size,webViewLink,webContentLink,"
    "iconLink,thumbnailLink,starred,trashed,parents,description,owners,lastModifyingUser"
)


def _file_path(file_id: str) -> str:
    return f"/files/{quote(file_id, safe='')}"


class GoogleDriveClient(GoogleApiClient):
    """Async client for Google Drive API v3."""

    def __init__(self, config: Union[ClientConfig, Dict[str, Any]], **kwargs: Any):
        super().__init__(config, "drive", **kwargs)

    async def list_files(
        self,
        page_size: Optional[int] = None,
        page_token: Optional[str] = None,
        query: Optional[str] = None,
        order_by: Optional[str] = None,
        fields: Optional[str] = None,
        corpora: Optional[str] = None,
        include_items_from_all_drives: Optional[bool] = None,
        supports_all_drives: Optional[bool] = None,
    ) -> Dict[str, Any]:
        """List files in Google Drive.

        Args:
            page_size: Number of files to return per page (max 1000)
            page_token: Token for retrieving next page of results
            query: Query string for filtering files (Drive API query syntax)
            order_by: Sort order, e.g. "modifiedTime desc"
            fields: File fields to include; wrapped as ``files(...)``
            corpora: "user", "domain", "drive" or "allDrives"
            include_items_from_all_drives: Whether to include shared drive items
            supports_all_drives: Whether the caller supports shared drives

        Returns:
            Dictionary containing ``files`` and optional ``nextPageToken``
        """
        logger.info(
            "Listing files from Google Drive: page_size=%s, has_page_token=%s, query=%s",
            page_size,
            bool(page_token),
            query,
        )

        params = {
            "pageSize": min(page_size, 1000) if page_size else None,
            "pageToken": page_token,
            "q": query,
            "orderBy": order_by,
            "fields": f"nextPageToken,files({fields or DEFAULT_FILE_FIELDS})",
            "corpora": corpora,
            "includeItemsFromAllDrives": include_items_from_all_drives,
            "supportsAllDrives": supports_all_drives,
        }
        response = await self.get("/files", params) or {}

        logger.info(
            "Successfully listed files: file_count=%s, has_next_page=%s",
            len(response.get("files", [])),
            bool(response.get("nextPageToken")),
        )
        return response

    async def list_all_files(
        self,
        max_total: Optional[int] = None,
        page_size: int = 100,
        **options: Any,
    ) -> List[Dict[str, Any]]:
        """List all files, following ``nextPageToken`` until exhausted.

        Args:
            max_total: Stop and truncate once this many files are collected
            page_size: Files per page
            **options: Any other ``list_files`` argument except ``page_token``

        Returns:
            All matching files
        """
        options.pop("page_token", None)
        all_files: List[Dict[str, Any]] = []
        page_token: Optional[str] = None

        while True:
            response = await self.list_files(page_size=page_size, page_token=page_token, **options)
            all_files.extend(response.get("files", []))

            if max_total is not None and len(all_files) >= max_total:
                return all_files[:max_total]

            page_token = response.get("nextPageToken")
            if not page_token:
                return all_files

    async def get_file(
        self,
        file_id: str,
        fields: Optional[str] = None,
        acknowledge_abuse: Optional[bool] = None,
    ) -> Dict[str, Any]:
        """Get metadata for a specific file.

        Args:
            file_id: The ID of the file to retrieve
            fields: Comma-separated list of fields to include
            acknowledge_abuse: Acknowledge the risk of flagged content

        Returns:
            Dictionary containing file metadata

        Raises:
            NotFoundError: If the file does not exist
        """
        params = {
            "fields": fields or DETAILED_FILE_FIELDS,
            "acknowledgeAbuse": acknowledge_abuse,
        }
        return await self.get(_file_path(file_id), params)

    async def download_file(self, file_id: str) -> bytes:
        """Download a file's content.

        Args:
            file_id: The ID of the file to download

        Returns:
            File content as bytes
        """
        logger.info("Downloading file from Google Drive: file_id=%s", file_id)

        content = await self.request_bytes(_file_path(file_id), params={"alt": "media"})

        logger.info(
            "Successfully downloaded file: file_id=%s, size_bytes=%s",
            file_id,
            len(content),
        )
        return content

    async def create_file(self, metadata: Union[FileMetadata, Dict[str, Any]]) -> Dict[str, Any]:
        """Create a file from metadata only (no content)."""
        return await self.post("/files", metadata)

    async def update_file(
        self,
        file_id: str,
        metadata: Union[FileMetadata, Dict[str, Any]],
    ) -> Dict[str, Any]:
        """Update a file's metadata."""
        return await self.patch(_file_path(file_id), metadata)

    async def delete_file(self, file_id: str) -> None:
        """Permanently delete a file owned by the user."""
        logger.info("Deleting file from Google Drive: file_id=%s", file_id)
        await self.delete(_file_path(file_id))

    async def share_file(
        self,
        file_id: str,
        permission: Union[Permission, Dict[str, Any]],
        send_notification_email: Optional[bool] = None,
    ) -> Dict[str, Any]:
        """Create a permission on a file.

        Args:
            file_id: The file ID
            permission: Permission to grant
            send_notification_email: Whether Google emails the grantee

        Returns:
            Created permission
        """
        return await self.post(
            f"{_file_path(file_id)}/permissions",
            permission,
            params={"sendNotificationEmail": send_notification_email},
        )

    async def list_permissions(self, file_id: str) -> List[Dict[str, Any]]:
        """List permissions on a file."""
        response = await self.get(f"{_file_path(file_id)}/permissions") or {}
        return response.get("permissions", [])

    async def get_about(self, fields: str = "user,storageQuota") -> Dict[str, Any]:
        """Get information about the user's Drive.

        Example response:
            {
                "user": {
                    "emailAddress": "user@example.com",
                    "displayName": "John Doe"
                },
                "storageQuota": {
                    "limit": "16106127360",
                    "usage": "1073741824"
                }
            }
        """
        return await self.get("/about", {"fields": fields})
