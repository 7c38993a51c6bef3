"""Drive request body schemas."""

from __future__ import annotations

from typing import Literal

from .base import ApiModel


class FileMetadata(ApiModel):
    """Metadata for creating or updating a file (no content)."""

    name: str | None = None
    mime_type: str | None = None
    description: str | None = None
    parents: list[str] | None = None
    starred: bool | None = None


class Permission(ApiModel):
    """A sharing permission on a file."""

    id: str | None = None
    type: Literal["user", "group", "domain", "anyone"]
    role: Literal["owner", "organizer", "fileOrganizer", "writer", "commenter", "reader"]
    email_address: str | None = None
    domain: str | None = None
    allow_file_discovery: bool | None = None
