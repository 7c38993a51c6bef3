"""Endpoints, default rate limits and MIME types for the Google Workspace APIs.

Rate limits are conservative per-user figures taken from Google's published
quotas and should be revisited if Google changes them:

- https://developers.google.com/drive/api/guides/limits
- https://developers.google.com/sheets/api/limits
- https://developers.google.com/calendar/api/guides/quota
"""

from typing import Dict, Literal, Tuple

from .config import RateLimitProfile

ApiType = Literal["drive", "sheets", "calendar"]

API_TYPES: Tuple[str, ...] = ("drive", "sheets", "calendar")

API_ENDPOINTS: Dict[str, str] = {
    "drive": "https://www.googleapis.com/drive/v3",
    "sheets": "https://sheets.googleapis.com/v4",
    "calendar": "https://www.googleapis.com/calendar/v3",
}

API_RATE_LIMITS: Dict[str, RateLimitProfile] = {
    # Project limit is 20,000 queries / 100 seconds; ~40/second per user
    "drive": RateLimitProfile(
        requests_per_minute=12000,
        requests_per_user_per_minute=2400,
        burst_size=100,
        window_ms=60_000,
    ),
    # Read quota is 300/minute per project, 60/minute per user
    "sheets": RateLimitProfile(
        requests_per_minute=300,
        requests_per_user_per_minute=60,
        burst_size=10,
        window_ms=60_000,
    ),
    # Varies by operation; ~10/second per user
    "calendar": RateLimitProfile(
        requests_per_minute=1800,
        requests_per_user_per_minute=600,
        burst_size=50,
        window_ms=60_000,
    ),
}

# HTTP statuses that drive pipeline decisions
HTTP_UNAUTHORIZED = 401
HTTP_FORBIDDEN = 403
HTTP_NOT_FOUND = 404
HTTP_RATE_LIMITED = 429
HTTP_NO_CONTENT = 204

GOOGLE_MIME_TYPES: Dict[str, str] = {
    "SPREADSHEET": "application/vnd.google-apps.spreadsheet",
    "DOCUMENT": "application/vnd.google-apps.document",
    "PRESENTATION": "application/vnd.google-apps.presentation",
    "FOLDER": "application/vnd.google-apps.folder",
    "FORM": "application/vnd.google-apps.form",
    "DRAWING": "application/vnd.google-apps.drawing",
    "SCRIPT": "application/vnd.google-apps.script",
    "SITE": "application/vnd.google-apps.site",
    "SHORTCUT": "application/vnd.google-apps.shortcut",
}
