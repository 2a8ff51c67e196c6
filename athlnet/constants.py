"""Project-wide constant values."""
from __future__ import annotations

ROLES = ("athlete", "coach", "sponsor", "fan")

SESSION_COOKIE_NAME = "athlnet_session"

MIN_SEARCH_CHARS = 2
MAX_MESSAGE_ATTACHMENT_BYTES = 10 * 1024 * 1024  # 10 MB
MAX_BIO_LENGTH = 500
MAX_PROFILE_SPORTS = 5

DEFAULT_DISPLAY_NAME = "New User"
ATTACHMENT_SUMMARY = "File attachment"

STORAGE_NOTICE = "Media storage is not configured. Uploads are disabled until storage credentials are provided."

__all__ = [
    "ROLES",
    "SESSION_COOKIE_NAME",
    "MIN_SEARCH_CHARS",
    "MAX_MESSAGE_ATTACHMENT_BYTES",
    "MAX_BIO_LENGTH",
    "MAX_PROFILE_SPORTS",
    "DEFAULT_DISPLAY_NAME",
    "ATTACHMENT_SUMMARY",
    "STORAGE_NOTICE",
]
