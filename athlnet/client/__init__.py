"""Client-side state helpers and the HTTP API client."""
from .api import ApiError, AthlNetClient
from .feed_state import FeedState, PostView
from .messaging_state import ConversationThread, ThreadMessage
from .registration_wizard import RegistrationWizard
from .search_state import DebouncedSearch

__all__ = [
    "ApiError",
    "AthlNetClient",
    "FeedState",
    "PostView",
    "ConversationThread",
    "ThreadMessage",
    "RegistrationWizard",
    "DebouncedSearch",
]
