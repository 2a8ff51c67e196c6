"""Convenience exports for service layer."""
from .analytics_service import build_dashboard, export_content_csv
from .auth_service import (
    authenticate_user,
    create_access_token,
    decode_access_token,
    get_current_user,
    get_optional_user,
    register_user,
    require_roles,
    session_state,
)
from .coaching_service import (
    list_coach_athletes,
    list_coaching_requests,
    request_to_coach,
    respond_to_coaching_request,
)
from .follow_service import FollowStats, follow_user, get_follow_stats, set_follow_state, unfollow_user
from .message_service import (
    conversation_id_for,
    list_conversation_messages,
    list_conversations,
    mark_conversation_read,
    send_message,
)
from .notification_service import (
    NotificationType,
    add_notification,
    count_unread_notifications,
    list_notifications,
    mark_all_read,
    mark_read,
)
from .post_service import (
    add_comment,
    create_post,
    delete_post,
    list_comments,
    list_feed,
    set_comment_like_state,
    set_post_like_state,
    trending_hashtags,
    update_post,
)
from .profile_service import get_profile, resolve_display_name, update_profile
from .search_service import search_users, suggested_users, users_by_sport
from .storage_service import StorageConfigurationError, StorageUploadError, get_storage_client, upload_file

__all__ = [
    "build_dashboard",
    "export_content_csv",
    "authenticate_user",
    "create_access_token",
    "decode_access_token",
    "get_current_user",
    "get_optional_user",
    "register_user",
    "require_roles",
    "session_state",
    "list_coach_athletes",
    "list_coaching_requests",
    "request_to_coach",
    "respond_to_coaching_request",
    "FollowStats",
    "follow_user",
    "get_follow_stats",
    "set_follow_state",
    "unfollow_user",
    "conversation_id_for",
    "list_conversation_messages",
    "list_conversations",
    "mark_conversation_read",
    "send_message",
    "NotificationType",
    "add_notification",
    "count_unread_notifications",
    "list_notifications",
    "mark_all_read",
    "mark_read",
    "add_comment",
    "create_post",
    "delete_post",
    "list_comments",
    "list_feed",
    "set_comment_like_state",
    "set_post_like_state",
    "trending_hashtags",
    "update_post",
    "get_profile",
    "resolve_display_name",
    "update_profile",
    "search_users",
    "suggested_users",
    "users_by_sport",
    "StorageConfigurationError",
    "StorageUploadError",
    "get_storage_client",
    "upload_file",
]
