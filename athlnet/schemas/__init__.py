"""Convenience exports for schema layer."""
from .analytics import ContentRow, DashboardResponse, EngagementPoint, KpiMetric, NetworkSegment, TimeRange
from .auth import AuthResponse, LoginRequest, RegisterRequest, SessionStateResponse
from .coaching import (
    CoachingDecision,
    CoachingRequestCreate,
    CoachingRequestResponse,
    TrainingRelationshipResponse,
)
from .follow import FollowActionResponse, FollowListResponse, FollowStatsResponse
from .media import MediaUploadResponse
from .messages import (
    ConversationListResponse,
    ConversationSummary,
    ConversationThreadResponse,
    MarkReadResponse,
    MessageResponse,
    MessageSendRequest,
)
from .notifications import NotificationListResponse, NotificationResponse, NotificationsMarkedResponse
from .posts import (
    CommentCreate,
    CommentEngagementResponse,
    CommentListResponse,
    CommentResponse,
    MediaItem,
    PostCreate,
    PostEngagementResponse,
    PostFeedResponse,
    PostResponse,
    PostUpdate,
    TrendingHashtag,
    TrendingResponse,
)
from .profiles import ProfileResponse, ProfileUpdateRequest, UserSummary
from .registration import RegistrationStepResponse, StepValidationRequest, StepValidationResponse
from .search import (
    SavedSearchCreate,
    SavedSearchListResponse,
    SavedSearchResponse,
    SearchResponse,
    SuggestionResponse,
    UserSearchResult,
)

__all__ = [
    "ContentRow",
    "DashboardResponse",
    "EngagementPoint",
    "KpiMetric",
    "NetworkSegment",
    "TimeRange",
    "AuthResponse",
    "LoginRequest",
    "RegisterRequest",
    "SessionStateResponse",
    "CoachingDecision",
    "CoachingRequestCreate",
    "CoachingRequestResponse",
    "TrainingRelationshipResponse",
    "FollowActionResponse",
    "FollowListResponse",
    "FollowStatsResponse",
    "MediaUploadResponse",
    "ConversationListResponse",
    "ConversationSummary",
    "ConversationThreadResponse",
    "MarkReadResponse",
    "MessageResponse",
    "MessageSendRequest",
    "NotificationListResponse",
    "NotificationResponse",
    "NotificationsMarkedResponse",
    "CommentCreate",
    "CommentEngagementResponse",
    "CommentListResponse",
    "CommentResponse",
    "MediaItem",
    "PostCreate",
    "PostEngagementResponse",
    "PostFeedResponse",
    "PostResponse",
    "PostUpdate",
    "TrendingHashtag",
    "TrendingResponse",
    "ProfileResponse",
    "ProfileUpdateRequest",
    "UserSummary",
    "RegistrationStepResponse",
    "StepValidationRequest",
    "StepValidationResponse",
    "SavedSearchCreate",
    "SavedSearchListResponse",
    "SavedSearchResponse",
    "SearchResponse",
    "SuggestionResponse",
    "UserSearchResult",
]
