"""Convenience exports for ORM models."""
from .coaching import CoachingRequest, TrainingRelationship
from .conversation import Conversation, Message
from .follow import Follow
from .media import MediaAsset
from .notification import Notification
from .post import CommentLike, Post, PostComment, PostLike
from .saved_search import SavedSearch
from .user import User

__all__ = [
    "CoachingRequest",
    "TrainingRelationship",
    "Conversation",
    "Message",
    "Follow",
    "MediaAsset",
    "Notification",
    "Post",
    "PostLike",
    "PostComment",
    "CommentLike",
    "SavedSearch",
    "User",
]
