"""Application services - backend access layer."""

from .album_service import AlbumService
from .photo_service import PhotoService
from .social_service import SocialService
from .feed_service import FeedService
from .user_service import UserService
from .enrichment import AlbumLoader, ProfileLoader
from .storage_policy import best_effort_delete

__all__ = [
    "AlbumService",
    "PhotoService",
    "SocialService",
    "FeedService",
    "UserService",
    "AlbumLoader",
    "ProfileLoader",
    "best_effort_delete",
]
