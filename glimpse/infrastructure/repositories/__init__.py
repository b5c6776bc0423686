# Repository Pattern Implementation
"""
Repositories wrap document store collections.
Each document kind has its own repository.
"""
from .base import Repository
from .user_repository import UserRepository
from .album_repository import AlbumRepository
from .photo_repository import PhotoRepository
from .comment_repository import CommentRepository

__all__ = [
    "Repository",
    "UserRepository",
    "AlbumRepository",
    "PhotoRepository",
    "CommentRepository",
]
