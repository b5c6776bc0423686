"""Social service - likes and comments."""
import logging

from ...config import COMMENT_MAX_LENGTH
from ...errors import NotFoundError, UnauthorizedError, ValidationError, WriteError, wrap
from ...infrastructure.documents import DocumentNotFoundError
from ...infrastructure.repositories import CommentRepository, PhotoRepository
from ...models import PhotoComment
from .enrichment import ProfileLoader

logger = logging.getLogger(__name__)


class SocialService:
    """Service for photo interactions.

    Responsibilities:
    - Transactional like toggling
    - Adding, listing and deleting comments
    """

    def __init__(
        self,
        photo_repository: PhotoRepository,
        comment_repository: CommentRepository,
        profile_loader: ProfileLoader
    ):
        self.photo_repo = photo_repository
        self.comment_repo = comment_repository
        self.profiles = profile_loader

    async def toggle_like(self, photo_id: str, user_id: str) -> bool:
        """Flip ``user_id``'s membership in the photo's like set.

        Returns:
            True if the user now likes the photo

        Raises:
            NotFoundError: If the photo doesn't exist
        """
        try:
            return await self.photo_repo.toggle_like(photo_id, user_id)
        except DocumentNotFoundError as e:
            raise NotFoundError("Failed to toggle like: Photo not found") from e
        except Exception as e:
            raise wrap("toggle like", e, WriteError) from e

    async def add_comment(self, photo_id: str, user_id: str, text: str) -> str:
        """Add a comment.

        Returns:
            New comment id
        """
        if len(text) > COMMENT_MAX_LENGTH:
            raise ValidationError(f"Comments are limited to {COMMENT_MAX_LENGTH} characters")

        try:
            return await self.comment_repo.create(photo_id, user_id, text)
        except Exception as e:
            raise wrap("add comment", e, WriteError) from e

    async def get_photo_comments(self, photo_id: str) -> list[PhotoComment]:
        """Comments on a photo, oldest first, each with its author's profile."""
        try:
            comments = await self.comment_repo.get_by_photo(photo_id)
            authors = await self.profiles.load_many([c.user_id for c in comments])
        except Exception as e:
            raise wrap("get comments", e) from e

        return [
            PhotoComment(**comment.model_dump(), user=author)
            for comment, author in zip(comments, authors)
        ]

    async def delete_comment(self, comment_id: str, user_id: str) -> None:
        """Delete a comment written by ``user_id``.

        Raises:
            NotFoundError: If the comment doesn't exist
            UnauthorizedError: If ``user_id`` isn't the author
        """
        try:
            comment = await self.comment_repo.get_by_id(comment_id)
        except Exception as e:
            raise wrap("delete comment", e) from e

        if comment is None:
            raise NotFoundError("Failed to delete comment: Comment not found")
        if comment.user_id != user_id:
            raise UnauthorizedError("Failed to delete comment: Unauthorized to delete this comment")

        try:
            await self.comment_repo.delete(comment_id)
        except Exception as e:
            raise wrap("delete comment", e, WriteError) from e
