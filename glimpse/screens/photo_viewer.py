"""Photo viewer screen and its likes/comments panel."""
import logging
from typing import Optional

from ..application import Backend, SessionStore
from ..config import COMMENT_MAX_LENGTH
from ..errors import GlimpseError
from ..models import Photo, PhotoComment
from ..navigation import Navigator
from .base import AlertPresenter, Screen

logger = logging.getLogger(__name__)


class PhotoInteractions(Screen):
    """Like button and comment thread of one photo.

    Like state is seeded from the photo document and then kept in step
    with what ``toggle_like`` returns.
    """

    def __init__(
        self,
        backend: Backend,
        session: SessionStore,
        navigator: Navigator,
        photo: Photo,
        alerts: Optional[AlertPresenter] = None
    ):
        super().__init__(navigator, alerts)
        self.backend = backend
        self.session = session
        self.photo = photo
        self.comments: list[PhotoComment] = []
        self.is_liked = self.uid in photo.likes
        self.like_count = photo.like_count

    @property
    def uid(self) -> Optional[str]:
        return self.session.user.uid if self.session.user else None

    async def fetch(self) -> list[PhotoComment]:
        return await self.backend.social.get_photo_comments(self.photo.id)

    def apply(self, comments: list[PhotoComment]) -> None:
        self.comments = comments

    def on_load_error(self, error: GlimpseError) -> None:
        logger.error("Error loading comments: %s", error.message)

    def can_delete_comment(self, comment: PhotoComment) -> bool:
        return comment.user_id == self.uid

    async def toggle_like(self) -> bool:
        try:
            liked = await self.backend.social.toggle_like(self.photo.id, self.uid)
        except GlimpseError as e:
            self.alerts.alert("Error", e.message)
            return False

        self.is_liked = liked
        self.like_count += 1 if liked else -1

        # Keep the photo the viewer holds in step with the like set
        likes = [uid for uid in self.photo.likes if uid != self.uid]
        if liked:
            likes.append(self.uid)
        self.photo.likes = likes
        self.photo.like_count = self.like_count
        return True

    async def add_comment(self, text: str) -> bool:
        text = (text or "").strip()
        if not text:
            return False
        if len(text) > COMMENT_MAX_LENGTH:
            self.alerts.alert("Error", f"Comments are limited to {COMMENT_MAX_LENGTH} characters")
            return False

        if not await self._run_action(
            self.backend.social.add_comment(self.photo.id, self.uid, text)
        ):
            return False
        await self.load()
        return True

    async def delete_comment(self, comment_id: str) -> bool:
        if not await self._run_action(
            self.backend.social.delete_comment(comment_id, self.uid)
        ):
            return False
        await self.load()
        return True


class PhotoViewerScreen(Screen):
    """Pages through a list of photos starting at ``initial_index``."""

    def __init__(
        self,
        backend: Backend,
        session: SessionStore,
        navigator: Navigator,
        photos: list[Photo],
        initial_index: int = 0,
        album_id: Optional[str] = None,
        alerts: Optional[AlertPresenter] = None
    ):
        super().__init__(navigator, alerts)
        self.backend = backend
        self.session = session
        self.photos = photos
        self.album_id = album_id
        self.current_index = min(max(initial_index, 0), max(len(photos) - 1, 0))
        self.interactions: Optional[PhotoInteractions] = None

    @property
    def current_photo(self) -> Optional[Photo]:
        if not self.photos:
            return None
        return self.photos[self.current_index]

    @property
    def counter(self) -> str:
        return f"{self.current_index + 1} of {len(self.photos)}"

    @property
    def is_owner(self) -> bool:
        photo = self.current_photo
        user = self.session.user
        return photo is not None and user is not None and photo.user_id == user.uid

    def show(self, index: int) -> bool:
        if not 0 <= index < len(self.photos):
            return False
        self.current_index = index
        self.interactions = None
        self.navigator.set_params(initial_index=index)
        return True

    def next(self) -> bool:
        return self.show(self.current_index + 1)

    def previous(self) -> bool:
        return self.show(self.current_index - 1)

    async def open_interactions(self) -> Optional[PhotoInteractions]:
        """Mount the likes/comments panel for the current photo."""
        photo = self.current_photo
        if photo is None:
            return None
        if self.interactions is None or self.interactions.photo.id != photo.id:
            self.interactions = PhotoInteractions(
                self.backend, self.session, self.navigator, photo, self.alerts
            )
            await self.interactions.mount()
        return self.interactions

    def unmount(self) -> None:
        if self.interactions is not None:
            self.interactions.unmount()
        super().unmount()

    async def delete_photo(self) -> bool:
        """Delete the current photo (owner only) and leave the viewer."""
        photo = self.current_photo
        if photo is None or not self.is_owner:
            return False
        if not await self._run_action(
            self.backend.photos.delete_photo(photo.id, photo.image_url)
        ):
            return False
        self.go_back()
        return True
