"""Feed screen - newest photos from everyone."""
import logging
from typing import Optional

from ..application import Backend
from ..errors import GlimpseError
from ..models import FeedPhoto
from ..navigation import ALBUM_DETAIL, Navigator
from .base import AlertPresenter, Screen

logger = logging.getLogger(__name__)


class FeedScreen(Screen):
    def __init__(
        self,
        backend: Backend,
        navigator: Navigator,
        alerts: Optional[AlertPresenter] = None
    ):
        super().__init__(navigator, alerts)
        self.backend = backend
        self.photos: list[FeedPhoto] = []

    async def fetch(self) -> list[FeedPhoto]:
        return await self.backend.feed.get_feed_photos()

    def apply(self, photos: list[FeedPhoto]) -> None:
        self.photos = photos

    def on_load_error(self, error: GlimpseError) -> None:
        logger.error("Error fetching photos: %s", error.message)

    async def refresh(self) -> None:
        await self.load()

    @staticmethod
    def username_label(photo: FeedPhoto) -> str:
        return (photo.user.username if photo.user else None) or "Unknown"

    @staticmethod
    def album_label(photo: FeedPhoto) -> str:
        return (photo.album.title if photo.album else None) or "Untitled"

    def select_photo(self, photo_id: str) -> None:
        """Open the photo's album, which then opens the photo."""
        for photo in self.photos:
            if photo.id == photo_id:
                self.navigate(ALBUM_DETAIL, album_id=photo.album_id, photo_id=photo.id)
                return
