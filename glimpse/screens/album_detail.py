"""Album detail screen."""
import asyncio
from typing import Optional

from ..application import Backend, SessionStore
from ..errors import GlimpseError, NotFoundError
from ..models import Album, Photo
from ..navigation import PHOTO_VIEWER, Navigator
from .base import AlertPresenter, Screen


class AlbumDetailScreen(Screen):
    """Album header and photo grid.

    When opened with a ``photo_id`` (from the feed) the screen forwards to
    the photo viewer once the photos are loaded.
    """

    def __init__(
        self,
        backend: Backend,
        session: SessionStore,
        navigator: Navigator,
        album_id: str,
        photo_id: Optional[str] = None,
        alerts: Optional[AlertPresenter] = None
    ):
        super().__init__(navigator, alerts)
        self.backend = backend
        self.session = session
        self.album_id = album_id
        self.photo_id = photo_id
        self.album: Optional[Album] = None
        self.photos: list[Photo] = []
        self.not_found = False

    async def fetch(self):
        return await asyncio.gather(
            self.backend.albums.get_album(self.album_id),
            self.backend.photos.get_album_photos(self.album_id),
        )

    def apply(self, result) -> None:
        self.album, self.photos = result

    async def on_loaded(self) -> None:
        if self.photo_id is None:
            return
        for index, photo in enumerate(self.photos):
            if photo.id == self.photo_id:
                self.select_photo(index)
                return

    def on_load_error(self, error: GlimpseError) -> None:
        self.not_found = isinstance(error, NotFoundError)
        super().on_load_error(error)

    @property
    def photo_count_label(self) -> str:
        count = len(self.photos)
        return f"{count} photo{'' if count == 1 else 's'}"

    @property
    def can_delete(self) -> bool:
        user = self.session.user
        return self.album is not None and user is not None and self.album.user_id == user.uid

    def select_photo(self, index: int) -> None:
        self.navigate(
            PHOTO_VIEWER,
            photos=self.photos,
            initial_index=index,
            album_id=self.album_id,
        )

    async def delete_album(self) -> bool:
        """Delete the album and leave the screen."""
        if not self.can_delete:
            return False
        if not await self._run_action(self.backend.albums.delete_album(self.album_id)):
            return False
        self.go_back()
        return True
