"""Profile screen - the signed-in user's albums, photos and stats."""
import logging
from datetime import datetime, timezone
from typing import Optional

from ..application import Backend, SessionStore
from ..errors import GlimpseError
from ..models import Album, Photo
from ..navigation import ALBUM_DETAIL, PHOTO_VIEWER, Navigator
from .base import AlertPresenter, Screen

logger = logging.getLogger(__name__)

TABS = ("albums", "photos")

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _created(photo: Photo) -> datetime:
    created = photo.created_at
    if created is None:
        return _EPOCH
    if created.tzinfo is None:
        return created.replace(tzinfo=timezone.utc)
    return created


class ProfileScreen(Screen):
    def __init__(
        self,
        backend: Backend,
        session: SessionStore,
        navigator: Navigator,
        alerts: Optional[AlertPresenter] = None
    ):
        super().__init__(navigator, alerts)
        self.backend = backend
        self.session = session
        self.albums: list[Album] = []
        self.user_photos: list[Photo] = []
        self.active_tab = "albums"

    async def fetch(self):
        albums = await self.backend.albums.get_user_albums(self.session.user.uid)

        photos: list[Photo] = []
        for album in albums:
            try:
                photos.extend(await self.backend.photos.get_album_photos(album.id))
            except GlimpseError as e:
                logger.warning("Error loading photos for album %s: %s", album.id, e.message)

        photos.sort(key=_created, reverse=True)
        return albums, photos

    def apply(self, result) -> None:
        self.albums, self.user_photos = result

    def on_load_error(self, error: GlimpseError) -> None:
        logger.error("Error loading user data: %s", error.message)
        self.alerts.alert("Error", "Failed to load profile data")

    async def refresh(self) -> None:
        await self.load()

    # =========================================================================
    # Header
    # =========================================================================

    @property
    def display_name(self) -> str:
        user = self.session.user
        if user is None:
            return "User"
        if user.display_name:
            return user.display_name
        if user.email:
            return user.email.split("@")[0]
        return "User"

    @property
    def avatar_initial(self) -> str:
        user = self.session.user
        source = (user.display_name or user.email) if user else None
        return source[0].upper() if source else "U"

    @property
    def album_count(self) -> int:
        return len(self.albums)

    @property
    def photo_count(self) -> int:
        return len(self.user_photos)

    @property
    def total_likes(self) -> int:
        return sum(photo.like_count or 0 for photo in self.user_photos)

    # =========================================================================
    # Actions
    # =========================================================================

    def set_tab(self, tab: str) -> None:
        if tab not in TABS:
            raise ValueError(f"Unknown profile tab: {tab}")
        self.active_tab = tab

    def select_album(self, album_id: str) -> None:
        self.navigate(ALBUM_DETAIL, album_id=album_id)

    def select_photo(self, index: int) -> None:
        self.navigate(PHOTO_VIEWER, photos=self.user_photos, initial_index=index)

    async def logout(self) -> None:
        await self.session.logout()
