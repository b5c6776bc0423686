"""Feed service - recent photos across all users."""
from typing import Optional

from ...config import FEED_LIMIT
from ...errors import wrap
from ...infrastructure.repositories import PhotoRepository
from ...models import FeedPhoto
from .enrichment import AlbumLoader, ProfileLoader


class FeedService:
    def __init__(
        self,
        photo_repository: PhotoRepository,
        album_loader: AlbumLoader,
        profile_loader: ProfileLoader,
        default_limit: int = FEED_LIMIT
    ):
        self.photo_repo = photo_repository
        self.albums = album_loader
        self.profiles = profile_loader
        self.default_limit = default_limit

    async def get_feed_photos(self, limit: Optional[int] = None) -> list[FeedPhoto]:
        """Newest photos, each with its album and author attached.

        Args:
            limit: Maximum number of photos (default: GLIMPSE_FEED_LIMIT)
        """
        if limit is None:
            limit = self.default_limit

        try:
            photos = await self.photo_repo.get_recent(limit)
            albums = await self.albums.load_many([p.album_id for p in photos])
            users = await self.profiles.load_many([p.user_id for p in photos])
        except Exception as e:
            raise wrap("get feed photos", e) from e

        return [
            FeedPhoto(**photo.model_dump(), album=album, user=user)
            for photo, album, user in zip(photos, albums, users)
        ]
