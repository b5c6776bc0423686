"""Create album screen - title, description and up to ten photos."""
import asyncio
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from ..application import Backend, SessionStore
from ..config import ALBUM_DESCRIPTION_MAX_LENGTH, ALBUM_TITLE_MAX_LENGTH, MAX_SELECTED_IMAGES
from ..errors import GlimpseError, ValidationError
from ..models import AlbumCreate, PhotoCreate, PhotoMetadata
from ..navigation import FEED, Navigator
from .base import AlertPresenter, Screen, ScreenState

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Album created successfully!"
FAILURE_MESSAGE = "Failed to create album. Please try again."


@dataclass
class SelectedImage:
    """An image picked from local storage."""
    path: Union[str, Path]
    file_name: Optional[str] = None
    file_size: Optional[int] = None
    content_type: Optional[str] = None


class CreateAlbumScreen(Screen):
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
        self.title = ""
        self.description = ""
        self.selected_images: list[SelectedImage] = []
        self.uploading = False

    async def mount(self) -> None:
        self.mounted = True
        self.state = ScreenState.LOADED

    def select_images(self, images: list[SelectedImage]) -> None:
        if images:
            self.selected_images = list(images)

    def reset(self) -> None:
        self.title = ""
        self.description = ""
        self.selected_images = []

    def validate(self) -> None:
        """Check the form.

        Raises:
            ValidationError: With the first problem found
        """
        title = self.title.strip()
        if not title:
            raise ValidationError("Please enter an album title")
        if len(title) > ALBUM_TITLE_MAX_LENGTH:
            raise ValidationError(
                f"Album title must be at most {ALBUM_TITLE_MAX_LENGTH} characters"
            )
        if len(self.description.strip()) > ALBUM_DESCRIPTION_MAX_LENGTH:
            raise ValidationError(
                f"Description must be at most {ALBUM_DESCRIPTION_MAX_LENGTH} characters"
            )
        if not self.selected_images:
            raise ValidationError("Please select at least one photo")
        if len(self.selected_images) > MAX_SELECTED_IMAGES:
            raise ValidationError(f"You can select up to {MAX_SELECTED_IMAGES} photos")

    async def create(self) -> Optional[str]:
        """Create the album, then upload and record each photo concurrently.

        Returns:
            New album id, or None if validation or a backend call failed
        """
        try:
            self.validate()
        except ValidationError as e:
            self.alerts.alert("Error", e.message)
            return None

        user_id = self.session.user.uid
        self.uploading = True
        try:
            album_id = await self.backend.albums.create_album(AlbumCreate(
                title=self.title.strip(),
                description=self.description.strip(),
                user_id=user_id,
                photo_count=len(self.selected_images),
            ))
            await asyncio.gather(*(
                self._upload(album_id, user_id, index, image)
                for index, image in enumerate(self.selected_images)
            ))
        except GlimpseError as e:
            logger.error("Error creating album: %s", e.message)
            self.alerts.alert("Error", FAILURE_MESSAGE)
            return None
        finally:
            self.uploading = False

        self.alerts.alert("Success", SUCCESS_MESSAGE)
        self.reset()
        self.navigate(FEED)
        return album_id

    async def _upload(self, album_id: str, user_id: str, index: int, image: SelectedImage) -> str:
        photo_id = f"{album_id}_{index}_{int(time.time() * 1000)}"
        image_url = await self.backend.photos.upload_photo(
            image.path, photo_id, image.content_type
        )
        return await self.backend.photos.add_photo(PhotoCreate(
            album_id=album_id,
            user_id=user_id,
            image_url=image_url,
            thumbnail_url=image_url,
            metadata=PhotoMetadata(original_name=image.file_name, size=image.file_size),
        ))
