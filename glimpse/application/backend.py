"""Backend access layer facade.

``Backend`` is the single object screens talk to. It owns one instance of
each service, all sharing the same document store and object storage.
"""
from dataclasses import dataclass

from ..infrastructure.documents import DocumentStore
from ..infrastructure.repositories import (
    AlbumRepository,
    CommentRepository,
    PhotoRepository,
    UserRepository,
)
from ..infrastructure.storage import ObjectStorage
from .services import (
    AlbumLoader,
    AlbumService,
    FeedService,
    PhotoService,
    ProfileLoader,
    SocialService,
    UserService,
)


@dataclass
class Backend:
    albums: AlbumService
    photos: PhotoService
    social: SocialService
    feed: FeedService
    users: UserService


def create_backend(store: DocumentStore, storage: ObjectStorage) -> Backend:
    """Wire repositories, loaders and services over one store and storage."""
    user_repo = UserRepository(store)
    album_repo = AlbumRepository(store)
    photo_repo = PhotoRepository(store)
    comment_repo = CommentRepository(store)

    profile_loader = ProfileLoader(user_repo)
    album_loader = AlbumLoader(album_repo)

    return Backend(
        albums=AlbumService(album_repo, storage),
        photos=PhotoService(photo_repo, storage),
        social=SocialService(photo_repo, comment_repo, profile_loader),
        feed=FeedService(photo_repo, album_loader, profile_loader),
        users=UserService(user_repo),
    )
