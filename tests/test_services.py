"""Tests for application services.

Service behaviour is exercised against both document store backends
through the ``backend`` fixture; failure paths use mocked collaborators.
"""
import asyncio
import logging
from unittest.mock import AsyncMock, Mock

import pytest

from glimpse.application.services import (
    AlbumService,
    PhotoService,
    ProfileLoader,
    SocialService,
    best_effort_delete,
)
from glimpse.errors import (
    NotFoundError,
    UnauthorizedError,
    UploadError,
    ValidationError,
    WriteError,
    wrap,
)
from glimpse.models import AlbumCreate, Photo, PhotoCreate, PhotoMetadata

from tests.conftest import create_album_with_photos


class TestErrorWrapping:
    """Descriptive backend error messages."""

    def test_wraps_plain_exception(self):
        error = wrap("get album", RuntimeError("disk gone"))

        assert str(error) == "Failed to get album: disk gone"

    def test_keeps_backend_error_class(self):
        error = wrap("delete comment", UnauthorizedError("nope"), WriteError)

        assert isinstance(error, UnauthorizedError)
        assert error.message == "Failed to delete comment: nope"

    def test_default_class(self):
        assert isinstance(wrap("add photo", ValueError("x"), WriteError), WriteError)


class TestAlbumService:

    @pytest.mark.asyncio
    async def test_create_and_get_album(self, backend):
        album_id = await backend.albums.create_album(
            AlbumCreate(title="Trip", description="Sea", user_id="u1", photo_count=2)
        )

        album = await backend.albums.get_album(album_id)

        assert album.id == album_id
        assert album.title == "Trip"
        assert album.description == "Sea"
        assert album.photo_count == 2
        assert album.cover_image is None
        assert album.created_at is not None
        assert album.updated_at is not None

    @pytest.mark.asyncio
    async def test_get_missing_album(self, backend):
        with pytest.raises(NotFoundError) as exc_info:
            await backend.albums.get_album("missing")

        assert str(exc_info.value) == "Failed to get album: Album not found"

    @pytest.mark.asyncio
    async def test_user_albums_owner_only_newest_first(self, backend):
        first = await backend.albums.create_album(AlbumCreate(title="One", user_id="u1"))
        await backend.albums.create_album(AlbumCreate(title="Other", user_id="u2"))
        second = await backend.albums.create_album(AlbumCreate(title="Two", user_id="u1"))

        albums = await backend.albums.get_user_albums("u1")

        assert [a.id for a in albums] == [second, first]

    @pytest.mark.asyncio
    async def test_delete_album_removes_photos_and_files(self, backend, storage, image_file):
        album_id, _ = await create_album_with_photos(backend, "u1", image_file, photo_count=2)
        other_id, other_photos = await create_album_with_photos(backend, "u1", image_file, "Keep")

        await backend.albums.delete_album(album_id)

        assert await backend.photos.get_album_photos(album_id) == []
        with pytest.raises(NotFoundError):
            await backend.albums.get_album(album_id)
        assert not storage.exists(f"{album_id}_0_0")
        assert not storage.exists(f"{album_id}_1_0")
        assert [p.id for p in await backend.photos.get_album_photos(other_id)] == other_photos
        assert storage.exists(f"{other_id}_0_0")

    @pytest.mark.asyncio
    async def test_delete_album_storage_failure_is_logged(self, caplog):
        photo = Photo(id="p1", album_id="a1", user_id="u1", image_url="/media/photos/p1")
        album_repo = Mock()
        album_repo.delete_with_photos = AsyncMock(return_value=[photo])
        storage = Mock()
        storage.delete_by_url = AsyncMock(side_effect=OSError("bucket offline"))
        service = AlbumService(album_repo, storage)

        with caplog.at_level(logging.WARNING):
            await service.delete_album("a1")

        assert "Failed to delete storage object /media/photos/p1" in caplog.text

    @pytest.mark.asyncio
    async def test_create_album_write_failure(self):
        album_repo = Mock()
        album_repo.create = AsyncMock(side_effect=RuntimeError("read-only"))
        service = AlbumService(album_repo, Mock())

        with pytest.raises(WriteError) as exc_info:
            await service.create_album(AlbumCreate(title="Trip", user_id="u1"))

        assert str(exc_info.value) == "Failed to create album: read-only"


class TestPhotoService:

    @pytest.mark.asyncio
    async def test_upload_returns_url_and_stores_file(self, backend, storage, image_file):
        url = await backend.photos.upload_photo(image_file, "a1_0_123")

        assert url == "/media/photos/a1_0_123"
        assert await storage.download("a1_0_123") == image_file.read_bytes()

    @pytest.mark.asyncio
    async def test_upload_missing_file(self, backend, tmp_path):
        with pytest.raises(UploadError) as exc_info:
            await backend.photos.upload_photo(tmp_path / "gone.jpg", "p1")

        assert str(exc_info.value).startswith("Failed to upload photo:")

    @pytest.mark.asyncio
    async def test_add_photo_defaults(self, backend):
        photo_id = await backend.photos.add_photo(PhotoCreate(
            album_id="a1",
            user_id="u1",
            image_url="/media/photos/x",
            metadata=PhotoMetadata(original_name="x.jpg", size=10),
        ))

        [photo] = await backend.photos.get_album_photos("a1")

        assert photo.id == photo_id
        assert photo.likes == []
        assert photo.like_count == 0
        assert photo.thumbnail_url == "/media/photos/x"
        assert photo.metadata.original_name == "x.jpg"
        assert photo.created_at is not None

    @pytest.mark.asyncio
    async def test_album_photos_only_that_album_oldest_first(self, backend, image_file):
        album_id, photo_ids = await create_album_with_photos(
            backend, "u1", image_file, photo_count=3
        )
        await create_album_with_photos(backend, "u1", image_file, "Other")

        photos = await backend.photos.get_album_photos(album_id)

        assert [p.id for p in photos] == photo_ids

    @pytest.mark.asyncio
    async def test_delete_photo(self, backend, storage, image_file):
        album_id, [photo_id] = await create_album_with_photos(backend, "u1", image_file)

        await backend.photos.delete_photo(photo_id, storage.get_url(f"{album_id}_0_0"))

        assert await backend.photos.get_album_photos(album_id) == []
        assert not storage.exists(f"{album_id}_0_0")

    @pytest.mark.asyncio
    async def test_delete_photo_with_missing_file(self, backend, image_file):
        album_id, [photo_id] = await create_album_with_photos(backend, "u1", image_file)

        await backend.photos.delete_photo(photo_id, "https://elsewhere.example/photos/zzz")

        assert await backend.photos.get_album_photos(album_id) == []

    @pytest.mark.asyncio
    async def test_upload_storage_failure(self):
        storage = Mock()
        storage.upload_file = AsyncMock(side_effect=OSError("quota"))
        service = PhotoService(Mock(), storage)

        with pytest.raises(UploadError):
            await service.upload_photo("/tmp/x.jpg", "p1")


class TestLikes:

    @pytest.mark.asyncio
    async def test_toggle_twice_returns_opposite_results(self, backend, image_file):
        album_id, [photo_id] = await create_album_with_photos(backend, "u1", image_file)

        first = await backend.social.toggle_like(photo_id, "u2")
        second = await backend.social.toggle_like(photo_id, "u2")

        assert (first, second) == (True, False)
        [photo] = await backend.photos.get_album_photos(album_id)
        assert photo.likes == []
        assert photo.like_count == 0

    @pytest.mark.asyncio
    async def test_concurrent_likes_are_not_lost(self, backend, image_file):
        album_id, [photo_id] = await create_album_with_photos(backend, "u1", image_file)
        users = [f"user-{i}" for i in range(8)]

        results = await asyncio.gather(*[
            backend.social.toggle_like(photo_id, user) for user in users
        ])

        assert all(results)
        [photo] = await backend.photos.get_album_photos(album_id)
        assert sorted(photo.likes) == sorted(users)
        assert photo.like_count == len(photo.likes)

    @pytest.mark.asyncio
    async def test_concurrent_mixed_toggles(self, backend, image_file):
        album_id, [photo_id] = await create_album_with_photos(backend, "u1", image_file)
        likers = [f"liker-{i}" for i in range(4)]
        undoers = [f"undoer-{i}" for i in range(4)]
        for user in undoers:
            await backend.social.toggle_like(photo_id, user)

        async def toggle_twice(user):
            return [
                await backend.social.toggle_like(photo_id, user),
                await backend.social.toggle_like(photo_id, user),
            ]

        results = await asyncio.gather(
            *[backend.social.toggle_like(photo_id, user) for user in likers + undoers],
            *[toggle_twice(user) for user in [f"flipper-{i}" for i in range(4)]]
        )

        assert results[:4] == [True] * 4
        assert results[4:8] == [False] * 4
        assert results[8:] == [[True, False]] * 4
        [photo] = await backend.photos.get_album_photos(album_id)
        assert sorted(photo.likes) == sorted(likers)
        assert photo.like_count == len(likers)

    @pytest.mark.asyncio
    async def test_toggle_missing_photo(self, backend):
        with pytest.raises(NotFoundError) as exc_info:
            await backend.social.toggle_like("missing", "u1")

        assert str(exc_info.value) == "Failed to toggle like: Photo not found"


class TestComments:

    @pytest.mark.asyncio
    async def test_comments_oldest_first_with_authors(self, backend):
        await backend.users.create_user_profile("u1", "alice", "alice@example.com")
        first = await backend.social.add_comment("p1", "u1", "Nice!")
        second = await backend.social.add_comment("p1", "ghost", "Wow")
        await backend.social.add_comment("p2", "u1", "Elsewhere")

        comments = await backend.social.get_photo_comments("p1")

        assert [c.id for c in comments] == [first, second]
        assert comments[0].user.username == "alice"
        assert comments[1].user is None

    @pytest.mark.asyncio
    async def test_comment_length_limit(self, backend):
        with pytest.raises(ValidationError):
            await backend.social.add_comment("p1", "u1", "x" * 201)

        assert await backend.social.add_comment("p1", "u1", "x" * 200)

    @pytest.mark.asyncio
    async def test_author_can_delete(self, backend):
        comment_id = await backend.social.add_comment("p1", "u1", "hi")

        await backend.social.delete_comment(comment_id, "u1")

        assert await backend.social.get_photo_comments("p1") == []

    @pytest.mark.asyncio
    async def test_non_author_cannot_delete(self, backend):
        comment_id = await backend.social.add_comment("p1", "u1", "hi")

        with pytest.raises(UnauthorizedError) as exc_info:
            await backend.social.delete_comment(comment_id, "u2")

        assert str(exc_info.value) == (
            "Failed to delete comment: Unauthorized to delete this comment"
        )
        assert [c.id for c in await backend.social.get_photo_comments("p1")] == [comment_id]

    @pytest.mark.asyncio
    async def test_delete_missing_comment(self, backend):
        with pytest.raises(NotFoundError):
            await backend.social.delete_comment("missing", "u1")

    @pytest.mark.asyncio
    async def test_profile_lookups_one_per_comment(self):
        comment_repo = Mock()
        comment_repo.get_by_photo = AsyncMock(return_value=[])
        user_repo = Mock()
        user_repo.get_by_id = AsyncMock(return_value=None)
        loader = ProfileLoader(user_repo)

        assert await loader.load_many(["u1", "u1", "u2"]) == [None, None, None]
        assert user_repo.get_by_id.await_count == 3

        service = SocialService(Mock(), comment_repo, loader)
        assert await service.get_photo_comments("p1") == []


class TestFeed:

    @pytest.mark.asyncio
    async def test_trip_photo_appears_in_feed(self, backend, image_file):
        await backend.users.create_user_profile("u1", "alice", "alice@example.com")
        _, [photo_id] = await create_album_with_photos(backend, "u1", image_file, "Trip")

        feed = await backend.feed.get_feed_photos(10)

        [item] = [p for p in feed if p.id == photo_id]
        assert item.album.title == "Trip"
        assert item.user.username == "alice"

    @pytest.mark.asyncio
    async def test_feed_newest_first_and_limited(self, backend, image_file):
        _, photo_ids = await create_album_with_photos(backend, "u1", image_file, photo_count=4)

        feed = await backend.feed.get_feed_photos(3)

        assert [p.id for p in feed] == list(reversed(photo_ids))[:3]

    @pytest.mark.asyncio
    async def test_feed_missing_album_and_user(self, backend):
        photo_id = await backend.photos.add_photo(PhotoCreate(
            album_id="gone", user_id="ghost", image_url="/media/photos/x"
        ))

        [item] = await backend.feed.get_feed_photos()

        assert item.id == photo_id
        assert item.album is None
        assert item.user is None


class TestUserService:

    @pytest.mark.asyncio
    async def test_profile_round_trip(self, backend):
        await backend.users.create_user_profile("u1", "alice", "alice@example.com")

        user = await backend.users.get_user_profile("u1")

        assert user.username == "alice"
        assert user.email == "alice@example.com"
        assert user.created_at is not None

    @pytest.mark.asyncio
    async def test_missing_profile(self, backend):
        with pytest.raises(NotFoundError):
            await backend.users.get_user_profile("ghost")


class TestBestEffortDelete:

    @pytest.mark.asyncio
    async def test_returns_false_and_logs(self, caplog):
        storage = Mock()
        storage.delete_by_url = AsyncMock(side_effect=RuntimeError("denied"))

        with caplog.at_level(logging.WARNING):
            assert await best_effort_delete(storage, "/media/photos/p") is False

        assert "denied" in caplog.text

    @pytest.mark.asyncio
    async def test_returns_storage_result(self):
        storage = Mock()
        storage.delete_by_url = AsyncMock(return_value=True)

        assert await best_effort_delete(storage, "/media/photos/p") is True
