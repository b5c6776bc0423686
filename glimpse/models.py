"""Document models.

Documents are stored with camelCase field names; models expose them as
snake_case attributes with camelCase aliases.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .infrastructure.documents import DocumentSnapshot


class DocumentModel(BaseModel):
    """Base for models read from or written to the document store."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict:
        """Fields as stored, camelCase keys, unset optionals omitted."""
        return self.model_dump(by_alias=True, exclude_none=True, exclude={"id"})


class StoredModel(DocumentModel):
    """A model backed by an existing document."""

    id: str

    @classmethod
    def from_snapshot(cls, snapshot: DocumentSnapshot):
        return cls.model_validate({**snapshot.to_dict(), "id": snapshot.id})


# =============================================================================
# Stored documents
# =============================================================================

class User(StoredModel):
    """Profile document ``users/{uid}``."""
    username: Optional[str] = None
    email: Optional[str] = None
    created_at: Optional[datetime] = None


class Album(StoredModel):
    title: str
    description: str = ""
    user_id: str
    photo_count: int = 0
    cover_image: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PhotoMetadata(DocumentModel):
    original_name: Optional[str] = None
    size: Optional[int] = None


class Photo(StoredModel):
    album_id: str
    user_id: str
    image_url: str
    thumbnail_url: Optional[str] = None
    likes: list[str] = Field(default_factory=list)
    like_count: int = 0
    created_at: Optional[datetime] = None
    metadata: Optional[PhotoMetadata] = None


class Comment(StoredModel):
    photo_id: str
    user_id: str
    text: str
    created_at: Optional[datetime] = None


# =============================================================================
# Write payloads
# =============================================================================

class AlbumCreate(DocumentModel):
    title: str
    description: str = ""
    user_id: str
    photo_count: int = 0
    cover_image: Optional[str] = None


class PhotoCreate(DocumentModel):
    album_id: str
    user_id: str
    image_url: str
    thumbnail_url: Optional[str] = None
    metadata: Optional[PhotoMetadata] = None


# =============================================================================
# Enriched views
# =============================================================================

class FeedPhoto(Photo):
    """Photo with its album and author; either may be None if missing."""
    album: Optional[Album] = None
    user: Optional[User] = None


class PhotoComment(Comment):
    """Comment with its author's profile, None if missing."""
    user: Optional[User] = None


class SessionUser(BaseModel):
    """Signed-in identity merged with its ``users/{uid}`` profile."""
    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    username: Optional[str] = None
    created_at: Optional[datetime] = None
    creation_time: Optional[datetime] = None
    last_sign_in_time: Optional[datetime] = None
    updated_at: Optional[datetime] = None
