"""User repository - profile documents ``users/{uid}``."""
from typing import Optional

from ...config import USERS_COLLECTION
from ...models import User
from ..documents import SERVER_TIMESTAMP
from .base import Repository


class UserRepository(Repository):
    """Repository for user profiles.

    Profiles are keyed by the identity provider's uid and written once, at
    registration.
    """

    collection = USERS_COLLECTION

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get profile by uid.

        Returns:
            User or None if not found
        """
        snapshot = await self._get(user_id)
        return User.from_snapshot(snapshot) if snapshot.exists else None

    async def create(self, user_id: str, username: str, email: str) -> None:
        """Write the profile for a newly registered identity."""
        await self.store.set(self.collection, user_id, {
            "username": username,
            "email": email,
            "createdAt": SERVER_TIMESTAMP,
        })
