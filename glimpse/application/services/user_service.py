"""User service - profile lookups."""
from ...errors import NotFoundError, wrap
from ...infrastructure.repositories import UserRepository
from ...models import User


class UserService:
    def __init__(self, user_repository: UserRepository):
        self.user_repo = user_repository

    async def get_user_profile(self, user_id: str) -> User:
        """Get the profile of ``user_id``.

        Raises:
            NotFoundError: If no profile exists
        """
        try:
            user = await self.user_repo.get_by_id(user_id)
        except Exception as e:
            raise wrap("get user profile", e) from e

        if user is None:
            raise NotFoundError("Failed to get user profile: User not found")
        return user

    async def create_user_profile(self, user_id: str, username: str, email: str) -> None:
        """Write the profile of a newly registered user."""
        try:
            await self.user_repo.create(user_id, username, email)
        except Exception as e:
            raise wrap("create user profile", e) from e
