"""Session store - the signed-in user as seen by the app.

The store follows the identity provider's auth-state stream and merges
each signed-in identity with its ``users/{uid}`` profile. One store is
created per app process and handed to routes and screens explicitly.
"""
import logging
from typing import Awaitable, Callable, Optional

from ..errors import NotFoundError
from ..infrastructure.auth import AuthProvider, AuthRecord
from ..models import SessionUser
from .services import UserService

logger = logging.getLogger(__name__)

SessionListener = Callable[[Optional[SessionUser]], Awaitable[None]]


class SessionStore:
    """Current user state with login/register/logout actions.

    State:
        user: merged identity and profile, None when signed out
        loading: True until the first auth notification is handled
    """

    def __init__(self, auth_provider: AuthProvider, users: UserService):
        self.auth = auth_provider
        self.users = users
        self.user: Optional[SessionUser] = None
        self.loading = True
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._listeners: list[SessionListener] = []

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    async def start(self) -> None:
        """Subscribe to the provider's auth-state stream."""
        if self._unsubscribe is not None:
            return
        self._unsubscribe = await self.auth.on_auth_state_changed(self._on_auth_state)

    async def stop(self) -> None:
        """Unsubscribe from the provider."""
        if self._unsubscribe is None:
            return
        self._unsubscribe()
        self._unsubscribe = None

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a listener awaited after every session change.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # =========================================================================
    # Actions (provider errors propagate unchanged)
    # =========================================================================

    async def login(self, email: str, password: str) -> Optional[SessionUser]:
        await self.auth.sign_in_with_email_and_password(email, password)
        return self.user

    async def register(self, email: str, password: str, username: str) -> Optional[SessionUser]:
        """Create an account, its profile document and its display name."""
        record = await self.auth.create_user_with_email_and_password(email, password)
        await self.users.create_user_profile(record.uid, username, record.email)
        await self.auth.update_profile(display_name=username)

        # The sign-in notification fired before the profile existed
        await self._on_auth_state(self.auth.current_user)
        return self.user

    async def logout(self) -> None:
        await self.auth.sign_out()

    # =========================================================================
    # Auth-state handling
    # =========================================================================

    async def _on_auth_state(self, record: Optional[AuthRecord]) -> None:
        if record is None:
            self.user = None
        else:
            self.user = await self._merge_profile(record)
        self.loading = False

        for listener in list(self._listeners):
            await listener(self.user)

    async def _merge_profile(self, record: AuthRecord) -> SessionUser:
        """Auth record fields overlaid with profile fields."""
        user = SessionUser(
            uid=record.uid,
            email=record.email,
            display_name=record.display_name,
            creation_time=record.creation_time,
            last_sign_in_time=record.last_sign_in_time,
            updated_at=record.updated_at,
        )

        try:
            profile = await self.users.get_user_profile(record.uid)
        except NotFoundError:
            logger.debug("No profile document for %s", record.uid)
            return user
        except Exception as e:
            logger.error("Error fetching user profile for %s: %s", record.uid, e)
            return user

        return user.model_copy(update=profile.model_dump(exclude={"id"}, exclude_none=True))
