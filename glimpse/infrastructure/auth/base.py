"""Identity provider interface."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Awaitable, Callable, Optional

# Error codes
INVALID_EMAIL = "auth/invalid-email"
WEAK_PASSWORD = "auth/weak-password"
EMAIL_ALREADY_IN_USE = "auth/email-already-in-use"
INVALID_CREDENTIAL = "auth/invalid-credential"
NO_CURRENT_USER = "auth/no-current-user"


class AuthError(Exception):
    """Identity provider rejected a request."""

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"{message} ({code})")


@dataclass(frozen=True)
class AuthRecord:
    """Signed-in identity as reported by the provider."""
    uid: str
    email: str
    display_name: Optional[str] = None
    creation_time: Optional[datetime] = None
    last_sign_in_time: Optional[datetime] = None
    updated_at: Optional[datetime] = None


AuthListener = Callable[[Optional[AuthRecord]], Awaitable[None]]
Unsubscribe = Callable[[], None]


class AuthProvider(ABC):
    """Email/password identity provider with an auth-state change stream.

    Implementations:
    - LocalAuthProvider: credentials kept in the document store
    """

    @property
    @abstractmethod
    def current_user(self) -> Optional[AuthRecord]:
        """Identity currently signed in, or None."""
        pass

    @abstractmethod
    async def on_auth_state_changed(self, listener: AuthListener) -> Unsubscribe:
        """Subscribe to sign-in/sign-out events.

        The listener is awaited once immediately with the current state and
        again after every change.

        Returns:
            Callable that removes the listener
        """
        pass

    @abstractmethod
    async def sign_in_with_email_and_password(self, email: str, password: str) -> AuthRecord:
        """Sign in an existing account.

        Raises:
            AuthError: invalid email or credentials
        """
        pass

    @abstractmethod
    async def create_user_with_email_and_password(self, email: str, password: str) -> AuthRecord:
        """Create an account and sign it in.

        Raises:
            AuthError: invalid email, weak password or email already in use
        """
        pass

    @abstractmethod
    async def update_profile(self, display_name: Optional[str] = None) -> AuthRecord:
        """Update the signed-in identity.

        Raises:
            AuthError: if nobody is signed in
        """
        pass

    @abstractmethod
    async def sign_out(self) -> None:
        pass
