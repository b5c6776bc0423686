"""Identity provider."""
from .base import (
    EMAIL_ALREADY_IN_USE,
    INVALID_CREDENTIAL,
    INVALID_EMAIL,
    NO_CURRENT_USER,
    WEAK_PASSWORD,
    AuthError,
    AuthProvider,
    AuthRecord,
)
from .local_provider import LocalAuthProvider

__all__ = [
    "EMAIL_ALREADY_IN_USE",
    "INVALID_CREDENTIAL",
    "INVALID_EMAIL",
    "NO_CURRENT_USER",
    "WEAK_PASSWORD",
    "AuthError",
    "AuthProvider",
    "AuthRecord",
    "LocalAuthProvider",
]
