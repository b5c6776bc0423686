"""Identity provider backed by the document store.

Accounts live in the ``accounts`` collection keyed by normalized email:

    accounts/{email} -> {uid, email, passwordHash, displayName,
                         createdAt, lastSignInAt, updatedAt}

Passwords are hashed with bcrypt. The signed-in identity is kept in
process memory, one per provider instance.
"""
import asyncio
import logging
import re
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Any, Optional

import bcrypt

from ...config import ACCOUNTS_COLLECTION, MAX_PASSWORD_BYTES, MIN_PASSWORD_LENGTH
from ..documents import SERVER_TIMESTAMP, DocumentSnapshot, DocumentStore
from .base import (
    EMAIL_ALREADY_IN_USE,
    INVALID_CREDENTIAL,
    INVALID_EMAIL,
    NO_CURRENT_USER,
    WEAK_PASSWORD,
    AuthError,
    AuthListener,
    AuthProvider,
    AuthRecord,
    Unsubscribe,
)

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _as_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def _too_long(password: Optional[str]) -> bool:
    return len((password or "").encode("utf-8")) > MAX_PASSWORD_BYTES


class LocalAuthProvider(AuthProvider):
    """Email/password accounts stored in a ``DocumentStore``."""

    def __init__(self, store: DocumentStore, bcrypt_rounds: int = 12):
        """Initialize provider.

        Args:
            store: Document store holding the accounts collection
            bcrypt_rounds: bcrypt cost factor
        """
        self.store = store
        self.bcrypt_rounds = bcrypt_rounds
        self._current: Optional[AuthRecord] = None
        self._listeners: list[AuthListener] = []

    @property
    def current_user(self) -> Optional[AuthRecord]:
        return self._current

    async def on_auth_state_changed(self, listener: AuthListener) -> Unsubscribe:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        await listener(self._current)
        return unsubscribe

    async def sign_in_with_email_and_password(self, email: str, password: str) -> AuthRecord:
        email = self._normalize_email(email)
        snapshot = await self.store.get(ACCOUNTS_COLLECTION, email)

        if _too_long(password):
            raise AuthError(INVALID_CREDENTIAL, "Invalid email or password")

        if not snapshot.exists or not await self._verify_password(
            password, snapshot.get("passwordHash", "")
        ):
            raise AuthError(INVALID_CREDENTIAL, "Invalid email or password")

        await self.store.update(ACCOUNTS_COLLECTION, email, {"lastSignInAt": SERVER_TIMESTAMP})
        record = self._to_record(await self.store.get(ACCOUNTS_COLLECTION, email))
        logger.info("Signed in %s", record.uid)
        await self._set_current(record)
        return record

    async def create_user_with_email_and_password(self, email: str, password: str) -> AuthRecord:
        email = self._normalize_email(email)
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise AuthError(
                WEAK_PASSWORD,
                f"Password should be at least {MIN_PASSWORD_LENGTH} characters"
            )
        if _too_long(password):
            raise AuthError(
                WEAK_PASSWORD,
                f"Password should be at most {MAX_PASSWORD_BYTES} bytes"
            )

        password_hash = await self._hash_password(password)
        uid = uuid.uuid4().hex

        def claim_email(snapshot: DocumentSnapshot):
            if snapshot.exists:
                raise AuthError(EMAIL_ALREADY_IN_USE, "Email address is already in use")
            return {
                "uid": uid,
                "email": email,
                "passwordHash": password_hash,
                "displayName": None,
                "createdAt": SERVER_TIMESTAMP,
                "lastSignInAt": SERVER_TIMESTAMP,
                "updatedAt": SERVER_TIMESTAMP,
            }, None

        await self.store.transactional_update(ACCOUNTS_COLLECTION, email, claim_email)
        record = self._to_record(await self.store.get(ACCOUNTS_COLLECTION, email))
        logger.info("Created account %s", uid)
        await self._set_current(record)
        return record

    async def update_profile(self, display_name: Optional[str] = None) -> AuthRecord:
        if self._current is None:
            raise AuthError(NO_CURRENT_USER, "No user is signed in")

        email = self._current.email
        await self.store.update(ACCOUNTS_COLLECTION, email, {
            "displayName": display_name,
            "updatedAt": SERVER_TIMESTAMP,
        })
        snapshot = await self.store.get(ACCOUNTS_COLLECTION, email)
        self._current = replace(
            self._current,
            display_name=display_name,
            updated_at=_as_datetime(snapshot.get("updatedAt"))
        )
        return self._current

    async def sign_out(self) -> None:
        if self._current is not None:
            logger.info("Signed out %s", self._current.uid)
        await self._set_current(None)

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _set_current(self, record: Optional[AuthRecord]) -> None:
        self._current = record
        for listener in list(self._listeners):
            await listener(record)

    def _normalize_email(self, email: str) -> str:
        email = (email or "").strip().lower()
        if not EMAIL_PATTERN.match(email):
            raise AuthError(INVALID_EMAIL, "The email address is badly formatted")
        return email

    async def _hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt(self.bcrypt_rounds)
        hashed = await asyncio.to_thread(bcrypt.hashpw, password.encode('utf-8'), salt)
        return hashed.decode('utf-8')

    async def _verify_password(self, password: str, hashed: str) -> bool:
        if not hashed:
            return False
        return await asyncio.to_thread(
            bcrypt.checkpw, (password or "").encode('utf-8'), hashed.encode('utf-8')
        )

    @staticmethod
    def _to_record(snapshot: DocumentSnapshot) -> AuthRecord:
        return AuthRecord(
            uid=snapshot.get("uid"),
            email=snapshot.get("email"),
            display_name=snapshot.get("displayName"),
            creation_time=_as_datetime(snapshot.get("createdAt")),
            last_sign_in_time=_as_datetime(snapshot.get("lastSignInAt")),
            updated_at=_as_datetime(snapshot.get("updatedAt")),
        )
