# klubok/services/auth.py
"""
Session Authenticator.

Verifies email/password pairs against the user directory, registers users and
issues / verifies session tokens. All storage goes through the injected
`UserRepository`.
"""
from __future__ import annotations

import logging
import random
import secrets
import string
from dataclasses import replace

from starlette.concurrency import run_in_threadpool

from klubok.core.errors import ConflictError, NotFoundError, ValidationError
from klubok.core.security import (
    create_access_token,
    hash_password,
    verify_access_token,
    verify_password,
)
from klubok.repositories.base import UserRecord, UserRepository

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits
_dummy_hash: str | None = None


def generate_id(length: int = 13) -> str:
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(length))


def generate_phone_number(rng: random.Random | None = None) -> str:
    """Random number shaped like +666-AAA-NNNN (AAA 100-999, NNNN 1000-9999)."""
    rng = rng or random
    area_code = rng.randint(100, 999)
    number = rng.randint(1000, 9999)
    return f"+666-{area_code}-{number}"


def _verify_dummy(password: str) -> bool:
    """Verify against a throwaway hash when the account has no real one."""
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = hash_password(secrets.token_urlsafe(16))
    return verify_password(password, _dummy_hash)


def _require(**values: str | None) -> None:
    missing = [name for name, value in values.items() if not value or not value.strip()]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


class SessionAuthenticator:
    def __init__(self, users: UserRepository):
        self.users = users

    async def register(self, username: str, email: str, password: str) -> UserRecord:
        """
        Create a user with a random phone number and a hashed password.

        Raises:
            ValidationError: If any field is empty
            ConflictError: If the email or username is already registered
        """
        _require(username=username, email=email, password=password)
        username, email = username.strip(), email.strip()
        # Fast path before paying for the hash; the repository re-checks atomically
        if await self.users.find_by_email(email) or await self.users.find_by_username(username):
            raise ConflictError()
        password_hash = await run_in_threadpool(hash_password, password)
        user = UserRecord(
            id=generate_id(),
            username=username,
            email=email,
            phone_number=generate_phone_number(),
        )
        user = await self.users.insert(user, password_hash)
        logger.info("Registered user id=%s username=%s", user.id, user.username)
        return user

    async def authenticate(self, email: str, password: str) -> UserRecord | None:
        """
        Return the user only if the password matches.
        Unknown email, missing credential and wrong password all yield None.
        """
        if not email or not password:
            return None
        user = await self.users.find_by_email(email)
        password_hash = await self.users.get_password_hash(user.id) if user else None
        if not password_hash:
            # same argon2 cost as a wrong password
            await run_in_threadpool(_verify_dummy, password)
            return None
        ok = await run_in_threadpool(verify_password, password, password_hash)
        return user if ok else None

    def issue_token(self, user_id: str) -> str:
        return create_access_token(user_id)

    def verify_token(self, token: str | None) -> dict | None:
        return verify_access_token(token)

    async def get_user(self, user_id: str) -> UserRecord | None:
        return await self.users.find_by_id(user_id)

    async def list_users(self) -> list[UserRecord]:
        return await self.users.list()

    async def update_profile(
        self,
        user_id: str,
        username: str | None = None,
        email: str | None = None,
        current_password: str | None = None,
        new_password: str | None = None,
        avatar: str | None = None,
    ) -> UserRecord:
        """
        Apply a profile edit. Blank fields keep their current value.

        The password changes only when both passwords are given and the
        current one verifies.

        Raises:
            NotFoundError: If the user no longer exists
            ValidationError: If the current password is wrong
            ConflictError: If the new username/email belongs to another user
        """
        user = await self.users.find_by_id(user_id)
        if not user:
            raise NotFoundError()

        if new_password and current_password:
            stored = await self.users.get_password_hash(user_id)
            ok = bool(stored) and await run_in_threadpool(verify_password, current_password, stored)
            if not ok:
                raise ValidationError("Current password is incorrect")
        elif new_password:
            raise ValidationError("Current password is required to set a new one")

        updated = replace(
            user,
            username=(username or "").strip() or user.username,
            email=(email or "").strip() or user.email,
            avatar=avatar or user.avatar,
        )
        if updated != user:
            updated = await self.users.update(updated)
        if new_password:
            new_hash = await run_in_threadpool(hash_password, new_password)
            await self.users.set_password_hash(user_id, new_hash)
            logger.info("Password changed for user id=%s", user_id)
        return updated
