# klubok/repositories/base.py
"""
User directory interface.

The Session Authenticator only talks to `UserRepository`; the in-memory and
database stores are interchangeable behind it. Password hashes live in a
separate credential store and never appear on `UserRecord`.
"""
from __future__ import annotations

import abc
import datetime as dt
from dataclasses import dataclass, field


def utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


@dataclass
class UserRecord:
    id: str
    username: str
    email: str
    avatar: str | None = None
    phone_number: str | None = None
    created_at: dt.datetime = field(default_factory=utc_now)

    def to_public(self) -> dict:
        """JSON shape returned by the API (camelCase, no secrets)."""
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "avatar": self.avatar,
            "phoneNumber": self.phone_number,
            "createdAt": self.created_at.isoformat(),
        }


class UserRepository(abc.ABC):
    """Storage for user records and their password hashes."""

    @abc.abstractmethod
    async def find_by_email(self, email: str) -> UserRecord | None: ...

    @abc.abstractmethod
    async def find_by_username(self, username: str) -> UserRecord | None: ...

    @abc.abstractmethod
    async def find_by_id(self, user_id: str) -> UserRecord | None: ...

    @abc.abstractmethod
    async def insert(self, user: UserRecord, password_hash: str) -> UserRecord:
        """
        Store a new user and its credential as one atomic step.

        Raises:
            ConflictError: If the id, username or email is already taken.
        """

    @abc.abstractmethod
    async def update(self, user: UserRecord) -> UserRecord:
        """
        Persist changed profile fields of an existing user.

        Raises:
            NotFoundError: If the user does not exist.
            ConflictError: If the new username or email belongs to someone else.
        """

    @abc.abstractmethod
    async def list(self) -> list[UserRecord]:
        """All users, oldest first."""

    @abc.abstractmethod
    async def get_password_hash(self, user_id: str) -> str | None: ...

    @abc.abstractmethod
    async def set_password_hash(self, user_id: str, password_hash: str) -> None: ...

    async def count(self) -> int:
        return len(await self.list())

    async def close(self) -> None:
        """Release resources held by the store."""
