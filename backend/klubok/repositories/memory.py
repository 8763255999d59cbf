# klubok/repositories/memory.py
"""
Process-local user directory.

Users and password hashes are kept in two separate dicts. Writes go through
an asyncio.Lock so the uniqueness check and the insert happen together even
when registrations interleave on the event loop.
"""
from __future__ import annotations

import asyncio
from dataclasses import replace

from klubok.core.errors import ConflictError, NotFoundError
from klubok.repositories.base import UserRecord, UserRepository


class InMemoryUserRepository(UserRepository):
    def __init__(self):
        self._users: dict[str, UserRecord] = {}
        self._passwords: dict[str, str] = {}  # user id -> password hash
        self._lock = asyncio.Lock()

    def _conflicts(self, user: UserRecord) -> bool:
        for other in self._users.values():
            if other.id == user.id:
                continue
            if other.email == user.email or other.username == user.username:
                return True
        return False

    async def find_by_email(self, email: str) -> UserRecord | None:
        for user in self._users.values():
            if user.email == email:
                return replace(user)
        return None

    async def find_by_username(self, username: str) -> UserRecord | None:
        for user in self._users.values():
            if user.username == username:
                return replace(user)
        return None

    async def find_by_id(self, user_id: str) -> UserRecord | None:
        user = self._users.get(user_id)
        return replace(user) if user else None

    async def insert(self, user: UserRecord, password_hash: str) -> UserRecord:
        async with self._lock:
            if user.id in self._users or self._conflicts(user):
                raise ConflictError()
            self._users[user.id] = replace(user)
            self._passwords[user.id] = password_hash
        return replace(user)

    async def update(self, user: UserRecord) -> UserRecord:
        async with self._lock:
            if user.id not in self._users:
                raise NotFoundError()
            if self._conflicts(user):
                raise ConflictError()
            self._users[user.id] = replace(user)
        return replace(user)

    async def list(self) -> list[UserRecord]:
        return [replace(u) for u in self._users.values()]

    async def get_password_hash(self, user_id: str) -> str | None:
        return self._passwords.get(user_id)

    async def set_password_hash(self, user_id: str, password_hash: str) -> None:
        async with self._lock:
            if user_id not in self._users:
                raise NotFoundError()
            self._passwords[user_id] = password_hash
