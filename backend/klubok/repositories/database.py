# klubok/repositories/database.py
"""
User directory backed by Tortoise ORM.

Uniqueness holds under concurrent registrations: the pre-check and the two
inserts run in one transaction and the unique indexes on username/email
reject whichever insert loses a race.
"""
from __future__ import annotations

from tortoise.exceptions import IntegrityError
from tortoise.expressions import Q
from tortoise.transactions import in_transaction

from klubok.core.db import close_db
from klubok.core.errors import ConflictError, NotFoundError
from klubok.models.user import User, UserCredential
from klubok.repositories.base import UserRecord, UserRepository


def _to_record(row: User) -> UserRecord:
    return UserRecord(
        id=row.id,
        username=row.username,
        email=row.email,
        avatar=row.avatar,
        phone_number=row.phone_number,
        created_at=row.created_at,
    )


class TortoiseUserRepository(UserRepository):
    async def find_by_email(self, email: str) -> UserRecord | None:
        row = await User.get_or_none(email=email)
        return _to_record(row) if row else None

    async def find_by_username(self, username: str) -> UserRecord | None:
        row = await User.get_or_none(username=username)
        return _to_record(row) if row else None

    async def find_by_id(self, user_id: str) -> UserRecord | None:
        row = await User.get_or_none(id=user_id)
        return _to_record(row) if row else None

    async def insert(self, user: UserRecord, password_hash: str) -> UserRecord:
        try:
            async with in_transaction() as conn:
                taken = await User.filter(
                    Q(id=user.id) | Q(email=user.email) | Q(username=user.username)
                ).using_db(conn).exists()
                if taken:
                    raise ConflictError()
                row = await User.create(
                    id=user.id,
                    username=user.username,
                    email=user.email,
                    avatar=user.avatar,
                    phone_number=user.phone_number,
                    using_db=conn,
                )
                await UserCredential.create(user_id=row.id, password_hash=password_hash, using_db=conn)
        except IntegrityError as exc:
            raise ConflictError() from exc
        return _to_record(row)

    async def update(self, user: UserRecord) -> UserRecord:
        row = await User.get_or_none(id=user.id)
        if not row:
            raise NotFoundError()
        taken = await User.filter(
            Q(email=user.email) | Q(username=user.username)
        ).exclude(id=user.id).exists()
        if taken:
            raise ConflictError()
        row.username = user.username
        row.email = user.email
        row.avatar = user.avatar
        row.phone_number = user.phone_number
        try:
            await row.save()
        except IntegrityError as exc:
            raise ConflictError() from exc
        return _to_record(row)

    async def list(self) -> list[UserRecord]:
        rows = await User.all().order_by("created_at")
        return [_to_record(r) for r in rows]

    async def count(self) -> int:
        return await User.all().count()

    async def get_password_hash(self, user_id: str) -> str | None:
        cred = await UserCredential.get_or_none(user_id=user_id)
        return cred.password_hash if cred else None

    async def set_password_hash(self, user_id: str, password_hash: str) -> None:
        if not await User.filter(id=user_id).exists():
            raise NotFoundError()
        await UserCredential.update_or_create(
            defaults={"password_hash": password_hash}, user_id=user_id
        )

    async def close(self) -> None:
        await close_db()
