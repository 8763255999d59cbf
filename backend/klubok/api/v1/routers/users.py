# klubok/api/v1/routers/users.py
import logging
from pathlib import Path

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import FileResponse
from starlette.concurrency import run_in_threadpool

from klubok.api.v1.deps import get_authenticator, get_current_user, get_session_user_id
from klubok.config import settings
from klubok.core.errors import NotFoundError, ValidationError
from klubok.repositories.base import UserRecord
from klubok.schemas.auth import UserDetailOut, UserListOut
from klubok.services.auth import SessionAuthenticator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])
avatars_router = APIRouter(prefix="/avatars", tags=["users"])

AVATAR_EXTENSIONS = {"image/jpeg": ".jpg", "image/png": ".png", "image/gif": ".gif", "image/webp": ".webp"}


@router.get("", response_model=UserListOut)
async def list_users(
    _: UserRecord = Depends(get_current_user),
    auth: SessionAuthenticator = Depends(get_authenticator),
):
    """Contact list: every registered user (no password data)."""
    users = await auth.list_users()
    return {"users": [u.to_public() for u in users]}


async def _read_avatar(avatar: UploadFile) -> tuple[bytes, str] | None:
    """
    Read and check an avatar upload without touching AVATAR_DIR.

    Returns (data, extension), or None for an empty upload.

    Raises:
        ValidationError (400): If the upload is not an image or exceeds AVATAR_MAX_BYTES
    """
    data = await avatar.read(settings.AVATAR_MAX_BYTES + 1)
    if not data:
        return None
    ext = AVATAR_EXTENSIONS.get(avatar.content_type or "")
    if ext is None:
        raise ValidationError(f"Avatar must be one of: {', '.join(AVATAR_EXTENSIONS)}")
    if len(data) > settings.AVATAR_MAX_BYTES:
        raise ValidationError(f"Avatar must not exceed {settings.AVATAR_MAX_BYTES} bytes")
    return data, ext


async def _store_avatar(user_id: str, data: bytes, ext: str) -> None:
    """Write the avatar as <user id><ext> and drop any copy under another extension."""
    avatar_dir = Path(settings.AVATAR_DIR)

    def _write():
        avatar_dir.mkdir(parents=True, exist_ok=True)
        (avatar_dir / f"{user_id}{ext}").write_bytes(data)
        for stale in set(AVATAR_EXTENSIONS.values()) - {ext}:
            (avatar_dir / f"{user_id}{stale}").unlink(missing_ok=True)

    await run_in_threadpool(_write)
    logger.info("Stored avatar for user id=%s (%d bytes)", user_id, len(data))


@router.put("/profile", response_model=UserDetailOut)
async def update_profile(
    user_id: str = Depends(get_session_user_id),
    username: str | None = Form(default=None),
    email: str | None = Form(default=None),
    currentPassword: str | None = Form(default=None),
    newPassword: str | None = Form(default=None),
    avatar: UploadFile | None = File(default=None),
    auth: SessionAuthenticator = Depends(get_authenticator),
):
    """
    Update the caller's own profile (multipart form).

    Blank fields keep their current value. A new password is applied only
    together with the correct current password. The avatar file is written
    only after the rest of the update has been accepted.

    Raises:
        AuthError (401): If the session token is missing or invalid
        NotFoundError (404): If the user no longer exists
        ValidationError (400): If the current password is wrong or the avatar is rejected
        ConflictError (409): If the new username/email is taken
    """
    upload = await _read_avatar(avatar) if avatar is not None else None
    avatar_ref = f"/avatars/{user_id}{upload[1]}" if upload else None
    user = await auth.update_profile(
        user_id,
        username=username,
        email=email,
        current_password=currentPassword,
        new_password=newPassword,
        avatar=avatar_ref,
    )
    if upload:
        await _store_avatar(user_id, *upload)
    return {"user": user.to_public()}


@avatars_router.get("/{filename}")
async def get_avatar(filename: str):
    """Serve an uploaded avatar from AVATAR_DIR."""
    path = Path(settings.AVATAR_DIR) / filename
    if Path(filename).name != filename or not path.is_file():
        raise NotFoundError("Avatar not found")
    return FileResponse(path)
