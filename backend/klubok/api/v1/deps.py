# klubok/api/v1/deps.py
from fastapi import Depends, Header, Request

from klubok.core.errors import AuthError
from klubok.repositories.base import UserRecord
from klubok.services.auth import SessionAuthenticator
from klubok.services.livekit import CredentialIssuer
from klubok.services.stats import CallStatsRecorder


def get_authenticator(request: Request) -> SessionAuthenticator:
    """The Session Authenticator created at startup (see klubok.main)."""
    return request.app.state.auth


def get_stats_recorder(request: Request) -> CallStatsRecorder:
    return request.app.state.stats


def get_credential_issuer() -> CredentialIssuer:
    """
    Built per request so LiveKit settings changes apply without a restart.
    Override with `app.dependency_overrides` in tests.
    """
    return CredentialIssuer.from_settings()


def _extract_token(request: Request, authorization: str | None) -> str | None:
    # 1) Prioritize Authorization: Bearer xxx
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()
        if token:
            return token
    # 2) Secondly HttpOnly Cookie: accessToken
    return request.cookies.get("accessToken")


async def get_session_user_id(
    request: Request,
    authorization: str | None = Header(default=None),
    auth: SessionAuthenticator = Depends(get_authenticator),
) -> str:
    """
    Verify the session token and return the user id it carries.

    Raises:
        AuthError (401): If no token is provided or it is invalid/expired
    """
    token = _extract_token(request, authorization)
    if not token:
        raise AuthError("Authorization required")
    decoded = auth.verify_token(token)
    if not decoded:
        raise AuthError("Invalid or expired token")
    return decoded["userId"]


async def get_current_user(
    user_id: str = Depends(get_session_user_id),
    auth: SessionAuthenticator = Depends(get_authenticator),
) -> UserRecord:
    """
    FastAPI dependency returning the authenticated user record.

    Raises:
        AuthError (401): If the token is missing, invalid or expired, or its
            user no longer exists

    Usage:
        @router.get("/protected")
        async def protected_route(user: UserRecord = Depends(get_current_user)):
            return {"user_id": user.id}
    """
    user = await auth.get_user(user_id)
    if not user:
        raise AuthError("User no longer exists")
    return user
