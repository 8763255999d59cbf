# klubok/api/v1/routers/auth.py
from fastapi import APIRouter, Depends, Response

from klubok.api.v1.deps import get_authenticator, get_current_user
from klubok.core.errors import AuthError, ValidationError
from klubok.repositories.base import UserRecord
from klubok.schemas.auth import LoginRequest, LoginResponse, RegisterIn, UserDetailOut
from klubok.services.auth import SessionAuthenticator

router = APIRouter(tags=["auth"])


def _session_response(auth: SessionAuthenticator, user: UserRecord, response: Response) -> dict:
    token = auth.issue_token(user.id)
    response.set_cookie("accessToken", token, httponly=True, secure=False, samesite="lax")
    return {"user": user.to_public(), "token": token}


@router.post("/login", response_model=LoginResponse)
async def login(
    payload: LoginRequest,
    response: Response,
    auth: SessionAuthenticator = Depends(get_authenticator),
):
    """
    Authenticate by email + password and issue a session token.

    The token is returned in the body and also set as an HttpOnly cookie
    named "accessToken" for browser clients.

    Raises:
        ValidationError (400): If email or password is empty
        AuthError (401): If credentials are invalid (same answer for an
            unknown email and a wrong password)
    """
    if not payload.email or not payload.password:
        raise ValidationError("Email and password are required")
    user = await auth.authenticate(payload.email, payload.password)
    if not user:
        raise AuthError("Invalid email or password")
    return _session_response(auth, user, response)


@router.post("/register", response_model=LoginResponse)
async def register(
    body: RegisterIn,
    response: Response,
    auth: SessionAuthenticator = Depends(get_authenticator),
):
    """
    Create an account and log it in right away.

    Raises:
        ValidationError (400): If a field is empty
        ConflictError (409): If the email or username is taken
    """
    user = await auth.register(body.username, body.email, body.password)
    return _session_response(auth, user, response)


@router.get("/me", response_model=UserDetailOut)
async def me(user: UserRecord = Depends(get_current_user)):
    """Return the user behind the presented session token."""
    return {"user": user.to_public()}


@router.post("/logout")
async def logout(response: Response):
    """
    Clear the accessToken cookie. The token itself stays valid until it
    expires; there is no revocation list.
    """
    response.delete_cookie("accessToken")
    return {"success": True}
