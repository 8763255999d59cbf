# klubok/api/v1/routers/token.py
from fastapi import APIRouter, Depends

from klubok.api.v1.deps import get_credential_issuer, get_current_user
from klubok.repositories.base import UserRecord
from klubok.schemas.call import TokenRequest, TokenResponse
from klubok.services.livekit import CredentialIssuer

router = APIRouter(tags=["calls"])


@router.post("/token", response_model=TokenResponse)
async def create_room_token(
    body: TokenRequest,
    user: UserRecord = Depends(get_current_user),
    issuer: CredentialIssuer = Depends(get_credential_issuer),
):
    """
    Issue a LiveKit credential for one room.

    A valid session is always required. The participant identity and display
    name are the authenticated user's username; `identity`/`name` sent by the
    client are ignored.

    Raises:
        AuthError (401): If the session token is missing or invalid
        ValidationError (400): If room is empty
        ConfigurationError (500): If LiveKit API credentials are not configured
    """
    credential = issuer.issue_room_credential(body.room, user.username, user.username)
    return {"token": credential.token, "wsUrl": credential.ws_url}
