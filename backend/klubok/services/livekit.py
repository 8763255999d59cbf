# klubok/services/livekit.py
"""
Credential Issuer for the LiveKit real-time media service.

Mints a room-scoped access token (join + publish + subscribe in exactly one
room) with the LiveKit server SDK and pairs it with the WebSocket URL clients
connect to. Nothing is stored server-side.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from livekit import api

from klubok.config import settings
from klubok.core.errors import ConfigurationError, ValidationError

logger = logging.getLogger(__name__)

DEMO_WS_URL = "wss://livekit-demo.herokuapp.com"


@dataclass(slots=True)
class RoomCredential:
    token: str
    ws_url: str


class CredentialIssuer:
    def __init__(self, api_key: str | None, api_secret: str | None, ws_url: str | None = None):
        self.api_key = api_key
        self.api_secret = api_secret
        self.ws_url = ws_url

    @classmethod
    def from_settings(cls) -> "CredentialIssuer":
        return cls(
            api_key=settings.LIVEKIT_API_KEY,
            api_secret=settings.LIVEKIT_API_SECRET,
            ws_url=settings.LIVEKIT_WS_URL,
        )

    def endpoint_url(self) -> str:
        if self.ws_url:
            return self.ws_url
        logger.warning("LIVEKIT_WS_URL is not set, falling back to public demo endpoint %s", DEMO_WS_URL)
        return DEMO_WS_URL

    def issue_room_credential(
        self,
        room: str,
        identity: str,
        display_name: str | None = None,
    ) -> RoomCredential:
        """
        Return a LiveKit token for `identity` in `room` plus the endpoint URL.

        Raises:
            ValidationError: If room or identity is empty
            ConfigurationError: If the LiveKit API key/secret are not configured
        """
        if not room or not identity:
            raise ValidationError("Missing room or identity")
        if not self.api_key or not self.api_secret:
            raise ConfigurationError("Missing LiveKit API credentials")

        grants = api.VideoGrants(
            room_join=True,
            room=room,
            can_publish=True,
            can_subscribe=True,
        )
        token = (
            api.AccessToken(self.api_key, self.api_secret)
            .with_identity(identity)
            .with_name(display_name or identity)
            .with_grants(grants)
            .to_jwt()
        )
        return RoomCredential(token=token, ws_url=self.endpoint_url())
