"""
Services Module

- auth: Session Authenticator (registration, login, session tokens)
- livekit: Credential Issuer for LiveKit rooms
- stats: in-process call statistics
"""
from .auth import SessionAuthenticator
from .livekit import CredentialIssuer, RoomCredential
from .stats import CallStatsRecorder

__all__ = [
    "SessionAuthenticator",
    "CredentialIssuer",
    "RoomCredential",
    "CallStatsRecorder",
]
