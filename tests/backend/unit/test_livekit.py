"""
Unit tests for services.livekit (Credential Issuer).
"""
import jwt
import pytest

from klubok.core.errors import ConfigurationError, ValidationError
from klubok.services.livekit import DEMO_WS_URL, CredentialIssuer

API_KEY = "APIunit"
API_SECRET = "unit-test-livekit-secret-0123456789"


def _decode(token: str) -> dict:
    return jwt.decode(token, API_SECRET, algorithms=["HS256"], leeway=10)


@pytest.fixture
def issuer():
    return CredentialIssuer(API_KEY, API_SECRET, "wss://rtc.example.com")


def test_credential_grants_one_room(issuer):
    credential = issuer.issue_room_credential("call-video-abcd12", "alice", "Alice")
    assert credential.token
    assert credential.ws_url == "wss://rtc.example.com"

    claims = _decode(credential.token)
    assert claims["sub"] == "alice"
    assert claims["iss"] == API_KEY
    assert claims["name"] == "Alice"
    video = claims["video"]
    assert video["room"] == "call-video-abcd12"
    assert video["roomJoin"] is True
    assert video["canPublish"] is True
    assert video["canSubscribe"] is True
    assert not video.get("roomAdmin")
    assert not video.get("roomCreate")


def test_display_name_defaults_to_identity(issuer):
    claims = _decode(issuer.issue_room_credential("room-1", "bob").token)
    assert claims["name"] == "bob"


@pytest.mark.parametrize("room,identity", [("", "alice"), ("room-1", ""), ("", "")])
def test_missing_room_or_identity(issuer, room, identity):
    with pytest.raises(ValidationError):
        issuer.issue_room_credential(room, identity)


@pytest.mark.parametrize("key,secret", [(None, API_SECRET), (API_KEY, None), ("", "")])
def test_missing_api_credentials(key, secret):
    with pytest.raises(ConfigurationError):
        CredentialIssuer(key, secret, "wss://rtc.example.com").issue_room_credential("room-1", "alice")


def test_endpoint_falls_back_to_demo_url(caplog):
    issuer = CredentialIssuer(API_KEY, API_SECRET, None)
    with caplog.at_level("WARNING"):
        credential = issuer.issue_room_credential("room-1", "alice")
    assert credential.ws_url == DEMO_WS_URL
    assert "LIVEKIT_WS_URL" in caplog.text


def test_from_settings(test_settings):
    issuer = CredentialIssuer.from_settings()
    assert issuer.api_key == test_settings.LIVEKIT_API_KEY
    assert issuer.ws_url == test_settings.LIVEKIT_WS_URL
