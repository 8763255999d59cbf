import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from klubok.config import settings
from klubok.core.bootstrap import seed_test_accounts
from klubok.main import app
from klubok.repositories.memory import InMemoryUserRepository
from klubok.services.auth import SessionAuthenticator
from klubok.services.stats import CallStatsRecorder

LIVEKIT_API_KEY = "APItestkey"
LIVEKIT_API_SECRET = "livekit-test-secret-0123456789abcdef"
LIVEKIT_WS_URL = "wss://klubok-test.livekit.cloud"


@pytest.fixture(autouse=True)
def test_settings(monkeypatch, tmp_path):
    """
    Deterministic configuration for every test: LiveKit credentials present,
    avatars written to a temp dir.
    """
    monkeypatch.setattr(settings, "LIVEKIT_API_KEY", LIVEKIT_API_KEY)
    monkeypatch.setattr(settings, "LIVEKIT_API_SECRET", LIVEKIT_API_SECRET)
    monkeypatch.setattr(settings, "LIVEKIT_WS_URL", LIVEKIT_WS_URL)
    monkeypatch.setattr(settings, "AVATAR_DIR", str(tmp_path / "avatars"))
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", "admin123")
    return settings


@pytest.fixture
def repository():
    return InMemoryUserRepository()


@pytest.fixture
def authenticator(repository):
    return SessionAuthenticator(repository)


@pytest_asyncio.fixture
async def client(authenticator):
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh
    in-memory directory holding the demo accounts.
    """
    app.state.auth = authenticator
    app.state.stats = CallStatsRecorder()
    await seed_test_accounts(authenticator)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def create_user(authenticator):
    """
    Factory fixture to register users directly through the authenticator.
    """

    async def _create_user(password: str = "UserPass!23"):
        suffix = uuid.uuid4().hex[:6]
        user = await authenticator.register(f"user_{suffix}", f"{suffix}@example.com", password)
        return user, password

    return _create_user


@pytest_asyncio.fixture
async def auth_header_factory(client):
    """
    Helper fixture to obtain Authorization headers via the login endpoint.
    """

    async def _get_headers(email: str, password: str) -> dict[str, str]:
        resp = await client.post("/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        token = resp.json()["token"]
        return {"Authorization": f"Bearer {token}"}

    return _get_headers


@pytest_asyncio.fixture
async def admin_headers(auth_header_factory):
    return await auth_header_factory("admin@klubok.com", "admin123")
