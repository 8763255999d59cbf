# klubok/core/bootstrap.py
"""
Bootstrap module for application initialization.
Builds the user directory for the configured store and seeds the demo
accounts on startup.
"""
import logging

from klubok.config import settings
from klubok.core.errors import ConfigurationError, ConflictError
from klubok.repositories.base import UserRepository
from klubok.repositories.memory import InMemoryUserRepository
from klubok.services.auth import SessionAuthenticator

logger = logging.getLogger("uvicorn.error")

TEST_ACCOUNT_PASSWORD = "test123"

# (username, email); the admin password comes from ADMIN_PASSWORD
TEST_ACCOUNTS = [
    ("alice", "alice@klubok.com"),
    ("bob", "bob@klubok.com"),
]


async def create_user_repository() -> UserRepository:
    """
    Return the user directory selected by USER_STORE ("memory" or "database").
    """
    store = settings.USER_STORE.lower()
    if store == "memory":
        logger.info("[bootstrap] Using in-memory user directory")
        return InMemoryUserRepository()
    if store == "database":
        from klubok.core.db import init_db
        from klubok.repositories.database import TortoiseUserRepository

        await init_db()
        logger.info("[bootstrap] Using database user directory")
        return TortoiseUserRepository()
    raise ConfigurationError(f"Unknown USER_STORE: {settings.USER_STORE}")


async def seed_test_accounts(auth: SessionAuthenticator) -> list[str]:
    """
    Register the demo accounts that are not present yet.
    Returns the usernames that were created.
    """
    accounts = [("admin", "admin@klubok.com", settings.ADMIN_PASSWORD)]
    accounts += [(name, email, TEST_ACCOUNT_PASSWORD) for name, email in TEST_ACCOUNTS]

    created = []
    for username, email, password in accounts:
        try:
            await auth.register(username, email, password)
        except ConflictError:
            continue  # Already seeded (persistent store)
        created.append(username)
    if created:
        logger.warning("[bootstrap] Seeded demo accounts: %s", ", ".join(created))
    return created
