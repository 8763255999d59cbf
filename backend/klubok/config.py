# klubok/config.py
import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Settings(BaseModel):
    # General app settings
    APP_NAME: str = "Klubok Calls API"
    env: str = os.getenv("ENV", "dev")
    API_PREFIX: str = os.getenv("API_PREFIX", "")

    # Host & Port settings
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))

    # CORS origins for frontend
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Session tokens
    JWT_SECRET: str = os.getenv("JWT_SECRET", "dev-secret-change-me-in-production")  # Use a strong secret in production
    ACCESS_TOKEN_EXPIRE_DAYS: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_DAYS", "7"))

    # argon2 time cost; raise it to make hashing slower
    PASSWORD_HASH_ROUNDS: int = int(os.getenv("PASSWORD_HASH_ROUNDS", "3"))

    # LiveKit (real-time media provider)
    LIVEKIT_API_KEY: str | None = os.getenv("LIVEKIT_API_KEY")
    LIVEKIT_API_SECRET: str | None = os.getenv("LIVEKIT_API_SECRET")
    LIVEKIT_WS_URL: str | None = os.getenv("LIVEKIT_WS_URL")

    # User directory: "memory" (default) or "database" (Tortoise ORM)
    USER_STORE: str = os.getenv("USER_STORE", "memory")
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite://klubok.sqlite3")

    # Demo accounts created at startup (admin@klubok.com etc.)
    SEED_TEST_ACCOUNTS: bool = _env_flag("SEED_TEST_ACCOUNTS", "true")
    ADMIN_PASSWORD: str = os.getenv("ADMIN_PASSWORD", "admin123")

    # Uploaded avatars are written here and served as /avatars/<file>
    AVATAR_DIR: str = os.getenv("AVATAR_DIR", "avatars")
    AVATAR_MAX_BYTES: int = int(os.getenv("AVATAR_MAX_BYTES", str(2 * 1024 * 1024)))

settings = Settings()  # Instantiate configuration
