# klubok/core/db.py
"""
Database configuration and initialization module.
Only used when USER_STORE=database; the default in-memory directory needs no
connection.
"""
from tortoise import Tortoise

from klubok.config import settings


def tortoise_config(db_url: str | None = None) -> dict:
    """Tortoise ORM configuration dictionary for the given connection URL."""
    return {
        "connections": {"default": db_url or settings.DATABASE_URL},
        "apps": {
            "models": {
                "models": ["klubok.models.user"],
                "default_connection": "default",
            },
        },
    }


async def init_db(db_url: str | None = None, generate_schemas: bool = True):
    """
    Initialize the Tortoise ORM connection and register the models.

    Tables are created when missing (`safe=True` never drops existing data).
    """
    await Tortoise.init(config=tortoise_config(db_url))
    if generate_schemas:
        await Tortoise.generate_schemas(safe=True)


async def close_db():
    """Close all database connections."""
    await Tortoise.close_connections()
