# klubok/repositories/__init__.py
"""
User directory implementations.
- memory: process-local dicts (default)
- database: Tortoise ORM tables (USER_STORE=database)
"""
from .base import UserRecord, UserRepository
from .memory import InMemoryUserRepository
