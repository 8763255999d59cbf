# klubok/models/__init__.py
"""
Database models used by the Tortoise-backed user directory.

Models exported:
- User: profile data (username, email, avatar, phone number)
- UserCredential: password hash per user id
"""
from .user import User, UserCredential
