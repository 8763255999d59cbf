# klubok/schemas/auth.py
"""
Pydantic schemas for authentication and user endpoints.
"""
from typing import List, Optional

from pydantic import BaseModel


class LoginRequest(BaseModel):
    """
    Request model for user login endpoint.
    """
    email: str  # Login email
    password: str  # Plain text password (verified against the stored hash)


class RegisterIn(BaseModel):
    username: str  # Display name (must be unique)
    email: str  # Must be unique
    password: str  # Hashed server-side before storage


class UserOut(BaseModel):
    """
    Public user information. Never includes password data.
    """
    id: str
    username: str
    email: str
    avatar: Optional[str] = None  # e.g. /avatars/<id>.jpg
    phoneNumber: Optional[str] = None  # +666-AAA-NNNN
    createdAt: str  # ISO 8601 timestamp


class LoginResponse(BaseModel):
    """
    Response model for successful login / registration.
    """
    user: UserOut
    token: str  # Session token for the Authorization: Bearer header


class UserDetailOut(BaseModel):
    user: UserOut


class UserListOut(BaseModel):
    users: List[UserOut]
