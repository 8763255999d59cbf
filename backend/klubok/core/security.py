# klubok/core/security.py
"""
Security module for authentication.
Handles password hashing and session token (JWT) creation/validation.
"""
import datetime as dt

import jwt  # PyJWT
from passlib.context import CryptContext

from klubok.config import settings

# Password hashing context
# Argon2 is deliberately slow; time_cost is the tunable work factor
pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
    argon2__time_cost=settings.PASSWORD_HASH_ROUNDS,
)

JWT_ALG = "HS256"  # JWT signing algorithm (HMAC SHA-256)


def hash_password(plain: str) -> str:
    """
    Hash a plain text password using Argon2.

    Returns:
        Salted hash string (safe to store); the same password hashes
        differently every time.
    """
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    """
    Verify a plain text password against a stored hash.

    Returns False for a mismatch and for a hash passlib cannot identify.
    """
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        return False


def create_access_token(user_id: str, expires_delta: dt.timedelta | None = None) -> str:
    """
    Create a signed session token for a user.

    Token payload:
        - sub: user id
        - iat: issued at
        - exp: expiry, ACCESS_TOKEN_EXPIRE_DAYS after issuance unless
          `expires_delta` is given
    """
    if expires_delta is None:
        expires_delta = dt.timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)
    now = dt.datetime.now(dt.timezone.utc)
    payload = {
        "sub": user_id,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=JWT_ALG)


def decode_access_token(token: str) -> dict:
    """
    Decode and validate a session token.

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid or malformed
    """
    return jwt.decode(
        token,
        settings.JWT_SECRET,
        algorithms=[JWT_ALG],
        options={"require": ["sub", "exp"]},
    )


def verify_access_token(token: str | None) -> dict | None:
    """
    Return {"userId": ...} for a valid, unexpired token, otherwise None.
    Never raises for malformed input.
    """
    if not token or not isinstance(token, str):
        return None
    try:
        payload = decode_access_token(token)
    except jwt.PyJWTError:
        return None
    user_id = payload.get("sub")
    if not user_id or not isinstance(user_id, str):
        return None
    return {"userId": user_id}
