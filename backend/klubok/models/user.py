# klubok/models/user.py
"""
Database models for the persistent user directory.
Profile data and password hashes are stored in separate tables, mirroring the
separation kept by the in-memory store.
"""
from tortoise import fields, models


class User(models.Model):
    """
    User database model.

    Security:
    - No password data on this table (see UserCredential)
    - Username and email must each be unique across all users
    """
    id = fields.CharField(pk=True, max_length=32)  # Random base-36 identifier
    username = fields.CharField(max_length=256, unique=True, index=True)  # Display name (unique)
    email = fields.CharField(max_length=256, unique=True, index=True)  # Login email (unique)
    avatar = fields.CharField(max_length=512, null=True)  # Avatar reference, e.g. /avatars/<id>.jpg
    phone_number = fields.CharField(max_length=32, null=True)  # +666-AAA-NNNN
    created_at = fields.DatetimeField(auto_now_add=True)  # Set on creation

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"


class UserCredential(models.Model):
    """
    Password store: one salted hash per user id.
    A user without a row here can never authenticate.
    """
    user_id = fields.CharField(pk=True, max_length=32)
    password_hash = fields.CharField(max_length=255)  # argon2 hash, never plain text

    class Meta:
        table = "user_credentials"
