# livefeed/models/user.py
"""
Database model for users.
Represents a registered identity that can log in and own posts.
"""
import uuid
from tortoise import fields, models

NAME_MAX_LENGTH = 256
EMAIL_MAX_LENGTH = 256

class User(models.Model):
    """
    User database model.

    Relationships:
    - Has many Posts (one-to-many, via related_name="posts")

    Security:
    - Password is stored as a bcrypt hash (never plain text)
    - Email is stored lowercased so uniqueness is case-insensitive
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)  # Primary key: unique user identifier
    name = fields.CharField(max_length=NAME_MAX_LENGTH)  # Display name
    email = fields.CharField(
        max_length=EMAIL_MAX_LENGTH,
        unique=True,
        index=True
    )  # Login address (unique, lowercased, indexed for fast lookups)
    password_hash = fields.CharField(max_length=255)  # bcrypt hash string (salt embedded)
    created_at = fields.DatetimeField(auto_now_add=True)  # Timestamp when account was created

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"
