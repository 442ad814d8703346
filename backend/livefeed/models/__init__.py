# livefeed/models/__init__.py
"""
Database models module initialization.
Exports all Tortoise ORM models for convenient imports.

Models exported:
- User: Registered identity
- Post: Short text entry owned by a User
"""
from .user import User
from .post import Post
