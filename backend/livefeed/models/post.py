# livefeed/models/post.py
"""
Database model for posts.
A post is a short text entry written by a user and pushed to live observers on creation.
Posts are immutable once created.
"""
import uuid
from tortoise import fields, models

class Post(models.Model):
    """
    Post database model.

    Relationships:
    - Belongs to a User (many-to-one)
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    title = fields.TextField()  # Non-empty, no length cap
    content = fields.TextField(default="")  # Optional body, empty string when omitted
    author = fields.ForeignKeyField(
        "models.User",
        related_name="posts",
        on_delete=fields.CASCADE
    )
    published = fields.BooleanField(default=True)  # Visibility flag; only published posts are listed
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "posts"
        ordering = ["-created_at"]
