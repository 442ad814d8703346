# livefeed/schemas/post.py
"""
Pydantic schemas for posts.
EntryOut is both the REST response body and the payload of ``newEntry`` events.
"""
import datetime as dt
from pydantic import BaseModel

class PostIn(BaseModel):
    title: str | None = None
    content: str | None = None

class AuthorOut(BaseModel):
    id: str
    name: str

class EntryOut(BaseModel):
    id: str
    title: str
    content: str
    authorId: str
    author: AuthorOut
    published: bool
    createdAt: dt.datetime

    @classmethod
    def from_model(cls, post) -> "EntryOut":
        """Build from a Post whose ``author`` relation has been fetched."""
        author = post.author
        return cls(
            id=str(post.id),
            title=post.title,
            content=post.content or "",
            authorId=str(author.id),
            author=AuthorOut(id=str(author.id), name=author.name),
            published=post.published,
            createdAt=post.created_at,
        )
