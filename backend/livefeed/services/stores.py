"""
Persistence collaborators backed by Tortoise ORM.

IdentityStore and ContentStore are the only places that talk to the database.
ORM/driver failures are translated into StoreConflict / StoreError so callers
never see database detail.
"""
from typing import List

from tortoise.exceptions import BaseORMException, IntegrityError

from ..core.errors import StoreConflict, StoreError
from ..models import Post, User


def normalize_email(email: str) -> str:
    return email.strip().lower()


class IdentityStore:
    async def find_by_email(self, email: str) -> User | None:
        try:
            return await User.get_or_none(email=normalize_email(email))
        except BaseORMException as e:
            raise StoreError("identity lookup failed") from e

    async def create(self, name: str, email: str, password_hash: str) -> User:
        """Uniqueness of email is enforced by the database; a race surfaces as StoreConflict."""
        try:
            return await User.create(
                name=name,
                email=normalize_email(email),
                password_hash=password_hash,
            )
        except IntegrityError as e:
            raise StoreConflict("email already registered") from e
        except BaseORMException as e:
            raise StoreError("identity create failed") from e


class ContentStore:
    async def create(self, title: str, content: str, author_id: str) -> Post:
        try:
            post = await Post.create(
                title=title,
                content=content,
                author_id=author_id,
                published=True,
            )
            await post.fetch_related("author")
        except (BaseORMException, ValueError) as e:
            raise StoreError("post create failed") from e
        return post

    async def list_published(self) -> List[Post]:
        """Published posts, newest first, author prefetched."""
        try:
            return await Post.filter(published=True).order_by("-created_at").prefetch_related("author")
        except BaseORMException as e:
            raise StoreError("post listing failed") from e
