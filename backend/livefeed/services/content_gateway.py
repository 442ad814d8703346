"""
Authenticated post creation followed by live fan-out.

The hub reference is injected at construction. Broadcasting happens after the
post is committed and can never fail the create call.
"""
import logging

from ..core.errors import InvalidInput, StorageError, StoreError, Unauthenticated
from ..core.pubsub import BroadcastHub
from ..core.security import TokenService
from ..schemas.post import EntryOut
from .stores import ContentStore

logger = logging.getLogger("uvicorn.error")


class ContentGateway:
    def __init__(self, posts: ContentStore, tokens: TokenService, hub: BroadcastHub):
        self.posts = posts
        self.tokens = tokens
        self.hub = hub

    async def create(self, token: str | None, title: str | None, content: str | None) -> EntryOut:
        author_id = self.tokens.verify(token)
        if author_id is None:
            raise Unauthenticated()

        title = (title or "").strip()
        if not title:
            raise InvalidInput("Title is required")

        try:
            post = await self.posts.create(title, content or "", author_id)
        except StoreError as e:
            logger.error("[posts] create failed: %r", e.__cause__ or e)
            raise StorageError("Failed to create post")

        entry = EntryOut.from_model(post)
        try:
            n = self.hub.publish(entry.model_dump(mode="json"))
            logger.info("[posts] created id=%s, broadcast to %d observer(s)", entry.id, n)
        except Exception as e:
            # Already committed; broadcast is best-effort
            logger.exception("[posts] broadcast failed for id=%s: %r", entry.id, e)
        return entry
