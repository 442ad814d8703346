# livefeed/api/v1/routers/posts.py
from fastapi import APIRouter, Depends, status

from livefeed.api.v1.deps import get_bearer_token, get_content_gateway
from livefeed.schemas.post import PostIn
from livefeed.services.content_gateway import ContentGateway

router = APIRouter(prefix="/posts", tags=["posts"])

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_post(
    body: PostIn,
    token: str | None = Depends(get_bearer_token),
    gateway: ContentGateway = Depends(get_content_gateway),
):
    """
    Create a post as the token's identity and push it to every live observer.

    Returns:
        dict: {"success": True, "data": <entry>} with status 201

    Error codes:
        - unauthenticated (401): token missing, malformed, tampered or expired
        - invalid_input (400): empty title
        - storage_error (500)
    """
    entry = await gateway.create(token, body.title, body.content)
    return {"success": True, "data": entry.model_dump(mode="json")}
