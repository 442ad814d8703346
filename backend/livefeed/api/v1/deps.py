# livefeed/api/v1/deps.py
from fastapi import Depends, Header, Request

from livefeed.core.pubsub import BroadcastHub
from livefeed.core.security import TokenService
from livefeed.services.auth_gateway import AuthGateway
from livefeed.services.content_gateway import ContentGateway
from livefeed.services.stores import ContentStore, IdentityStore
from livefeed.services.turnstile import ChallengeGate

def get_bearer_token(authorization: str | None = Header(default=None)) -> str | None:
    """
    Extract the token from ``Authorization: Bearer xxx``.
    Returns None when the header is missing or uses another scheme; the
    content gateway turns that into an ``unauthenticated`` rejection.
    """
    if authorization and authorization.lower().startswith("bearer "):
        return authorization.split(" ", 1)[1].strip() or None
    return None

def get_client_address(request: Request) -> str | None:
    """First hop of X-Forwarded-For, otherwise the socket peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None

# -------- process-wide singletons built in livefeed.main --------
def get_hub(request: Request) -> BroadcastHub:
    return request.app.state.hub

def get_token_service(request: Request) -> TokenService:
    return request.app.state.tokens

def get_challenge_gate(request: Request) -> ChallengeGate:
    return request.app.state.challenge_gate

# -------- gateways --------
def get_auth_gateway(
    challenge: ChallengeGate = Depends(get_challenge_gate),
    tokens: TokenService = Depends(get_token_service),
) -> AuthGateway:
    return AuthGateway(IdentityStore(), challenge, tokens)

def get_content_gateway(
    tokens: TokenService = Depends(get_token_service),
    hub: BroadcastHub = Depends(get_hub),
) -> ContentGateway:
    return ContentGateway(ContentStore(), tokens, hub)
