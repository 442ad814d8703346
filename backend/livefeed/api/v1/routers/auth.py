# livefeed/api/v1/routers/auth.py
from fastapi import APIRouter, Depends, Header, status

from livefeed.api.v1.deps import get_auth_gateway, get_client_address
from livefeed.schemas.auth import LoginIn, RegisterIn
from livefeed.services.auth_gateway import AuthGateway

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterIn,
    cf_turnstile_response: str | None = Header(default=None),
    client_address: str | None = Depends(get_client_address),
    gateway: AuthGateway = Depends(get_auth_gateway),
):
    """
    Register a new user account.

    The Turnstile token is read from the ``cf-turnstile-response`` header and
    verified before anything else happens. Email uniqueness is case-insensitive.

    Args:
        body: Request body containing name, email and password

    Returns:
        dict: {"success": True, "data": {id, name, email}} with status 201

    Error codes (rendered by the ServiceError handler):
        - challenge_failed (403): Turnstile token missing or rejected
        - invalid_input (400): name/email/password missing
        - duplicate_identity (409): email already registered
        - storage_error (500)
    """
    user = await gateway.register(
        cf_turnstile_response,
        client_address,
        body.name,
        body.email,
        body.password,
    )
    return {"success": True, "data": user.model_dump()}

@router.post("/login")
async def login(body: LoginIn, gateway: AuthGateway = Depends(get_auth_gateway)):
    """
    Authenticate and issue a bearer token valid for one day.

    Returns:
        dict: {"success": True, "data": {"token": str, "user": {id, name, email}}}

    Error codes:
        - invalid_credentials (401): unknown email or wrong password (indistinguishable)
        - invalid_input (400): email/password missing
    """
    result = await gateway.login(body.email, body.password)
    return {"success": True, "data": result.model_dump()}
