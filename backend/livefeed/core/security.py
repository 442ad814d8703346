# livefeed/core/security.py
"""
Security module for authentication.
Handles password hashing and bearer token issuance/verification.
"""
import logging
import datetime as dt
from typing import Callable

import jwt  # PyJWT
from passlib.context import CryptContext

from livefeed.config import settings, DEV_JWT_SECRET

logger = logging.getLogger("uvicorn.error")

# Password hashing context
# bcrypt, cost 12 (2^12 key expansion rounds); the salt is embedded in the hash string
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.password_hash_rounds,
)

JWT_ALG = "HS256"  # JWT signing algorithm (HMAC SHA-256)

def hash_password(plain: str) -> str:
    """
    Hash a plain text password using bcrypt.

    Two calls with the same input return different strings because a fresh
    random salt is generated each time. Errors (e.g. no entropy source) propagate.
    """
    return pwd_context.hash(plain)

def verify_password(plain: str, hashed: str) -> bool:
    """
    Verify a plain text password against a stored bcrypt hash.

    Returns False instead of raising when the stored hash is malformed,
    so a corrupt record simply reads as rejected credentials.
    """
    try:
        return pwd_context.verify(plain, hashed)
    except (ValueError, TypeError):
        return False


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class TokenService:
    """
    Issues and verifies self-contained signed bearer tokens.

    Payload:
        - sub: identity id
        - iat: issued at (unix seconds)
        - exp: expiry (unix seconds)

    There is no revocation list: a token stays valid for its whole lifetime.
    """

    def __init__(
        self,
        secret: str,
        ttl: dt.timedelta = dt.timedelta(hours=24),
        clock: Callable[[], dt.datetime] = _utcnow,
    ):
        self._secret = secret
        self._ttl = ttl
        self._clock = clock

    def issue(self, identity_id: str) -> str:
        now = self._clock()
        payload = {
            "sub": str(identity_id),
            "iat": int(now.timestamp()),
            "exp": int((now + self._ttl).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=JWT_ALG)

    def verify(self, token: str | None) -> str | None:
        """
        Return the identity id bound to ``token``, or None.

        Malformed, tampered and expired tokens all collapse to None.
        """
        if not token:
            return None
        try:
            # Expiry is checked against our own clock below
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[JWT_ALG],
                options={"require": ["sub", "iat", "exp"], "verify_exp": False, "verify_iat": False},
            )
        except jwt.PyJWTError:
            return None

        exp = payload.get("exp")
        sub = payload.get("sub")
        if not isinstance(exp, (int, float)) or not isinstance(sub, str) or not sub:
            return None
        if self._clock().timestamp() >= exp:
            return None
        return sub


def build_token_service() -> TokenService:
    if not settings.jwt_secret or (settings.jwt_secret == DEV_JWT_SECRET and settings.env != "dev"):
        logger.warning("[security] JWT_SECRET is the development default in env=%s; set a real secret", settings.env)
    return TokenService(
        settings.jwt_secret,
        ttl=dt.timedelta(hours=settings.access_token_expire_hours),
    )
