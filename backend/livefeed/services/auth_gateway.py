"""
Registration and login orchestration.

Register: challenge gate -> field validation -> duplicate check -> hash -> create
Login:    lookup -> password check -> token

Both unknown address and wrong password reject with the same InvalidCredentials,
so the response never reveals whether an address is registered.
"""
import logging
from functools import lru_cache
from passlib.exc import PasswordSizeError
from starlette.concurrency import run_in_threadpool

from ..core.errors import (
    ChallengeFailed,
    DuplicateIdentity,
    InvalidCredentials,
    InvalidInput,
    StorageError,
    StoreConflict,
    StoreError,
)
from ..core.security import TokenService, hash_password, verify_password
from ..models.user import EMAIL_MAX_LENGTH, NAME_MAX_LENGTH
from ..schemas.auth import IdentityOut, LoginOut
from .stores import IdentityStore
from .turnstile import ChallengeGate

logger = logging.getLogger("uvicorn.error")


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password("livefeed-timing-equalizer")


def _verify_against_dummy(password: str) -> bool:
    # Same bcrypt cost as a real check so unknown addresses are not faster to reject
    return verify_password(password, _dummy_hash())


class AuthGateway:
    def __init__(self, identities: IdentityStore, challenge: ChallengeGate, tokens: TokenService):
        self.identities = identities
        self.challenge = challenge
        self.tokens = tokens

    async def register(
        self,
        challenge_token: str | None,
        client_address: str | None,
        name: str | None,
        email: str | None,
        password: str | None,
    ) -> IdentityOut:
        if not await self.challenge.verify(challenge_token, client_address):
            raise ChallengeFailed()

        name = (name or "").strip()
        email = (email or "").strip()
        if not name or not email or not password:
            raise InvalidInput("Missing required fields")
        if len(name) > NAME_MAX_LENGTH or len(email) > EMAIL_MAX_LENGTH:
            raise InvalidInput(f"Name and email must be at most {NAME_MAX_LENGTH} characters")

        try:
            if await self.identities.find_by_email(email) is not None:
                raise DuplicateIdentity()
            # bcrypt is deliberately slow, keep it off the event loop
            try:
                password_hash = await run_in_threadpool(hash_password, password)
            except PasswordSizeError:
                raise InvalidInput("Password is too long")
            user = await self.identities.create(name, email, password_hash)
        except StoreConflict:
            # Lost a race with a concurrent registration for the same address
            raise DuplicateIdentity()
        except StoreError as e:
            logger.error("[auth] register storage failure: %r", e.__cause__ or e)
            raise StorageError()

        logger.info("[auth] registered user id=%s", user.id)
        return IdentityOut.from_model(user)

    async def login(self, email: str | None, password: str | None) -> LoginOut:
        if not email or not password:
            raise InvalidInput("Email and password required")

        try:
            user = await self.identities.find_by_email(email)
        except StoreError as e:
            logger.error("[auth] login storage failure: %r", e.__cause__ or e)
            raise StorageError()

        if user is None:
            await run_in_threadpool(_verify_against_dummy, password)
            raise InvalidCredentials()
        if not await run_in_threadpool(verify_password, password, user.password_hash):
            raise InvalidCredentials()

        token = self.tokens.issue(str(user.id))
        return LoginOut(token=token, user=IdentityOut.from_model(user))
