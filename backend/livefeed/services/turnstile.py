"""
Cloudflare Turnstile verification (anti-automation gate for registration)

Posts {secret, response, remoteip} to the siteverify endpoint and returns the
``success`` flag. Fails closed: no token, transport error, timeout, non-2xx or a
malformed body all read as "not verified".
"""
import logging
import httpx
from ..config import settings

logger = logging.getLogger("uvicorn.error")


class ChallengeGate:
    """Turnstile siteverify client"""

    def __init__(
        self,
        secret: str | None = None,
        verify_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.secret = secret if secret is not None else settings.turnstile_secret_key
        self.verify_url = verify_url or settings.turnstile_verify_url
        self.timeout = timeout if timeout is not None else settings.turnstile_timeout_seconds
        self._transport = transport  # injectable for tests

    async def verify(self, presented_token: str | None, client_address: str | None) -> bool:
        if not presented_token:
            return False
        if not self.secret:
            logger.warning("[turnstile] TURNSTILE_SECRET_KEY is not set, rejecting challenge")
            return False

        payload = {
            "secret": self.secret,
            "response": presented_token,
            "remoteip": client_address,
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(self.verify_url, json=payload)
                resp.raise_for_status()
                data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("[turnstile] verification transport error: %r", e)
            return False

        if not isinstance(data, dict):
            logger.warning("[turnstile] unexpected response body: %r", data)
            return False
        success = data.get("success")
        if success is not True:
            logger.info("[turnstile] challenge rejected: %s", data.get("error-codes"))
        return success is True
