import os
import uuid

# Must be set before livefeed is imported: settings are read at import time
TEST_DB_URL = "sqlite://:memory:"
os.environ["DATABASE_URL"] = TEST_DB_URL
os.environ["DB_GENERATE_SCHEMAS"] = "true"
os.environ["ENV"] = "test"
os.environ["JWT_SECRET"] = "test-secret-0123456789abcdef0123456789"
# Minimum bcrypt cost keeps the suite fast
os.environ["PASSWORD_HASH_ROUNDS"] = "4"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from livefeed.api.v1.deps import get_challenge_gate
from livefeed.core import db as db_module
from livefeed.main import app

db_module.DB_URL = TEST_DB_URL
db_module.TORTOISE_ORM["connections"]["default"] = TEST_DB_URL


class StubChallengeGate:
    """Stands in for Turnstile; records every call."""

    def __init__(self, result: bool = True):
        self.result = result
        self.calls = []

    async def verify(self, presented_token, client_address) -> bool:
        self.calls.append((presented_token, client_address))
        return self.result


async def _init_test_db() -> None:
    """
    Initialize a clean in-memory SQLite database for every test.
    Ensures tables are recreated from scratch.
    """
    if Tortoise._inited:
        await Tortoise.close_connections()
    await Tortoise.init(config=db_module.TORTOISE_ORM)
    await Tortoise.generate_schemas()


@pytest.fixture
def challenge():
    """Challenge gate stub wired into the app; flip ``challenge.result`` to reject."""
    gate = StubChallengeGate(True)
    app.dependency_overrides[get_challenge_gate] = lambda: gate
    yield gate
    app.dependency_overrides.pop(get_challenge_gate, None)


@pytest_asyncio.fixture
async def db():
    await _init_test_db()
    yield
    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def client(db, challenge):
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh DB.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client


@pytest.fixture
def new_account():
    """Factory for unique registration payloads."""

    def _new_account(password: str = "pw123") -> dict:
        tag = uuid.uuid4().hex[:6]
        return {"name": f"User {tag}", "email": f"user_{tag}@example.com", "password": password}

    return _new_account


@pytest_asyncio.fixture
async def auth_header_factory(client):
    """
    Helper fixture to register an account and obtain Authorization headers via login.
    """

    async def _get_headers(account: dict) -> tuple[dict[str, str], dict]:
        reg = await client.post(
            "/api/v1/auth/register",
            json=account,
            headers={"cf-turnstile-response": "ok"},
        )
        assert reg.status_code == 201, reg.text
        resp = await client.post(
            "/api/v1/auth/login",
            json={"email": account["email"], "password": account["password"]},
        )
        assert resp.status_code == 200, resp.text
        data = resp.json()["data"]
        return {"Authorization": f"Bearer {data['token']}"}, data["user"]

    return _get_headers
