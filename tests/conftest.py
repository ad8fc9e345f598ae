"""Pytest configuration and fixtures."""

import asyncio
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from myflix_shared import InMemoryDocumentStore, Settings, UserRecord
from myflix_gateway.auth import SessionIssuer, TokenCodec, hash_password
from myflix_gateway.main import create_app


REPO_ROOT = Path(__file__).resolve().parents[1]

TEST_SECRET = "test-secret-key-for-myflix-unit-tests-0123456789"
TEST_ROUNDS = 4

ALICE = "alice123"
ALICE_PASSWORD = "correct-pw"
BOB = "bob12345"
BOB_PASSWORD = "bobs-password"

INCEPTION_ID = "6517a1c2e4b0a1f2c3d40001"


def make_user(username: str, password: str, email: str = "") -> UserRecord:
    return UserRecord(
        username=username,
        password_hash=hash_password(password, rounds=TEST_ROUNDS),
        email=email or f"{username}@example.com",
    )


@pytest.fixture
def settings() -> Settings:
    """Isolated settings: no .env, cheap bcrypt, in-memory store, shipped catalog."""
    return Settings(
        _env_file=None,
        environment="test",
        store_backend="memory",
        jwt_secret_key=TEST_SECRET,
        bcrypt_rounds=TEST_ROUNDS,
        static_dir=str(REPO_ROOT / "public"),
        movies_seed_path=str(REPO_ROOT / "data" / "movies.json"),
    )


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def alice(store) -> UserRecord:
    return asyncio.run(store.create_user(make_user(ALICE, ALICE_PASSWORD)))


@pytest.fixture
def bob(store) -> UserRecord:
    return asyncio.run(store.create_user(make_user(BOB, BOB_PASSWORD)))


@pytest.fixture
def codec() -> TokenCodec:
    return TokenCodec(TEST_SECRET)


@pytest.fixture
def issuer(codec) -> SessionIssuer:
    return SessionIssuer(codec)


@pytest.fixture
def app(settings, store):
    return create_app(settings=settings, store=store)


@pytest.fixture
def client(app):
    # context manager → lifespan 실행 (카탈로그 시드)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def alice_token(client, alice) -> str:
    response = client.post("/login", json={"username": ALICE, "password": ALICE_PASSWORD})
    assert response.status_code == 200
    return response.json()["token"]


@pytest.fixture
def auth_headers(alice_token) -> dict[str, str]:
    return {"Authorization": f"Bearer {alice_token}"}
