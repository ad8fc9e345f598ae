"""Tests for the login, session and bearer strategies."""

from datetime import datetime, timedelta, timezone

import pytest

from myflix_gateway.auth import (
    AccessGuard,
    CredentialFailure,
    IdentityGone,
    LoginVerifier,
    TokenBadSignature,
    TokenExpired,
    TokenMalformed,
    TokenMissing,
    extract_bearer_token,
)
from myflix_gateway.auth.strategies import INVALID_CREDENTIALS

from .conftest import ALICE, ALICE_PASSWORD, TEST_ROUNDS, make_user


@pytest.fixture
def verifier(store) -> LoginVerifier:
    return LoginVerifier(store, rounds=TEST_ROUNDS)


@pytest.fixture
def guard(codec, store) -> AccessGuard:
    return AccessGuard(codec, store)


async def _register_alice(store):
    return await store.create_user(make_user(ALICE, ALICE_PASSWORD))


class TestExtractBearerToken:
    """Test Authorization header parsing."""

    @pytest.mark.parametrize(
        "header,expected",
        [
            ("Bearer abc.def.ghi", "abc.def.ghi"),
            ("bearer abc.def.ghi", "abc.def.ghi"),
            ("Bearer   abc.def.ghi  ", "abc.def.ghi"),
            ("Bearer ", None),
            ("Bearer", None),
            ("Basic dXNlcjpwYXNz", None),
            ("abc.def.ghi", None),
            ("", None),
            (None, None),
        ],
    )
    def test_extract(self, header, expected):
        assert extract_bearer_token(header) == expected


class TestLoginVerifier:
    """Test username/password verification."""

    @pytest.mark.asyncio
    async def test_correct_password(self, store, verifier):
        await _register_alice(store)

        user = await verifier.verify_login(ALICE, ALICE_PASSWORD)
        assert user.username == ALICE

    @pytest.mark.asyncio
    async def test_wrong_password(self, store, verifier):
        await _register_alice(store)

        with pytest.raises(CredentialFailure) as exc_info:
            await verifier.verify_login(ALICE, "wrong-pw")
        assert exc_info.value.message == INVALID_CREDENTIALS
        assert exc_info.value.user is not None

    @pytest.mark.asyncio
    async def test_unknown_user_has_same_message(self, store, verifier):
        await _register_alice(store)

        with pytest.raises(CredentialFailure) as exc_info:
            await verifier.verify_login("nobody99", ALICE_PASSWORD)
        assert exc_info.value.message == INVALID_CREDENTIALS
        assert exc_info.value.user is None

    @pytest.mark.asyncio
    async def test_empty_credentials(self, verifier):
        with pytest.raises(CredentialFailure):
            await verifier.verify_login("", "")

    @pytest.mark.asyncio
    async def test_username_match_is_exact(self, store, verifier):
        await _register_alice(store)

        with pytest.raises(CredentialFailure):
            await verifier.verify_login(ALICE.upper(), ALICE_PASSWORD)


class TestSessionIssuer:
    """Test token issuance."""

    def test_issue_session(self, issuer, codec):
        user = make_user(ALICE, ALICE_PASSWORD)
        session = issuer.issue_session(user)

        assert session.user == user
        claims = codec.decode(session.token)
        assert claims.sub == ALICE
        assert claims == session.claims
        assert claims.exp - claims.iat == timedelta(days=7)

    def test_issue_session_at_given_time(self, issuer):
        now = datetime(2030, 1, 1, tzinfo=timezone.utc)
        session = issuer.issue_session(make_user(ALICE, ALICE_PASSWORD), now=now)
        assert session.claims.iat == now
        assert session.claims.exp == now + timedelta(days=7)


class TestAccessGuard:
    """Test bearer token authorization."""

    @pytest.mark.asyncio
    async def test_valid_token(self, store, issuer, guard):
        alice = await _register_alice(store)
        token = issuer.issue_session(alice).token

        user = await guard.authorize(f"Bearer {token}")
        assert user.username == ALICE

    @pytest.mark.asyncio
    @pytest.mark.parametrize("header", [None, "", "Basic dXNlcjpwYXNz", "Token abc"])
    async def test_missing_or_wrong_scheme(self, guard, header):
        with pytest.raises(TokenMissing):
            await guard.authorize(header)

    @pytest.mark.asyncio
    async def test_malformed_token(self, guard):
        with pytest.raises(TokenMalformed):
            await guard.authorize("Bearer not-a-jwt")

    @pytest.mark.asyncio
    async def test_tampered_token(self, store, issuer, guard):
        alice = await _register_alice(store)
        header, payload, signature = issuer.issue_session(alice).token.split(".")
        swapped = "A" if payload[4] != "A" else "B"
        tampered = ".".join([header, payload[:4] + swapped + payload[5:], signature])

        with pytest.raises(TokenBadSignature):
            await guard.authorize(f"Bearer {tampered}")

    @pytest.mark.asyncio
    async def test_expired_token(self, store, issuer, guard):
        alice = await _register_alice(store)
        issued = datetime.now(timezone.utc) - timedelta(days=7, seconds=1)
        token = issuer.issue_session(alice, now=issued).token

        with pytest.raises(TokenExpired):
            await guard.authorize(f"Bearer {token}")

    @pytest.mark.asyncio
    async def test_deleted_identity_fails_closed(self, store, issuer, guard):
        alice = await _register_alice(store)
        token = issuer.issue_session(alice).token
        await store.delete_user(ALICE)

        with pytest.raises(IdentityGone):
            await guard.authorize(f"Bearer {token}")

    @pytest.mark.asyncio
    async def test_renamed_identity_fails_closed(self, store, issuer, guard):
        alice = await _register_alice(store)
        token = issuer.issue_session(alice).token
        await store.update_user(ALICE, {"username": "alice456"})

        with pytest.raises(IdentityGone):
            await guard.authorize(f"Bearer {token}")
