"""HTTP tests for login and bearer authorization."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from structlog.testing import capture_logs

from myflix_gateway.auth import CurrentUser

from .conftest import ALICE, ALICE_PASSWORD, TEST_SECRET


@pytest.fixture
def guarded(app):
    """Protected route that counts how many times its body runs."""
    calls = {"count": 0}

    @app.get("/whoami")
    async def whoami_route(user: CurrentUser):
        calls["count"] += 1
        return {"username": user.username}

    return calls


def _rejections(logs):
    return [entry for entry in logs if entry["event"] == "authorization_rejected"]


class TestLogin:
    """Test POST /login."""

    def test_login_success(self, client, alice):
        response = client.post("/login", json={"username": ALICE, "password": ALICE_PASSWORD})

        assert response.status_code == 200
        body = response.json()
        assert body["user"]["username"] == ALICE
        assert "password_hash" not in body["user"]

        claims = jwt.decode(body["token"], TEST_SECRET, algorithms=["HS256"])
        assert claims["sub"] == ALICE
        assert claims["exp"] - claims["iat"] == int(timedelta(days=7).total_seconds())

    def test_login_sets_no_cookie(self, client, alice):
        response = client.post("/login", json={"username": ALICE, "password": ALICE_PASSWORD})
        assert response.status_code == 200
        assert "set-cookie" not in response.headers

    def test_wrong_password(self, client, alice):
        response = client.post("/login", json={"username": ALICE, "password": "wrong-pw"})

        assert response.status_code == 400
        body = response.json()
        assert set(body) == {"message", "error"}
        assert "token" not in body

    def test_unknown_user_is_indistinguishable(self, client, alice):
        wrong_password = client.post("/login", json={"username": ALICE, "password": "wrong-pw"})
        unknown_user = client.post("/login", json={"username": "nobody99", "password": "whatever"})

        assert unknown_user.status_code == 400
        assert unknown_user.json() == wrong_password.json()

    def test_missing_fields_is_login_failure(self, client):
        response = client.post("/login", json={})
        assert response.status_code == 400

    @pytest.mark.parametrize(
        "body",
        [
            {"username": None, "password": None},
            {"username": ALICE, "password": None},
            {"username": 12345, "password": ["x"]},
        ],
    )
    def test_null_or_wrong_typed_fields_are_login_failure(self, client, alice, body):
        response = client.post("/login", json=body)

        assert response.status_code == 400
        assert set(response.json()) == {"message", "error"}

    def test_unparseable_body_is_login_failure(self, client):
        response = client.post("/login", content=b"{not json", headers={"Content-Type": "application/json"})
        assert response.status_code == 400
        assert set(response.json()) == {"message", "error"}

    def test_form_encoded_login(self, client, alice):
        response = client.post("/login", data={"username": ALICE, "password": ALICE_PASSWORD})

        assert response.status_code == 200
        assert response.json()["user"]["username"] == ALICE

    def test_form_encoded_wrong_password(self, client, alice):
        response = client.post("/login", data={"username": ALICE, "password": "wrong-pw"})
        assert response.status_code == 400
        assert set(response.json()) == {"message", "error"}

    def test_login_logs_without_password(self, client, alice):
        with capture_logs() as logs:
            client.post("/login", json={"username": ALICE, "password": "wrong-pw"})

        rejected = [entry for entry in logs if entry["event"] == "login_rejected"]
        assert rejected and rejected[0]["username"] == ALICE
        assert all("wrong-pw" not in str(entry) for entry in logs)

    def test_signing_failure_is_server_error(self, client, alice, monkeypatch):
        def broken_encode(*args, **kwargs):
            raise jwt.PyJWTError("signing backend unavailable")

        monkeypatch.setattr(jwt, "encode", broken_encode)
        response = client.post("/login", json={"username": ALICE, "password": ALICE_PASSWORD})

        assert response.status_code == 500
        assert "token" not in response.json()


class TestBearerGuard:
    """Test the bearer guard on a protected route."""

    def test_valid_token_reaches_handler(self, client, guarded, auth_headers):
        response = client.get("/whoami", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"username": ALICE}
        assert guarded["count"] == 1

    def test_missing_header(self, client, guarded):
        response = client.get("/whoami")

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"
        assert guarded["count"] == 0

    def test_wrong_scheme(self, client, guarded, alice_token):
        response = client.get("/whoami", headers={"Authorization": f"Basic {alice_token}"})
        assert response.status_code == 401
        assert guarded["count"] == 0

    def test_tampered_token_never_runs_handler(self, client, guarded, alice_token):
        header, payload, signature = alice_token.split(".")
        swapped = "A" if payload[6] != "A" else "B"
        tampered = ".".join([header, payload[:6] + swapped + payload[7:], signature])

        with capture_logs() as logs:
            response = client.get("/whoami", headers={"Authorization": f"Bearer {tampered}"})

        assert response.status_code == 401
        assert guarded["count"] == 0
        assert _rejections(logs)[0]["reason"] == "TokenBadSignature"

    def test_expired_token(self, client, guarded, alice, app):
        issued = datetime.now(timezone.utc) - timedelta(days=7, seconds=1)
        token = app.state.session_issuer.issue_session(alice, now=issued).token

        with capture_logs() as logs:
            response = client.get("/whoami", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert guarded["count"] == 0
        assert _rejections(logs)[0]["reason"] == "TokenExpired"

    def test_deleted_identity(self, client, guarded, alice_token, store):
        client.delete(f"/users/{ALICE}", headers={"Authorization": f"Bearer {alice_token}"})

        with capture_logs() as logs:
            response = client.get("/whoami", headers={"Authorization": f"Bearer {alice_token}"})

        assert response.status_code == 401
        assert guarded["count"] == 0
        assert _rejections(logs)[0]["reason"] == "IdentityGone"

    def test_foreign_secret(self, client, guarded, alice):
        now = int(datetime.now(timezone.utc).timestamp())
        token = jwt.encode(
            {"sub": ALICE, "iat": now, "exp": now + 3600},
            "an-entirely-different-signing-secret-000000",
            algorithm="HS256",
        )

        response = client.get("/whoami", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert guarded["count"] == 0

    def test_all_failures_share_response_body(self, client, guarded, alice_token):
        missing = client.get("/whoami")
        garbage = client.get("/whoami", headers={"Authorization": "Bearer not.a.token"})
        assert missing.json() == garbage.json() == {"detail": "Unauthorized"}
