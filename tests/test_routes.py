"""
HTTP-level tests for the account routes.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession
from unittest.mock import AsyncMock, patch

from auth.exceptions import MailDispatchError

ALICE = {"username": "a", "email": "a@x.com", "password1": "p", "password2": "p"}


def _register(client, **overrides):
    return client.post("/register", json={**ALICE, **overrides})


class TestIndex:
    def test_banner(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.text == "Welcome to the password reset flow API"
        assert "X-Process-Time" in resp.headers


class TestRegister:
    def test_register(self, client):
        resp = _register(client)
        assert resp.status_code == 200
        assert resp.json() == {"message": "User registered successfully"}

    def test_missing_field(self, client):
        resp = client.post("/register", json={"username": "a", "email": "a@x.com", "password1": "p"})
        assert resp.status_code == 400
        assert resp.json() == {"message": "All fields are required"}

    def test_password_mismatch_creates_nothing(self, client):
        resp = _register(client, password2="q")
        assert resp.status_code == 400
        assert resp.json() == {"message": "Passwords do not match"}

        login = client.post("/login", json={"email": "a@x.com", "password": "p"})
        assert login.json() == {"message": "User not found"}

    def test_duplicate_email_is_not_rejected(self, client):
        assert _register(client).status_code == 200
        assert _register(client, username="b").status_code == 200

    def test_body_must_be_json_object(self, client):
        resp = client.post("/register", content="nope", headers={"content-type": "application/json"})
        assert resp.status_code == 400
        assert resp.json() == {"message": "Invalid request body"}


class TestLogin:
    def test_success_returns_token(self, client, app):
        _register(client)
        resp = client.post("/login", json={"email": "a@x.com", "password": "p"})
        body = resp.json()

        assert resp.status_code == 200
        assert body["message"] == "Successfully Logged in"
        assert body["name"] == "a"
        claims = app.state.token_issuer.decode(body["token"])
        assert claims["email"] == "a@x.com"

    def test_wrong_password(self, client):
        _register(client)
        resp = client.post("/login", json={"email": "a@x.com", "password": "wrong"})
        assert resp.status_code == 200
        assert resp.json() == {"message": "Password Incorrect"}

    def test_unknown_email(self, client):
        resp = client.post("/login", json={"email": "nobody@x.com", "password": "p"})
        assert resp.status_code == 200
        assert resp.json() == {"message": "User not found"}

    def test_missing_field(self, client):
        resp = client.post("/login", json={"email": "a@x.com"})
        assert resp.status_code == 400
        assert resp.json() == {"message": "Username and password are required"}


class TestSendMail:
    def test_sends_code(self, client, mailer):
        _register(client)
        resp = client.post("/sendmail", json={"email": "a@x.com"})
        assert resp.status_code == 200
        assert resp.json() == {"message": "Email sent"}
        assert mailer.sent[0][0] == "a@x.com"
        assert 1000 <= mailer.last_code <= 9999

    def test_unknown_email(self, client, mailer):
        resp = client.post("/sendmail", json={"email": "nobody@x.com"})
        assert resp.status_code == 400
        assert resp.json() == {"message": "User not found"}
        assert mailer.sent == []

    def test_missing_email(self, client):
        resp = client.post("/sendmail", json={})
        assert resp.status_code == 400

    def test_dispatch_failure(self, client, app):
        _register(client)
        app.state.mailer = AsyncMock()
        app.state.mailer.send.side_effect = MailDispatchError()

        resp = client.post("/sendmail", json={"email": "a@x.com"})
        assert resp.status_code == 500
        assert resp.json() == {"message": "Internal Server Error"}

        # nothing was delivered, so there is nothing to verify against
        resp = client.post("/verify", json={"email": "a@x.com", "vercode": 1000})
        assert resp.json() == {"message": "Invalid Verification Code"}


class TestVerify:
    def test_verify_returns_user(self, client, mailer):
        _register(client)
        client.post("/sendmail", json={"email": "a@x.com"})

        resp = client.post("/verify", json={"email": "a@x.com", "vercode": str(mailer.last_code)})
        body = resp.json()
        assert resp.status_code == 200
        assert body["message"] == "Verification successful"
        assert body["user"]["email"] == "a@x.com"
        assert body["user"]["username"] == "a"
        assert body["user"]["password_hash"].startswith("$2b$")
        assert body["user"]["verification_code"] is None

    def test_wrong_code(self, client, mailer):
        _register(client)
        client.post("/sendmail", json={"email": "a@x.com"})
        wrong = 1000 if mailer.last_code != 1000 else 1001

        resp = client.post("/verify", json={"email": "a@x.com", "vercode": wrong})
        assert resp.status_code == 400
        assert resp.json() == {"message": "Invalid Verification Code"}

        resp = client.post("/verify", json={"email": "a@x.com", "vercode": mailer.last_code})
        assert resp.status_code == 200

    def test_unknown_email(self, client):
        resp = client.post("/verify", json={"email": "nobody@x.com", "vercode": 1234})
        assert resp.status_code == 400
        assert resp.json() == {"message": "User not found"}

    def test_missing_fields(self, client):
        resp = client.post("/verify", json={"email": "a@x.com"})
        assert resp.status_code == 400
        assert resp.json() == {"message": "Email and verification code are required"}


class TestChangePassword:
    def test_change_password(self, client):
        _register(client)
        resp = client.post("/changepassword/a@x.com", json={"password1": "new", "password2": "new"})
        assert resp.status_code == 200
        assert resp.json() == {"message": "Password updated successfully"}

        old = client.post("/login", json={"email": "a@x.com", "password": "p"})
        assert old.json() == {"message": "Password Incorrect"}
        new = client.post("/login", json={"email": "a@x.com", "password": "new"})
        assert new.json()["message"] == "Successfully Logged in"

    def test_mismatch(self, client):
        resp = client.post("/changepassword/a@x.com", json={"password1": "new", "password2": "other"})
        assert resp.status_code == 400
        assert resp.json() == {"message": "Passwords do not match"}

    def test_missing_fields(self, client):
        resp = client.post("/changepassword/a@x.com", json={"password1": "new"})
        assert resp.status_code == 400
        assert resp.json() == {"message": "Email and passwords are required"}

    def test_unknown_email_still_succeeds(self, client):
        resp = client.post("/changepassword/nobody@x.com", json={"password1": "n", "password2": "n"})
        assert resp.status_code == 200


class TestUnexpectedErrors:
    def test_internal_error_is_generic(self, app):
        app.state.mailer = AsyncMock()
        app.state.mailer.send.side_effect = RuntimeError("relay exploded")

        with TestClient(app, raise_server_exceptions=False) as client:
            _register(client)
            resp = client.post("/sendmail", json={"email": "a@x.com"})

        assert resp.status_code == 500
        assert resp.json() == {"message": "Internal Server Error"}


class TestResetFlow:
    def test_end_to_end(self, client, mailer):
        assert _register(client).status_code == 200

        assert client.post("/sendmail", json={"email": "a@x.com"}).status_code == 200
        code = mailer.last_code
        assert 1000 <= code <= 9999

        first = client.post("/verify", json={"email": "a@x.com", "vercode": code})
        assert first.status_code == 200
        assert first.json()["user"]["email"] == "a@x.com"

        second = client.post("/verify", json={"email": "a@x.com", "vercode": code})
        assert second.status_code == 400
        assert second.json() == {"message": "Invalid Verification Code"}

    @pytest.mark.parametrize("as_text", [True, False])
    def test_reissue_invalidates_first_code(self, client, mailer, as_text):
        _register(client)
        client.post("/sendmail", json={"email": "a@x.com"})
        first = mailer.last_code
        client.post("/sendmail", json={"email": "a@x.com"})
        second = mailer.last_code

        if first != second:
            resp = client.post("/verify", json={"email": "a@x.com", "vercode": first})
            assert resp.status_code == 400

        vercode = str(second) if as_text else second
        resp = client.post("/verify", json={"email": "a@x.com", "vercode": vercode})
        assert resp.status_code == 200


class TestStoreFailures:
    def test_failed_commit_on_register_is_reported(self, app):
        with TestClient(app, raise_server_exceptions=False) as client:
            with patch.object(AsyncSession, "commit", AsyncMock(side_effect=RuntimeError("db down"))):
                resp = _register(client)
            assert resp.status_code == 500
            assert resp.json() == {"message": "Internal Server Error"}

            login = client.post("/login", json={"email": "a@x.com", "password": "p"})
            assert login.json() == {"message": "User not found"}

    def test_failed_commit_on_sendmail_sends_nothing(self, app, mailer):
        with TestClient(app, raise_server_exceptions=False) as client:
            _register(client)
            with patch.object(AsyncSession, "commit", AsyncMock(side_effect=RuntimeError("db down"))):
                resp = client.post("/sendmail", json={"email": "a@x.com"})

        assert resp.status_code == 500
        assert mailer.sent == []


class TestLongPasswords:
    def test_register_and_login_with_long_password(self, client):
        long_password = "x" * 80
        resp = _register(client, password1=long_password, password2=long_password)
        assert resp.status_code == 200

        login = client.post("/login", json={"email": "a@x.com", "password": long_password})
        assert login.json()["message"] == "Successfully Logged in"

    def test_change_to_long_password(self, client):
        _register(client)
        long_password = "y" * 100
        resp = client.post(
            "/changepassword/a@x.com",
            json={"password1": long_password, "password2": long_password},
        )
        assert resp.status_code == 200

        login = client.post("/login", json={"email": "a@x.com", "password": long_password})
        assert login.json()["message"] == "Successfully Logged in"
