"""
Integration tests for Auth API endpoints.

Tests signup, login, profile, password change and password recovery over
HTTP.
"""

from unittest.mock import patch

import pytest

from conftest import login, signup
from linepicks import db
from linepicks.models import User


def _pending_token(app, email):
    with app.app_context():
        return User.query.filter_by(email=email).one().reset_token


class TestSignup:
    """Tests for POST /auth/signup."""

    @pytest.mark.api
    def test_signup_success(self, client, test_config):
        response = signup(client, test_config["email"], test_config["password"], "Alice")

        assert response.status_code == 201
        data = response.get_json()
        assert data["email"] == test_config["email"]
        assert data["displayName"] == "Alice"
        assert "password" not in str(data).lower()

    @pytest.mark.api
    def test_signup_duplicate(self, client, test_config):
        signup(client, test_config["email"], test_config["password"])
        response = signup(client, test_config["email"].upper(), "OtherPassword1")

        assert response.status_code == 409
        assert response.get_json()["error"] == "DuplicateIdentity"

    @pytest.mark.api
    @pytest.mark.parametrize(
        "payload",
        [
            {"email": "not-an-email", "password": "FirstPassword1"},
            {"email": "a@example.com", "password": "short"},
            {"email": "a@example.com"},
            {"password": "FirstPassword1"},
            {"email": "a@example.com", "password": "FirstPassword1", "displayName": "<script>"},
            {"email": "a@example.com", "password": "FirstPassword1", "displayName": 12345},
            {"email": 5, "password": "FirstPassword1"},
            {"email": "a@example.com", "password": 123456789},
        ],
    )
    def test_signup_validation(self, client, payload):
        response = client.post("/auth/signup", json=payload)

        assert response.status_code == 400
        data = response.get_json()
        assert data["error"] == "ValidationFailed"
        assert data["details"]

    @pytest.mark.api
    def test_signup_form_encoded(self, client, test_config):
        response = client.post(
            "/auth/signup",
            data={"email": test_config["email"], "password": test_config["password"]},
        )

        assert response.status_code == 201


class TestLogin:
    """Tests for POST /auth/login."""

    @pytest.mark.api
    def test_login_success(self, client, test_config):
        signup(client, test_config["email"], test_config["password"])
        response = client.post(
            "/auth/login", json={"email": test_config["email"], "password": test_config["password"]}
        )

        assert response.status_code == 200
        assert response.get_json()["jwtToken"].count(".") == 2

    @pytest.mark.api
    def test_login_wrong_password_and_unknown_email_match(self, client, test_config):
        signup(client, test_config["email"], test_config["password"])

        wrong = client.post("/auth/login", json={"email": test_config["email"], "password": "wrong"})
        unknown = client.post(
            "/auth/login", json={"email": "nobody@example.com", "password": test_config["password"]}
        )

        assert wrong.status_code == unknown.status_code == 401
        assert wrong.get_json() == unknown.get_json()
        assert wrong.get_json()["error"] == "InvalidCredentials"

    @pytest.mark.api
    def test_login_missing_fields(self, client):
        response = client.post("/auth/login", json={"email": "a@example.com"})

        assert response.status_code == 400

    @pytest.mark.api
    @pytest.mark.parametrize(
        "payload",
        [
            {"email": 5, "password": "FirstPassword1"},
            {"email": {"address": "a@example.com"}, "password": "FirstPassword1"},
        ],
    )
    def test_login_non_string_fields(self, client, payload):
        response = client.post("/auth/login", json=payload)

        assert response.status_code == 400
        assert response.get_json()["error"] == "ValidationFailed"

    @pytest.mark.api
    def test_logout(self, client):
        assert client.post("/auth/logout").get_json() == {"success": True}


class TestProfile:
    """Tests for /auth/me and /auth/profile."""

    @pytest.mark.api
    def test_me(self, client, auth_headers, test_config):
        response = client.get("/auth/me", headers=auth_headers)

        assert response.status_code == 200
        data = response.get_json()
        assert data["email"] == test_config["email"]
        assert data["lastLogin"] is not None

    @pytest.mark.api
    @pytest.mark.parametrize("headers", [{}, {"Authorization": "Bearer garbage"}, {"Authorization": "Basic abc"}])
    def test_me_requires_token(self, client, headers):
        response = client.get("/auth/me", headers=headers)

        assert response.status_code == 401
        assert response.get_json()["error"] == "Unauthenticated"

    @pytest.mark.api
    def test_token_for_deleted_account(self, app, client, auth_headers):
        with app.app_context():
            User.query.delete()
            db.session.commit()

        assert client.get("/auth/me", headers=auth_headers).status_code == 401

    @pytest.mark.api
    def test_update_display_name(self, client, auth_headers):
        response = client.put("/auth/profile", json={"displayName": "Ally"}, headers=auth_headers)

        assert response.status_code == 200
        assert response.get_json()["displayName"] == "Ally"
        assert client.get("/auth/me", headers=auth_headers).get_json()["displayName"] == "Ally"

    @pytest.mark.api
    def test_update_display_name_requires_token(self, client):
        assert client.put("/auth/profile", json={"displayName": "Ally"}).status_code == 401

    @pytest.mark.api
    def test_update_display_name_rejects_number(self, client, auth_headers):
        response = client.put("/auth/profile", json={"displayName": 12345}, headers=auth_headers)

        assert response.status_code == 400
        assert response.get_json()["error"] == "ValidationFailed"

    @pytest.mark.api
    def test_display_name_keeps_apostrophe(self, client, auth_headers):
        response = client.put("/auth/profile", json={"displayName": "O'Brien"}, headers=auth_headers)

        assert response.status_code == 200
        assert response.get_json()["displayName"] == "O'Brien"


class TestChangePassword:
    """Tests for POST /auth/change-password."""

    @pytest.mark.api
    def test_change_password(self, client, auth_headers, test_config):
        response = client.post(
            "/auth/change-password",
            json={"currentPassword": test_config["password"], "newPassword": test_config["new_password"]},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert login(client, test_config["email"], test_config["new_password"])

    @pytest.mark.api
    def test_change_password_wrong_current(self, client, auth_headers, test_config):
        response = client.post(
            "/auth/change-password",
            json={"currentPassword": "wrong", "newPassword": test_config["new_password"]},
            headers=auth_headers,
        )

        assert response.status_code == 401
        assert response.get_json()["error"] == "InvalidCredentials"


class TestPasswordReset:
    """Tests for the recovery endpoints."""

    @pytest.mark.api
    def test_forgot_password_same_answer_for_unknown_email(self, client, test_config):
        signup(client, test_config["email"], test_config["password"])

        known = client.post("/auth/forgot-password", json={"email": test_config["email"]})
        unknown = client.post("/auth/forgot-password", json={"email": "nobody@example.com"})

        assert known.status_code == unknown.status_code == 200
        assert known.get_json() == unknown.get_json()

    @pytest.mark.api
    def test_forgot_password_survives_mail_outage(self, app, client, test_config):
        signup(client, test_config["email"], test_config["password"])

        with patch("linepicks.utils.email_service.smtplib.SMTP", side_effect=OSError("refused")):
            app.config.update(MAIL_USERNAME="mailer@example.com", MAIL_PASSWORD="secret")
            response = client.post("/auth/forgot-password", json={"email": test_config["email"]})

        assert response.status_code == 200
        assert _pending_token(app, test_config["email"]) is not None

    @pytest.mark.api
    def test_reset_password_flow(self, app, client, test_config):
        signup(client, test_config["email"], test_config["password"])
        client.post("/auth/forgot-password", json={"email": test_config["email"]})
        token = _pending_token(app, test_config["email"])

        response = client.post(
            "/auth/reset-password",
            json={"email": test_config["email"], "token": token, "password": test_config["new_password"]},
        )

        assert response.status_code == 200
        assert client.post(
            "/auth/login", json={"email": test_config["email"], "password": test_config["password"]}
        ).status_code == 401
        assert login(client, test_config["email"], test_config["new_password"])

    @pytest.mark.api
    def test_reset_password_token_from_link(self, app, client, test_config):
        signup(client, test_config["email"], test_config["password"])
        client.post("/auth/forgot-password", json={"email": test_config["email"]})
        token = _pending_token(app, test_config["email"])

        response = client.post(
            f"/auth/reset-password?token={token}",
            json={"email": test_config["email"], "password": test_config["new_password"]},
        )

        assert response.status_code == 200

    @pytest.mark.api
    def test_reset_password_token_reuse(self, app, client, test_config):
        signup(client, test_config["email"], test_config["password"])
        client.post("/auth/forgot-password", json={"email": test_config["email"]})
        token = _pending_token(app, test_config["email"])
        payload = {"email": test_config["email"], "token": token, "password": test_config["new_password"]}

        assert client.post("/auth/reset-password", json=payload).status_code == 200
        response = client.post("/auth/reset-password", json=payload)

        assert response.status_code == 401
        assert response.get_json()["error"] == "InvalidOrExpiredToken"

    @pytest.mark.api
    def test_reset_password_bad_token(self, client, test_config):
        signup(client, test_config["email"], test_config["password"])

        response = client.post(
            "/auth/reset-password",
            json={"email": test_config["email"], "token": "guess", "password": test_config["new_password"]},
        )

        assert response.status_code == 401

    @pytest.mark.api
    def test_session_token_survives_reset(self, app, client, auth_headers, test_config):
        """Session tokens are stateless and expire on their own."""
        client.post("/auth/forgot-password", json={"email": test_config["email"]})
        token = _pending_token(app, test_config["email"])
        client.post(
            "/auth/reset-password",
            json={"email": test_config["email"], "token": token, "password": test_config["new_password"]},
        )

        assert client.get("/auth/me", headers=auth_headers).status_code == 200
