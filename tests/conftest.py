"""
Pytest configuration and shared fixtures.

This module provides common fixtures for testing:
- App, database and HTTP client
- Auth primitives
- Services with a mocked mailer
- An active season and signed-in accounts
"""

import os
from datetime import date
from unittest.mock import MagicMock

import pytest

# Set test environment variables before imports
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing-only")
os.environ["FLASK_CONFIG"] = "testing"

from linepicks import create_app, db
from linepicks.auth import PasswordHasher, ResetTokenManager, TokenIssuer
from linepicks.models import Season
from linepicks.services import (
    AuthService,
    CredentialStore,
    PickLedger,
    PickService,
    ScheduleService,
)


# =============================================================================
# Configuration
# =============================================================================

@pytest.fixture(scope="session")
def test_config():
    """Test configuration values."""
    return {
        "jwt_secret": "test-jwt-secret-key-for-testing-only",
        "email": "a@example.com",
        "password": "FirstPassword1",
        "new_password": "SecondPassword2",
        "display_name": "Alice",
        "season": 2024,
        "week": 3,
    }


# =============================================================================
# App Fixtures
# =============================================================================

@pytest.fixture
def app():
    """Create the app on a fresh in-memory database."""
    app = create_app("testing")
    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def app_ctx(app):
    """Push an app context for tests that talk to services directly.

    API tests must not use this: Flask-Login caches the request user on
    ``g``, which lives as long as the app context.
    """
    with app.app_context():
        yield app
        db.session.remove()


@pytest.fixture
def client(app):
    """Create test client for the API."""
    return app.test_client()


# =============================================================================
# Auth Primitive Fixtures
# =============================================================================

@pytest.fixture
def password_hasher() -> PasswordHasher:
    """Cheap Argon2 parameters keep the suite fast."""
    return PasswordHasher(time_cost=1, memory_cost=1024, parallelism=1)


@pytest.fixture
def token_issuer(test_config) -> TokenIssuer:
    return TokenIssuer(secret_key=test_config["jwt_secret"])


@pytest.fixture
def reset_tokens() -> ResetTokenManager:
    return ResetTokenManager(ttl=3600)


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def mailer():
    """Mock mail collaborator that reports every send as delivered."""
    mailer = MagicMock()
    mailer.send_welcome_email.return_value = True
    mailer.send_password_reset_email.return_value = True
    return mailer


@pytest.fixture
def credential_store(app_ctx) -> CredentialStore:
    return CredentialStore()


@pytest.fixture
def pick_ledger(app_ctx) -> PickLedger:
    return PickLedger()


@pytest.fixture
def auth_service(app_ctx, credential_store, mailer) -> AuthService:
    extensions = app_ctx.extensions
    return AuthService(
        store=credential_store,
        hasher=extensions["password_hasher"],
        token_issuer=extensions["token_issuer"],
        reset_tokens=extensions["reset_tokens"],
        mailer_factory=lambda: mailer,
    )


@pytest.fixture
def pick_service(app_ctx, pick_ledger) -> PickService:
    return PickService(
        ledger=pick_ledger,
        token_issuer=app_ctx.extensions["token_issuer"],
        schedule=ScheduleService(),
    )


# =============================================================================
# Data Fixtures
# =============================================================================

def create_active_season(year, week=None, start_date=None):
    """Create and activate a season, optionally pinned to ``week``."""
    season = Season.create_season(year, start_date or date(year, 9, 5))
    season.current_week = week
    db.session.flush()
    season.activate()
    db.session.commit()
    return season


@pytest.fixture
def current_period(app, test_config):
    """Active season pinned to a known week; returns (season, week)."""
    with app.app_context():
        create_active_season(test_config["season"], test_config["week"])
    return test_config["season"], test_config["week"]


@pytest.fixture
def sample_user(auth_service, test_config):
    """Create a sample account through the auth service."""
    return auth_service.signup(
        test_config["email"], test_config["password"], test_config["display_name"]
    )


@pytest.fixture
def session_token(auth_service, sample_user, test_config) -> str:
    return auth_service.login(test_config["email"], test_config["password"])


# =============================================================================
# API Helpers
# =============================================================================

def signup(client, email, password, display_name=None):
    payload = {"email": email, "password": password}
    if display_name is not None:
        payload["displayName"] = display_name
    return client.post("/auth/signup", json=payload)


def login(client, email, password) -> str:
    response = client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.get_json()
    return response.get_json()["jwtToken"]


def bearer(token) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(client, test_config) -> dict:
    """Sign up and log in through the API; returns Authorization headers."""
    response = signup(
        client, test_config["email"], test_config["password"], test_config["display_name"]
    )
    assert response.status_code == 201, response.get_json()
    return bearer(login(client, test_config["email"], test_config["password"]))
