"""
Service wiring.

Services are stateless; they are assembled per call from the process-wide
auth primitives stored on the app at startup.
"""

from flask import current_app

from .auth_service import AuthService
from .credential_store import CredentialStore
from .pick_ledger import PickLedger
from .pick_service import PickService
from .schedule_service import ScheduleService


def _default_mailer():
    from linepicks.utils.email_service import EmailService

    return EmailService()


def get_auth_service():
    extensions = current_app.extensions
    return AuthService(
        store=CredentialStore(),
        hasher=extensions["password_hasher"],
        token_issuer=extensions["token_issuer"],
        reset_tokens=extensions["reset_tokens"],
        mailer_factory=_default_mailer,
    )


def get_pick_service():
    return PickService(
        ledger=PickLedger(),
        token_issuer=current_app.extensions["token_issuer"],
        schedule=ScheduleService(),
    )


__all__ = [
    "AuthService",
    "CredentialStore",
    "PickLedger",
    "PickService",
    "ScheduleService",
    "get_auth_service",
    "get_pick_service",
]
