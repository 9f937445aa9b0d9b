"""
Auth Service

Signup, login, password change and password recovery on top of the
credential store and the auth primitives.

Reset state per account:

    NoPendingReset --request--> PendingReset(token, expiry)
    PendingReset --complete | expire | new request--> NoPendingReset

Login and reset requests never reveal whether an account exists: an unknown
email fails login exactly like a wrong password, and a reset request for an
unknown email looks exactly like a successful one.
"""

import logging

from linepicks.errors import InvalidCredentials, NotFound
from linepicks.models.user import normalize_email

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, store, hasher, token_issuer, reset_tokens, mailer_factory=None):
        self.store = store
        self.hasher = hasher
        self.token_issuer = token_issuer
        self.reset_tokens = reset_tokens
        # Built lazily: EmailService reads the app config
        self.mailer_factory = mailer_factory

    def signup(self, identity, plaintext, display_name=None):
        """
        Create an account.

        Raises:
            DuplicateIdentity: the email is already registered
        """
        credential = self.hasher.hash(plaintext)
        user = self.store.create(identity, credential, display_name)

        self._notify("welcome", lambda mailer: mailer.send_welcome_email(user))
        return user

    def login(self, identity, plaintext):
        """
        Verify credentials and return a session token.

        Raises:
            InvalidCredentials: unknown email or wrong password (indistinguishable)
        """
        try:
            user = self.store.find_by_identity(identity)
        except NotFound:
            logger.info("Login failed: invalid credentials")
            raise InvalidCredentials()

        if not self.hasher.verify(user.password_hash, plaintext):
            logger.info(f"Login failed: invalid credentials for account {user.id}")
            raise InvalidCredentials()

        if self.hasher.needs_rehash(user.password_hash):
            self.store.replace_credential(user.id, self.hasher.hash(plaintext))
            logger.info(f"Rehashed credential for account {user.id}")

        self.store.record_login(user.id)
        return self.token_issuer.issue(user.id, user.email)

    def change_password(self, subject_id, current_plaintext, new_plaintext):
        user = self.store.find_by_id(subject_id)
        if not self.hasher.verify(user.password_hash, current_plaintext):
            raise InvalidCredentials("Current password is incorrect")

        self.store.replace_credential(user.id, self.hasher.hash(new_plaintext))
        logger.info(f"Password changed for account {user.id}")

    def update_display_name(self, subject_id, display_name):
        return self.store.update_display_name(subject_id, display_name)

    def request_password_reset(self, identity):
        """
        Open a recovery window and email the token.

        Always returns None. Unknown identities and mail failures are both
        invisible to the caller; a stored token stays usable even if the
        email never arrives.
        """
        try:
            user = self.store.find_by_identity(identity)
        except NotFound:
            logger.info("Password reset requested for unknown identity")
            return None

        token, expiry = self.reset_tokens.generate()
        self.store.begin_reset(user.email, token, expiry)

        self._notify(
            "password reset",
            lambda mailer: mailer.send_password_reset_email(user, token),
        )
        return None

    def complete_password_reset(self, identity, token, new_plaintext):
        """
        Replace the password using a pending reset token.

        Raises:
            InvalidOrExpiredToken: token unknown, already used, or expired
        """
        credential = self.hasher.hash(new_plaintext)
        return self.store.complete_reset(normalize_email(identity), token, credential)

    def _notify(self, kind, send):
        if self.mailer_factory is None:
            return

        try:
            sent = send(self.mailer_factory())
        except Exception as e:
            logger.error(f"Error sending {kind} email: {str(e)}")
            return

        if not sent:
            logger.warning(f"Failed to send {kind} email")
