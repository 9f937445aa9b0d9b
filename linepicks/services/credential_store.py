"""
Credential Store

Durable mapping from account identity (email) to password material and reset
state, backed by the ``users`` table. Every mutation is one INSERT or one
conditional UPDATE, so the database provides the atomicity: the unique index
on ``email`` settles concurrent signups, and reset completion is a single
compare-and-clear statement.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError

from linepicks import db
from linepicks.errors import DuplicateIdentity, InvalidOrExpiredToken, NotFound
from linepicks.models.user import User, normalize_email, sanitize_display_name

logger = logging.getLogger(__name__)


class CredentialStore:
    """Account persistence; the only writer of ``User`` rows"""

    def create(self, identity, credential, display_name=None):
        """
        Insert a new account.

        Raises:
            DuplicateIdentity: an account with this identity already exists
        """
        user = User(
            email=normalize_email(identity),
            password_hash=credential,
            display_name=sanitize_display_name(display_name),
        )
        db.session.add(user)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise DuplicateIdentity()

        logger.info(f"Created account {user.id}")
        return user

    def find_by_identity(self, identity):
        user = User.query.filter_by(email=normalize_email(identity)).first()
        if user is None:
            raise NotFound("Account not found")
        return user

    def find_by_id(self, subject_id):
        user = db.session.get(User, subject_id)
        if user is None:
            raise NotFound("Account not found")
        return user

    def update_display_name(self, subject_id, display_name):
        result = _execute(
            update(User)
            .where(User.id == subject_id)
            .values(
                display_name=sanitize_display_name(display_name),
                updated_at=datetime.now(timezone.utc),
            )
        )
        db.session.commit()

        if result.rowcount == 0:
            raise NotFound("Account not found")
        return self.find_by_id(subject_id)

    def replace_credential(self, subject_id, credential):
        result = _execute(
            update(User)
            .where(User.id == subject_id)
            .values(password_hash=credential, updated_at=datetime.now(timezone.utc))
        )
        db.session.commit()

        if result.rowcount == 0:
            raise NotFound("Account not found")

    def record_login(self, subject_id):
        _execute(
            update(User)
            .where(User.id == subject_id)
            .values(last_login=datetime.now(timezone.utc))
        )
        db.session.commit()

    def begin_reset(self, identity, token, expiry):
        """
        Store a pending reset, replacing any earlier one.

        Unknown identities are a silent no-op so callers learn nothing about
        which accounts exist.
        """
        result = _execute(
            update(User)
            .where(User.email == normalize_email(identity))
            .values(reset_token=token, reset_token_expiry=expiry)
        )
        db.session.commit()

        if result.rowcount:
            logger.info("Password reset opened for an account")
        else:
            logger.debug("Password reset requested for unknown identity")

    def complete_reset(self, identity, token, new_credential):
        """
        Replace the credential if ``token`` is the pending, unexpired reset.

        The match, the credential swap and the clearing of both reset fields
        happen in one UPDATE, so a token can only ever be consumed once.

        Raises:
            InvalidOrExpiredToken: no matching pending reset
        """
        if not token:
            raise InvalidOrExpiredToken()

        email = normalize_email(identity)
        now = datetime.now(timezone.utc)
        result = _execute(
            update(User)
            .where(
                User.email == email,
                User.reset_token == token,
                User.reset_token_expiry > now,
            )
            .values(
                password_hash=new_credential,
                reset_token=None,
                reset_token_expiry=None,
                updated_at=now,
            )
        )
        db.session.commit()

        if result.rowcount != 1:
            raise InvalidOrExpiredToken()

        logger.info("Password reset completed for an account")
        return self.find_by_identity(email)


def _execute(statement):
    # Objects expire on commit and are re-read, so skip in-session sync
    return db.session.execute(
        statement, execution_options={"synchronize_session": False}
    )
