"""
Request identity for Flask-Login.

Callers authenticate with ``Authorization: Bearer <session token>``. A missing
or invalid token leaves the request anonymous; endpoints that need an identity
use ``login_required`` and get a JSON 401.
"""

import logging

from flask import current_app, request

from linepicks import db, login_manager
from linepicks.auth import bearer_token
from linepicks.errors import Unauthenticated
from linepicks.models import User

logger = logging.getLogger(__name__)


def request_token():
    """Bearer token presented with the current request, if any"""
    return bearer_token(request.headers.get("Authorization"))


@login_manager.user_loader
def load_user(user_id):
    return _get_user(user_id)


@login_manager.request_loader
def load_user_from_request(req):
    token = bearer_token(req.headers.get("Authorization"))
    if not token:
        return None

    claim = current_app.extensions["token_issuer"].verify(token)
    if claim is None:
        return None

    user = _get_user(claim.subject_id)
    if user is None:
        logger.info(f"Session token references missing account {claim.subject_id}")
        return None

    return user


@login_manager.unauthorized_handler
def unauthorized():
    raise Unauthenticated()


def _get_user(user_id):
    try:
        return db.session.get(User, int(user_id))
    except (TypeError, ValueError):
        return None
