import logging

from flask import jsonify, request
from flask_login import current_user, login_required

from linepicks import limiter
from linepicks.forms import validate_or_raise
from linepicks.forms.auth import (
    ChangePasswordForm,
    EditProfileForm,
    ForgotPasswordForm,
    LoginForm,
    ResetPasswordForm,
    SignupForm,
)
from linepicks.routes.auth import bp
from linepicks.services import get_auth_service

logger = logging.getLogger(__name__)

RESET_REQUESTED_MESSAGE = (
    "If an account with that email exists, password reset instructions have been sent."
)


@bp.route("/signup", methods=["POST"])
@limiter.limit("5 per hour")
def signup():
    form = validate_or_raise(SignupForm())

    user = get_auth_service().signup(
        form.email.data, form.password.data, form.display_name.data or None
    )
    return jsonify({"id": user.id, "email": user.email, "displayName": user.display_name}), 201


@bp.route("/login", methods=["POST"])
@limiter.limit("10 per minute")
def login():
    form = validate_or_raise(LoginForm())

    token = get_auth_service().login(form.email.data, form.password.data)
    return jsonify({"jwtToken": token})


@bp.route("/logout", methods=["POST"])
def logout():
    # Tokens are stateless; the client discards its copy
    return jsonify({"success": True})


@bp.route("/me")
@login_required
def me():
    return jsonify(current_user.to_dict())


@bp.route("/profile", methods=["PUT", "PATCH"])
@login_required
def edit_profile():
    form = validate_or_raise(EditProfileForm())

    user = get_auth_service().update_display_name(current_user.id, form.display_name.data)
    return jsonify(user.to_dict())


@bp.route("/change-password", methods=["POST"])
@login_required
def change_password():
    form = validate_or_raise(ChangePasswordForm())

    get_auth_service().change_password(
        current_user.id, form.current_password.data, form.new_password.data
    )
    return jsonify({"success": True, "message": "Password changed successfully"})


@bp.route("/forgot-password", methods=["POST"])
@limiter.limit("20 per hour")
def forgot_password():
    form = validate_or_raise(ForgotPasswordForm())

    get_auth_service().request_password_reset(form.email.data)

    # Always the same answer, whether or not the account exists
    return jsonify({"success": True, "message": RESET_REQUESTED_MESSAGE})


@bp.route("/reset-password", methods=["POST"])
@limiter.limit("30 per hour")
def reset_password():
    form = ResetPasswordForm()
    # The recovery link carries the token in the query string
    if not form.token.data and request.args.get("token"):
        form.token.data = request.args.get("token")
    validate_or_raise(form)

    get_auth_service().complete_password_reset(
        form.email.data, form.token.data, form.password.data
    )
    return jsonify(
        {
            "success": True,
            "message": "Your password has been reset successfully. Please log in with your new password.",
        }
    )
