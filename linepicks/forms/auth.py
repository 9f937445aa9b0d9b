from wtforms.validators import (
    DataRequired,
    Email,
    Length,
    Optional,
    Regexp,
)

from linepicks.forms import ApiForm, SecretField, TextField

PASSWORD_MIN_LENGTH = 8


def strip_filter(value):
    return value.strip() if isinstance(value, str) else value


def new_password_validators():
    return [
        DataRequired(),
        Length(
            min=PASSWORD_MIN_LENGTH,
            max=128,
            message=f"Password must be at least {PASSWORD_MIN_LENGTH} characters long",
        ),
    ]


class SignupForm(ApiForm):
    email = TextField(
        "Email", validators=[DataRequired(), Email(), Length(max=254)], filters=[strip_filter]
    )
    password = SecretField("Password", validators=new_password_validators())
    display_name = TextField(
        "Display Name",
        name="displayName",
        validators=[
            Optional(),
            Length(max=100),
            Regexp(
                r"^[a-zA-Z0-9 _.'-]*$",
                message="Display name contains invalid characters",
            ),
        ],
        filters=[strip_filter],
    )


class LoginForm(ApiForm):
    email = TextField("Email", validators=[DataRequired()], filters=[strip_filter])
    password = SecretField("Password", validators=[DataRequired()])


class ForgotPasswordForm(ApiForm):
    email = TextField("Email", validators=[DataRequired()], filters=[strip_filter])


class ResetPasswordForm(ApiForm):
    email = TextField("Email", validators=[DataRequired()], filters=[strip_filter])
    token = TextField("Token", validators=[DataRequired(), Length(max=100)])
    password = SecretField("New Password", validators=new_password_validators())


class ChangePasswordForm(ApiForm):
    current_password = SecretField(
        "Current Password", name="currentPassword", validators=[DataRequired()]
    )
    new_password = SecretField(
        "New Password", name="newPassword", validators=new_password_validators()
    )


class EditProfileForm(ApiForm):
    display_name = TextField(
        "Display Name",
        name="displayName",
        validators=[
            Length(max=100),
            Regexp(
                r"^[a-zA-Z0-9 _.'-]*$",
                message="Display name contains invalid characters",
            ),
        ],
        filters=[strip_filter],
    )
