from flask_wtf import FlaskForm
from wtforms import PasswordField, StringField

from linepicks.errors import ValidationFailed


class ApiForm(FlaskForm):
    """Form bound to the JSON (or form-encoded) request body.

    The API authenticates with bearer tokens rather than cookies, so there is
    no CSRF token to check.
    """

    class Meta:
        csrf = False


class StringOnlyMixin:
    """Reject JSON numbers, booleans and objects where text is expected.

    A rejected value leaves ``data`` unset, so the field's validators never
    see a non-string.
    """

    def process_formdata(self, valuelist):
        if valuelist and valuelist[0] is not None and not isinstance(valuelist[0], str):
            raise ValueError("Not a valid string value.")
        super().process_formdata(valuelist)


class TextField(StringOnlyMixin, StringField):
    pass


class SecretField(StringOnlyMixin, PasswordField):
    pass


def validate_or_raise(form):
    """Validate ``form`` or raise ValidationFailed carrying the field errors"""
    if not form.validate():
        raise ValidationFailed(details=form.errors)
    return form
