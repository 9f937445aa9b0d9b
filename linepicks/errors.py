"""
Error taxonomy for LinePicks

Every failure a caller can recover from is a LinePicksError subclass carrying
its HTTP status and a stable error name. The app factory renders them as JSON:

    {"error": "AlreadyPicked", "message": "You have already made a pick for this week"}
"""


class LinePicksError(Exception):
    """Base class for recoverable, caller-facing failures"""

    status_code = 400
    default_message = "Request failed"

    def __init__(self, message=None, details=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.details = details

    @property
    def error(self):
        return type(self).__name__

    def to_dict(self):
        payload = {"error": self.error, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class DuplicateIdentity(LinePicksError):
    status_code = 409
    default_message = "Email already in use"


class InvalidCredentials(LinePicksError):
    status_code = 401
    default_message = "Invalid credentials"


class InvalidOrExpiredToken(LinePicksError):
    status_code = 401
    default_message = "Invalid or expired reset token"


class Unauthenticated(LinePicksError):
    status_code = 401
    default_message = "Authentication required"


class AlreadyPicked(LinePicksError):
    # The front end branches on "already made a pick"; keep the wording stable
    status_code = 409
    default_message = "You have already made a pick for this week"


class MissingParameters(LinePicksError):
    status_code = 400
    default_message = "season and week are required"


class NotFound(LinePicksError):
    status_code = 404
    default_message = "Resource not found"


class NoActiveSeason(LinePicksError):
    status_code = 404
    default_message = "No active season"


class ValidationFailed(LinePicksError):
    status_code = 400
    default_message = "Invalid request data"


class CorruptCredential(Exception):
    """Stored credential could not be parsed. Indicates storage corruption."""
