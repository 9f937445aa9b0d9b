"""
Authentication primitives for LinePicks.

Password hashing, session token issuing and reset token generation. None of
these touch the database.
"""

from .passwords import PasswordHasher
from .reset_tokens import ResetTokenManager
from .tokens import SessionClaim, TokenIssuer, bearer_token

__all__ = [
    "PasswordHasher",
    "ResetTokenManager",
    "SessionClaim",
    "TokenIssuer",
    "bearer_token",
]
