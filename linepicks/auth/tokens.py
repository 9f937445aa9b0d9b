"""
Session token handling.

Session tokens are HS256 JWTs carrying the account id (``sub``), the email
identity and an expiry. The signing secret is injected at construction and
lives for the whole process; there is no server-side revocation list, tokens
simply expire.
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional

from jose import JWTError, jwt

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
DEFAULT_TOKEN_TTL = 86400  # 24 hours


@dataclass(frozen=True)
class SessionClaim:
    """Identity asserted by a verified session token."""

    subject_id: int
    identity: str
    issued_at: int
    expires_at: int

    def to_dict(self) -> dict:
        return {
            "sub": str(self.subject_id),
            "email": self.identity,
            "iat": self.issued_at,
            "exp": self.expires_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SessionClaim":
        return cls(
            subject_id=int(data["sub"]),
            identity=data["email"],
            issued_at=int(data["iat"]),
            expires_at=int(data["exp"]),
        )


class TokenIssuer:
    """Signs and verifies bearer session tokens."""

    def __init__(self, secret_key: str, ttl: int = DEFAULT_TOKEN_TTL, algorithm: str = ALGORITHM):
        if not secret_key:
            raise ValueError("Token signing secret cannot be empty")
        self._secret_key = secret_key
        self.ttl = ttl
        self.algorithm = algorithm

    @classmethod
    def from_config(cls, config) -> "TokenIssuer":
        secret = config.get("JWT_SECRET_KEY")
        if not secret:
            logger.warning(
                "JWT_SECRET_KEY not set, signing session tokens with SECRET_KEY. "
                "Set JWT_SECRET_KEY in production!"
            )
            secret = config.get("SECRET_KEY")
        return cls(
            secret_key=secret,
            ttl=config.get("SESSION_TOKEN_TTL", DEFAULT_TOKEN_TTL),
            algorithm=config.get("JWT_ALGORITHM", ALGORITHM),
        )

    def issue(self, subject_id: int, identity: str, expires_in: Optional[int] = None) -> str:
        """
        Create a session token.

        Args:
            subject_id: Account id
            identity: Account email
            expires_in: Custom lifetime in seconds (default: configured TTL)

        Returns:
            Encoded JWT string
        """
        now = int(time.time())
        lifetime = self.ttl if expires_in is None else expires_in
        claim = SessionClaim(
            subject_id=subject_id,
            identity=identity,
            issued_at=now,
            expires_at=now + lifetime,
        )

        token = jwt.encode(claim.to_dict(), self._secret_key, algorithm=self.algorithm)
        logger.debug(f"Issued session token for account {subject_id}, expires in {lifetime}s")
        return token

    def verify(self, token: Optional[str]) -> Optional[SessionClaim]:
        """
        Verify and decode a token.

        Returns:
            SessionClaim if valid, None if missing, tampered, malformed or expired
        """
        if not token:
            return None

        try:
            data = jwt.decode(token, self._secret_key, algorithms=[self.algorithm])
            claim = SessionClaim.from_dict(data)
        except JWTError as e:
            logger.debug(f"Token verification failed: {e}")
            return None
        except (KeyError, TypeError, ValueError) as e:
            logger.debug(f"Token carries malformed claims: {e}")
            return None

        # jose already rejects expired tokens; keep the check explicit
        if claim.expires_at <= int(time.time()):
            logger.debug("Token expired")
            return None

        return claim


def bearer_token(authorization_header: Optional[str]) -> Optional[str]:
    """Extract the token from an ``Authorization: Bearer <token>`` header"""
    if not authorization_header:
        return None
    scheme, _, token = authorization_header.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()
