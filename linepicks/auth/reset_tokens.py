import secrets
from datetime import datetime, timedelta, timezone

DEFAULT_RESET_TTL = 3600  # 1 hour
TOKEN_BYTES = 32  # 256 bits of entropy


class ResetTokenManager:
    """Generates single-use password reset tokens and their expiry.

    Holds no state of its own; the (token, expiry) pair is persisted by the
    credential store.
    """

    def __init__(self, ttl=DEFAULT_RESET_TTL):
        self.ttl = timedelta(seconds=ttl)

    @classmethod
    def from_config(cls, config):
        return cls(ttl=config.get("RESET_TOKEN_TTL", DEFAULT_RESET_TTL))

    def generate(self, now=None):
        """Return a fresh (token, expiry) pair, expiry in UTC"""
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return secrets.token_urlsafe(TOKEN_BYTES), now + self.ttl
