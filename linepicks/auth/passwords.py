"""
Password hashing utilities.

Uses Argon2id (memory-hard) through argon2-cffi. The encoded hash carries its
own salt and cost parameters, so only the encoded string is ever stored.
"""

import logging

from argon2 import PasswordHasher as Argon2Hasher
from argon2 import extract_parameters
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from linepicks.errors import CorruptCredential

logger = logging.getLogger(__name__)


class PasswordHasher:
    """
    Hashes and verifies passwords.

    Usage:
        hasher = PasswordHasher()
        credential = hasher.hash("my_password")
        hasher.verify(credential, "my_password")  # True
    """

    def __init__(self, time_cost=3, memory_cost=65536, parallelism=4):
        self._hasher = Argon2Hasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
        )

    @classmethod
    def from_config(cls, config):
        return cls(
            time_cost=config.get("ARGON2_TIME_COST", 3),
            memory_cost=config.get("ARGON2_MEMORY_COST", 65536),
            parallelism=config.get("ARGON2_PARALLELISM", 4),
        )

    def hash(self, plaintext: str) -> str:
        """
        Hash a password.

        Args:
            plaintext: Plain text password

        Returns:
            Encoded Argon2id hash (includes salt and parameters)
        """
        if not plaintext:
            raise ValueError("Password cannot be empty")
        return self._hasher.hash(plaintext)

    def verify(self, credential: str, plaintext: str) -> bool:
        """
        Verify a password against a stored credential.

        Returns False on mismatch. Raises CorruptCredential when the stored
        credential is not a valid Argon2 hash.
        """
        if not plaintext:
            return False
        if not credential:
            raise CorruptCredential("Stored credential is empty")

        try:
            extract_parameters(credential)
            return self._hasher.verify(credential, plaintext)
        except VerifyMismatchError:
            return False
        except InvalidHashError as e:
            logger.error("Stored credential is not a valid Argon2 hash")
            raise CorruptCredential("Stored credential is not a valid Argon2 hash") from e
        except VerificationError as e:
            # Parsed but failed for a reason other than a plain mismatch
            logger.warning(f"Password verification error: {e}")
            return False

    def needs_rehash(self, credential: str) -> bool:
        """Check if a credential was hashed with outdated parameters"""
        try:
            return self._hasher.check_needs_rehash(credential)
        except InvalidHashError:
            return True
