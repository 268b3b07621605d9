"""
Quai Antique API — Password Hashing
=====================================

What:  Salted, one-way password hashing and constant-time verification.
How:   passlib's CryptContext with the pbkdf2_sha256 scheme. Hashes are
       modular-crypt strings ($pbkdf2-sha256$rounds$salt$checksum), so each
       one records its own rounds and salt and keeps verifying after the
       configured rounds change.
Who:   The registration and profile-edit flows (hash) and the login flow (verify).
"""

import logging
from typing import Optional

from passlib.context import CryptContext

from app.config import settings
from app.exceptions import HashingError

logger = logging.getLogger(__name__)


class PasswordHasher:
    """
    One-way hashing of plaintext passwords.

    hash() accepts any string, including the empty one; rejecting empty
    passwords is the caller's job.
    """

    def __init__(self, rounds: Optional[int] = None):
        self._context = CryptContext(
            schemes=["pbkdf2_sha256"],
            deprecated="auto",
            pbkdf2_sha256__default_rounds=rounds or settings.password_hash_rounds,
        )
        self._dummy_hash: Optional[str] = None

    def hash(self, plaintext: str) -> str:
        """
        Hash a plaintext password with a fresh random salt.

        Raises:
            HashingError: the hashing backend failed (misconfiguration only).
        """
        try:
            return self._context.hash(plaintext)
        except (ValueError, TypeError, RuntimeError) as exc:
            logger.error("Password hashing failed: %s", type(exc).__name__)
            raise HashingError(context={"error_type": type(exc).__name__}) from exc

    def verify(self, plaintext: str, hashed: Optional[str]) -> bool:
        """Return True when `plaintext` matches `hashed`; False on mismatch or unusable hash."""
        if not hashed:
            return False
        try:
            return self._context.verify(plaintext, hashed)
        except (ValueError, TypeError):
            # Unknown or corrupted hash format
            return False

    def dummy_verify(self, plaintext: str) -> bool:
        """
        Run a full verification against a throwaway hash and return False.

        Used when a login names an unknown account, so that the response time
        does not reveal whether the email exists.
        """
        if self._dummy_hash is None:
            self._dummy_hash = self.hash("quai-antique-dummy-password")
        try:
            self._context.verify(plaintext, self._dummy_hash)
        except (ValueError, TypeError):
            pass
        return False


password_hasher = PasswordHasher()
