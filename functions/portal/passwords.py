"""
Salted one-way password hashing with bcrypt.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import bcrypt

from portal.exceptions import HashingError

logger = logging.getLogger(__name__)

DEFAULT_ROUNDS = 10
MAX_PASSWORD_BYTES = 72


@dataclass(frozen=True)
class PasswordHasher:
    """Hashes and verifies passwords at a fixed bcrypt work factor."""

    rounds: int = DEFAULT_ROUNDS

    def hash(self, plaintext: str) -> str:
        try:
            salt = bcrypt.gensalt(rounds=self.rounds)
            return bcrypt.hashpw(plaintext.encode("utf-8"), salt).decode("ascii")
        except (ValueError, TypeError) as exc:
            logger.exception("Password hashing failed")
            raise HashingError() from exc

    def verify(self, plaintext: str, digest: str) -> bool:
        """
        Return True when ``plaintext`` matches ``digest``.

        A digest bcrypt cannot parse raises ``HashingError`` rather than
        reading as a mismatch.
        """
        try:
            return bcrypt.checkpw(plaintext.encode("utf-8"), digest.encode("ascii"))
        except (ValueError, TypeError) as exc:
            logger.exception("Password verification failed")
            raise HashingError() from exc


def exceeds_bcrypt_limit(plaintext: str) -> bool:
    """bcrypt only looks at the first 72 bytes of a password."""
    return len(plaintext.encode("utf-8")) > MAX_PASSWORD_BYTES
