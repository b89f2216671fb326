"""Password hashing with bcrypt.

The cost factor comes from ``settings.BCRYPT_ROUNDS`` so tests can run with
the cheapest setting bcrypt allows.
"""

from __future__ import annotations

from typing import Optional

import bcrypt

from app.core.config import settings


class HashingError(Exception):
    """bcrypt could not produce a hash (bad cost factor, RNG failure, oversized input)."""


class VerificationError(Exception):
    """The stored hash is not a valid bcrypt hash."""


# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    try:
        salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")
    except (ValueError, TypeError) as e:
        raise HashingError(str(e)) from e


def verify_password(hashed: str, candidate: str) -> bool:
    """Return False on mismatch; raise VerificationError only for a malformed hash."""
    if len(candidate.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(candidate.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError as e:
        raise VerificationError(str(e)) from e
