# /course-tracker/course_tracker/core/security.py

"""Password hashing helpers. Credentials are verified by the identity provider,
so the core only ever hashes on write."""

import logging

import bcrypt

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 12
# bcrypt only reads the first 72 bytes; newer releases reject longer input.
BCRYPT_MAX_BYTES = 72


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    if not password:
        raise ValueError("Password cannot be empty")
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8")[:BCRYPT_MAX_BYTES], salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Checks a plain password against a stored bcrypt hash."""
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8")[:BCRYPT_MAX_BYTES], password_hash.encode("utf-8"))
    except ValueError as e:
        # Malformed hash in storage.
        logger.warning("Password verification failed: %s", e)
        return False
