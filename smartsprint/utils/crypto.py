"""
Crypto utilities - bcrypt password hashing.

Only hashes are ever persisted (``User.password_hash``); plain-text
passwords never leave the request that carried them.
"""

import bcrypt

DEFAULT_ROUNDS = 12


def hash_password(plain_password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a plain-text password with bcrypt."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(plain_password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    """Verify a plain-text password against its bcrypt hash.

    Returns False for empty or malformed hashes instead of raising.
    """
    if not password_hash or not plain_password:
        return False
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            password_hash.encode("utf-8"),
        )
    except ValueError:
        return False
