"""Password hashing and validation helpers.

Shared utilities used by the user and token endpoints.

Pipeline:
- validate_password_strength: Length rules (sync, no network)
- hash_password / verify_password: bcrypt hashing
- DUMMY_HASH: Timing-safe constant for user enumeration defense
"""

import bcrypt

from catalog.core.errors import ValidationError

# bcrypt work factor for new hashes
BCRYPT_ROUNDS = 12

# bcrypt only reads the first 72 bytes of its input
MIN_PASSWORD_BYTES = 8
MAX_PASSWORD_BYTES = 72

# Pre-computed bcrypt hash for timing-safe comparison on user-not-found.
# Security: prevents user enumeration via response time differences.
# Pre-generated to avoid ~300ms bcrypt computation on every app startup.
DUMMY_HASH = b"$2b$12$ZP2PVB8yI35X.mkRqcUPUuSzJA1CNRt4dZ7X3cyrfJu.2S3w.Qen2"


def validate_password_strength(password: str) -> None:
    """Validate password length in UTF-8 bytes.

    Args:
        password: Plain-text password to validate.

    Raises:
        ValidationError: If password is shorter than 8 or longer than 72 bytes.
    """
    size = len(password.encode())
    if size < MIN_PASSWORD_BYTES:
        raise ValidationError(
            "Password must be at least 8 bytes long",
            details=[{"field": "password", "message": "must be at least 8 bytes long"}],
        )
    if size > MAX_PASSWORD_BYTES:
        raise ValidationError(
            "Password must not be more than 72 bytes long",
            details=[
                {"field": "password", "message": "must not be more than 72 bytes long"}
            ],
        )


def hash_password(password: str, *, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a password with bcrypt.

    Args:
        password: Plain-text password (already length-validated).
        rounds: bcrypt cost factor.

    Returns:
        The hash as a string, ready for storage.
    """
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(password: str, password_hash: str | None) -> bool:
    """Check a password against a stored bcrypt hash.

    When no hash is available the check still runs against DUMMY_HASH so
    unknown accounts take as long as known ones.

    Args:
        password: Plain-text password presented by the client.
        password_hash: Stored hash, or None if the account was not found.

    Passwords longer than MAX_PASSWORD_BYTES can never have been stored,
    so they fail after the same dummy check.

    Returns:
        True if the password matches.
    """
    encoded = password.encode()
    if password_hash is None or len(encoded) > MAX_PASSWORD_BYTES:
        bcrypt.checkpw(encoded[:MAX_PASSWORD_BYTES], DUMMY_HASH)
        return False
    return bcrypt.checkpw(encoded, password_hash.encode())
