"""Password hashing utilities."""

import bcrypt

# bcrypt only reads this many bytes of input
MAX_PASSWORD_BYTES = 72


def password_fits(password: str) -> bool:
    """Check that a password is within bcrypt's input limit."""
    return len(password.encode("utf-8")) <= MAX_PASSWORD_BYTES


def hash_password(password: str, rounds: int = 10) -> str:
    """Hash a password with bcrypt.

    Args:
        password: Plaintext password, at most ``MAX_PASSWORD_BYTES`` bytes
        rounds: bcrypt cost factor

    Returns:
        bcrypt hash as a string

    Raises:
        ValueError: If the password is longer than bcrypt accepts
    """
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored bcrypt hash.

    Args:
        password: Plaintext password
        password_hash: Stored bcrypt hash

    Returns:
        True if the password matches
    """
    if not password_fits(password):
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False
