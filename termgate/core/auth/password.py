"""Password hashing helpers."""

from termgate.extensions import bcrypt


def hash_password(plain_password: str) -> str:
    """Hash a plaintext password using bcrypt."""
    return bcrypt.generate_password_hash(plain_password).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """Validate a plaintext password against a stored hash.

    A missing or malformed stored hash never verifies.
    """
    if not hashed_password or not plain_password:
        return False
    try:
        return bcrypt.check_password_hash(hashed_password, plain_password)
    except ValueError:
        return False
