"""Salted password hashing with constant-time verification."""

from werkzeug.security import check_password_hash, generate_password_hash


def hash_password(password: str) -> str:
    """Return a salted scrypt credential string for ``password``."""
    return generate_password_hash(password, method="scrypt", salt_length=16)


def verify_password(password: str, credential: str) -> bool:
    """True if ``password`` matches ``credential``; False for malformed credentials."""
    if not credential or "$" not in credential:
        return False
    return check_password_hash(credential, password)
