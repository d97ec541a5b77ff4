"""Credentials and authentication package."""

from finledger.auth.credentials import hash_password, verify_password
from finledger.auth.service import AuthService

__all__ = ["AuthService", "hash_password", "verify_password"]
