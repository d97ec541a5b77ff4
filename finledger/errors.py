"""
Error taxonomy shared by every ledger operation.

The facade in ``finledger.orchestrator`` turns these into ``{ok, message}``
results; inside the engine they are raised and propagate through the unit
of work, which rolls back before they reach the caller.
"""

from typing import Optional


class LedgerError(Exception):
    """Base exception for ledger operations."""

    public_message = "The operation could not be completed."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.public_message)
        self.message = message or self.public_message


class ValidationError(LedgerError):
    """Malformed or out-of-range input. No state was touched."""

    public_message = "Invalid data."

    def __init__(self, message: Optional[str] = None, issues: Optional[list] = None):
        super().__init__(message)
        self.issues = issues or []


class NotFoundError(LedgerError):
    """
    Referenced row is missing or belongs to another user.

    The two cases are reported identically so that callers cannot probe
    for other users' identifiers.
    """

    public_message = "Not found."


class DuplicateError(LedgerError):
    """Attempted to insert a row that violates a uniqueness rule."""

    public_message = "Already exists."


class AuthenticationError(LedgerError):
    """Email/password pair did not match a user."""

    public_message = "Invalid credentials."


class StoreFailure(LedgerError):
    """Persistence I/O or constraint failure. The unit of work was rolled back."""

    public_message = "Could not access the local database."
