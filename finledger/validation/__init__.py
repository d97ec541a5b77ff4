"""Payload validation package."""

from finledger.validation.validator import PayloadValidator, ValidationIssue

__all__ = ["PayloadValidator", "ValidationIssue"]
