"""
Ledger package: account balances, transactions and budget limits.
"""

from finledger.ledger.balance import (
    AccountLedger,
    add_account,
    apply_delta,
    get_owned_account,
    signed_amount,
)
from finledger.ledger.budgets import BudgetManager
from finledger.ledger.transactions import TransactionManager, get_owned_transaction

__all__ = [
    "AccountLedger",
    "BudgetManager",
    "TransactionManager",
    "add_account",
    "apply_delta",
    "get_owned_account",
    "get_owned_transaction",
    "signed_amount",
]
