"""
finledger - Source Package

The ledger engine behind a local personal-finance tracker: accounts,
income/expense transactions, monthly category budgets and the derived
summary and trend figures.

DESIGN PRINCIPLES:
1. An account balance only moves together with the transaction row that moved it
2. Every balance-affecting write is one atomic unit of work
3. Every call re-checks that referenced rows belong to the calling user
4. Failures are reported once, never retried
5. Aggregates are computed on read, never stored
"""

__version__ = "1.0.0"
__author__ = "finledger Team"
