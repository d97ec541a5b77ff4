"""
Account Balance Ledger

Owns one rule: an account's current balance equals its initial balance
plus the signed sum of its transactions.

There are exactly two ways a balance is written:
1. Opening an account sets current_balance = initial_balance
2. ``apply_delta`` adds a signed amount, inside the same unit of work
   as the transaction row change that caused it

Nothing else in the package writes ``accounts.current_balance``.
"""

from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from finledger.errors import NotFoundError
from finledger.models.ledger import (
    AccountCreate,
    AccountView,
    TransactionType,
)
from finledger.store import Account, Database, User
from finledger.validation import PayloadValidator


def signed_amount(tx_type: str, amount: Decimal) -> Decimal:
    """+amount for income, -amount for expense."""
    if TransactionType(tx_type) == TransactionType.INCOME:
        return amount
    return -amount


async def get_owned_account(
    session: AsyncSession,
    user_id: int,
    account_id: int,
) -> Account:
    """
    Load an account owned by ``user_id``.

    Raises:
        NotFoundError: missing, or owned by someone else.
    """
    account = await session.scalar(
        select(Account).where(Account.id == account_id, Account.user_id == user_id)
    )
    if account is None:
        raise NotFoundError("Account not found.")
    return account


async def add_account(
    session: AsyncSession,
    user_id: int,
    account: AccountCreate,
) -> Account:
    """Insert an account row with current_balance = initial_balance and flush it."""
    row = Account(
        user_id=user_id,
        name=account.name,
        type=account.type.value,
        initial_balance=account.initial_balance,
        current_balance=account.initial_balance,
    )
    session.add(row)
    await session.flush()
    return row


async def apply_delta(session: AsyncSession, account_id: int, delta: Decimal) -> None:
    """
    Add ``delta`` to the account's current balance.

    Must be called inside an open unit of work, together with the
    transaction row write that produced the delta.

    Raises:
        RuntimeError: called outside a store transaction.
        NotFoundError: the account row does not exist.
    """
    if not session.in_transaction():
        raise RuntimeError("apply_delta must run inside a unit of work")

    result = await session.execute(
        update(Account)
        .where(Account.id == account_id)
        .values(current_balance=Account.current_balance + delta)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise NotFoundError("Account not found.")


class AccountLedger:
    """
    Account operations exposed to the presentation layer.

    Balance movements are not exposed here; they happen only through
    the transaction manager.
    """

    def __init__(
        self,
        database: Database,
        validator: Optional[PayloadValidator] = None,
    ):
        self._db = database
        self._validator = validator or PayloadValidator()

    async def open_account(self, user_id: int, payload: Any) -> int:
        """
        Create an account for ``user_id``.

        Returns:
            The new account's id.

        Raises:
            ValidationError: bad name, type or initial balance.
            NotFoundError: the user does not exist.
            StoreFailure: the store refused the write.
        """
        account = self._validator.parse(AccountCreate, payload)

        async with self._db.unit_of_work() as session:
            if await session.get(User, user_id) is None:
                raise NotFoundError("User not found.")
            row = await add_account(session, user_id, account)
            return row.id

    async def list_accounts(self, user_id: int) -> list[AccountView]:
        """All of the user's accounts, newest first."""
        async with self._db.reader() as session:
            rows = await session.scalars(
                select(Account)
                .where(Account.user_id == user_id)
                .order_by(Account.id.desc())
            )
            return [AccountView.model_validate(row) for row in rows]

    async def get_account(self, user_id: int, account_id: int) -> AccountView:
        """One owned account, or NotFoundError."""
        async with self._db.reader() as session:
            row = await get_owned_account(session, user_id, account_id)
            return AccountView.model_validate(row)
