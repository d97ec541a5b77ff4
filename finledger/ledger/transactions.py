"""
Transaction Manager

Create, update, delete and list income/expense transactions.

Every write runs as one unit of work that contains both the transaction
row change and the balance deltas it implies. If any step fails the
whole unit rolls back, so a reversed-but-not-reapplied delta is never
visible.

Update always works from the *stored* row:
1. reverse signed(old type, old amount) on the old account
2. apply signed(new type, new amount) on the new account
3. overwrite the row

This handles account moves and income/expense flips with no special cases.
"""

from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from finledger.errors import NotFoundError, ValidationError
from finledger.ledger.balance import apply_delta, get_owned_account, signed_amount
from finledger.models.ledger import (
    TransactionCreate,
    TransactionFilters,
    TransactionUpdate,
    TransactionView,
)
from finledger.store import Account, Database, Transaction
from finledger.validation import PayloadValidator


def _coerce_id(value: Any, label: str = "Transaction") -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{label} is required.")
    try:
        ident = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{label} is not valid.")
    if ident <= 0:
        raise ValidationError(f"{label} is not valid.")
    return ident


async def get_owned_transaction(
    session: AsyncSession,
    user_id: int,
    transaction_id: int,
) -> Transaction:
    """
    Load a transaction owned by ``user_id``.

    Raises:
        NotFoundError: missing, or owned by someone else.
    """
    row = await session.scalar(
        select(Transaction).where(
            Transaction.id == transaction_id,
            Transaction.user_id == user_id,
        )
    )
    if row is None:
        raise NotFoundError("Transaction not found.")
    return row


class TransactionManager:
    """
    Validates and persists transactions while keeping balances consistent.

    GUARANTEES:
    - Each create/update/delete is all-or-nothing
    - Ownership of every referenced account and transaction is checked per call
    - Foreign identifiers are reported as not found
    """

    def __init__(
        self,
        database: Database,
        validator: Optional[PayloadValidator] = None,
    ):
        self._db = database
        self._validator = validator or PayloadValidator()

    async def create(self, user_id: int, payload: Any) -> int:
        """
        Record a new transaction and move its account's balance.

        Returns:
            The new transaction's id.

        Raises:
            ValidationError: missing or invalid field.
            NotFoundError: account missing or owned by another user.
            StoreFailure: the store refused the write.
        """
        tx = self._validator.parse(TransactionCreate, payload)

        async with self._db.unit_of_work() as session:
            await get_owned_account(session, user_id, tx.account_id)

            row = Transaction(
                user_id=user_id,
                account_id=tx.account_id,
                type=tx.type.value,
                category=tx.category,
                description=tx.description,
                amount=tx.amount,
                tx_date=tx.date,
            )
            session.add(row)
            await session.flush()

            await apply_delta(session, tx.account_id, signed_amount(tx.type, tx.amount))
            return row.id

    async def update(self, user_id: int, payload: Any) -> int:
        """
        Replace every mutable field of a transaction, correcting balances.

        Returns:
            Id of the account the transaction was on before the update.
            Callers use it to log the move; unlike ``create``, no new row
            is created, so there is no new id to return.

        Raises:
            ValidationError: missing or invalid field.
            NotFoundError: transaction or new account missing or foreign.
            StoreFailure: the store refused the write.
        """
        tx = self._validator.parse(TransactionUpdate, payload)

        async with self._db.unit_of_work() as session:
            current = await get_owned_transaction(session, user_id, tx.id)
            await get_owned_account(session, user_id, tx.account_id)

            old_account_id = current.account_id
            old_delta = signed_amount(current.type, current.amount)
            new_delta = signed_amount(tx.type, tx.amount)

            await apply_delta(session, old_account_id, -old_delta)
            await apply_delta(session, tx.account_id, new_delta)

            current.account_id = tx.account_id
            current.type = tx.type.value
            current.category = tx.category
            current.description = tx.description
            current.amount = tx.amount
            current.tx_date = tx.date
            await session.flush()

            return old_account_id

    async def delete(self, user_id: int, transaction_id: Any) -> None:
        """
        Remove a transaction and reverse its balance effect.

        Raises:
            ValidationError: identifier missing or malformed.
            NotFoundError: transaction missing or owned by another user.
            StoreFailure: the store refused the write.
        """
        transaction_id = _coerce_id(transaction_id)

        async with self._db.unit_of_work() as session:
            current = await get_owned_transaction(session, user_id, transaction_id)

            await apply_delta(
                session,
                current.account_id,
                -signed_amount(current.type, current.amount),
            )
            await session.delete(current)
            await session.flush()

    async def get(self, user_id: int, transaction_id: Any) -> TransactionView:
        """One owned transaction with its account name."""
        transaction_id = _coerce_id(transaction_id)

        async with self._db.reader() as session:
            row = (await session.execute(
                select(Transaction, Account.name)
                .join(Account, Account.id == Transaction.account_id)
                .where(
                    Transaction.id == transaction_id,
                    Transaction.user_id == user_id,
                )
            )).first()

        if row is None:
            raise NotFoundError("Transaction not found.")
        return self._to_view(*row)

    async def list(
        self,
        user_id: int,
        filters: Any = None,
    ) -> list[TransactionView]:
        """
        The user's transactions, newest date first, then newest id first.

        Filters are optional and AND-combined: inclusive date range,
        type, exact category, exact account.

        Raises:
            ValidationError: a filter value is malformed.
        """
        f = self._validator.parse(TransactionFilters, filters or {})

        stmt = (
            select(Transaction, Account.name)
            .join(Account, Account.id == Transaction.account_id)
            .where(Transaction.user_id == user_id)
        )
        if f.start_date:
            stmt = stmt.where(Transaction.tx_date >= f.start_date)
        if f.end_date:
            stmt = stmt.where(Transaction.tx_date <= f.end_date)
        if f.type:
            stmt = stmt.where(Transaction.type == f.type.value)
        if f.category:
            stmt = stmt.where(Transaction.category == f.category)
        if f.account_id:
            stmt = stmt.where(Transaction.account_id == f.account_id)
        stmt = stmt.order_by(Transaction.tx_date.desc(), Transaction.id.desc())

        async with self._db.reader() as session:
            rows = (await session.execute(stmt)).all()

        return [self._to_view(tx, account_name) for tx, account_name in rows]

    @staticmethod
    def _to_view(tx: Transaction, account_name: str) -> TransactionView:
        return TransactionView(
            id=tx.id,
            account_id=tx.account_id,
            account_name=account_name,
            type=tx.type,
            category=tx.category,
            description=tx.description,
            amount=tx.amount,
            date=tx.tx_date,
            created_at=tx.created_at,
        )
