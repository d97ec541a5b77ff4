"""
Monthly budget limits.

A budget is keyed by (user, month, category) and only ever upserted:
setting a limit for an existing key replaces the limit.
"""

from typing import Any, Optional

from sqlalchemy import func
from sqlalchemy.dialects.sqlite import insert

from finledger.errors import NotFoundError
from finledger.models.ledger import BudgetSet
from finledger.store import Database, MonthlyBudget, User
from finledger.validation import PayloadValidator


class BudgetManager:
    """Create-or-replace monthly category limits."""

    def __init__(
        self,
        database: Database,
        validator: Optional[PayloadValidator] = None,
    ):
        self._db = database
        self._validator = validator or PayloadValidator()

    async def set_budget(self, user_id: int, payload: Any) -> BudgetSet:
        """
        Upsert the limit for (month, category).

        Returns:
            The validated budget as stored.

        Raises:
            ValidationError: bad month, empty category or non-positive limit.
            NotFoundError: the user does not exist.
            StoreFailure: the store refused the write.
        """
        budget = self._validator.parse(BudgetSet, payload)

        stmt = insert(MonthlyBudget).values(
            user_id=user_id,
            month=budget.month,
            category=budget.category,
            limit_amount=budget.limit_amount,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "month", "category"],
            set_={
                "limit_amount": stmt.excluded.limit_amount,
                "updated_at": func.now(),
            },
        )

        async with self._db.unit_of_work() as session:
            if await session.get(User, user_id) is None:
                raise NotFoundError("User not found.")
            await session.execute(stmt)

        return budget
