"""
Aggregation Engine

Derived figures computed on every read from stored transactions and
accounts. Nothing here is cached or written back.

- summary: all-time income and expense totals, transaction count, and
  the sum of current account balances
- budget_status: spend against each budgeted category for one month
- trend: income / expense / net per month over a trailing window
"""

from datetime import date
from decimal import Decimal
from typing import Callable, Optional

from sqlalchemy import and_, case, func, select, type_coerce

from finledger.config import LedgerSettings, get_settings
from finledger.models.ledger import (
    BudgetLevel,
    BudgetStatus,
    Summary,
    TransactionType,
    TrendPoint,
)
from finledger.queries.periods import month_key, parse_month, shift_month, trailing_months
from finledger.store import Account, Database, Money, MonthlyBudget, Transaction


ZERO = Decimal("0.00")


def _money_sum(expr):
    """SUM(expr) as Money, zero when there are no rows."""
    return type_coerce(func.coalesce(func.sum(expr), 0), Money)


def classify_budget(
    spent: Decimal,
    limit: Decimal,
    warning_percent: float = 80.0,
    exceeded_percent: float = 100.0,
) -> tuple[Decimal, BudgetLevel]:
    """
    Percentage of the limit spent and the resulting level.
    
    A zero limit reports 0% (limits are constrained positive in the store).
    """
    percent = (spent / limit * 100) if limit > 0 else Decimal("0")
    
    if percent >= Decimal(str(exceeded_percent)):
        return percent, BudgetLevel.EXCEEDED
    if percent >= Decimal(str(warning_percent)):
        return percent, BudgetLevel.WARNING
    return percent, BudgetLevel.OK


class AggregationEngine:
    """
    Computes summaries, budget status and the monthly trend.
    
    GUARANTEES:
    - Only the calling user's rows are read
    - Empty data yields zeros, never an error
    - "Today" for the trend window comes from an injectable clock
    """
    
    def __init__(
        self,
        database: Database,
        settings: Optional[LedgerSettings] = None,
        clock: Callable[[], date] = date.today,
    ):
        self._db = database
        self._settings = settings or get_settings().ledger
        self._clock = clock
    
    async def summary(self, user_id: int) -> Summary:
        """
        Headline totals.
        
        ``balance`` sums the accounts' current balances; it is not
        ``income - expense``.
        """
        totals_stmt = select(
            _money_sum(case(
                (Transaction.type == TransactionType.INCOME.value, Transaction.amount),
                else_=0,
            )),
            _money_sum(case(
                (Transaction.type == TransactionType.EXPENSE.value, Transaction.amount),
                else_=0,
            )),
            func.count(Transaction.id),
        ).where(Transaction.user_id == user_id)
        
        balance_stmt = select(
            _money_sum(Account.current_balance)
        ).where(Account.user_id == user_id)
        
        async with self._db.reader() as session:
            income, expense, count = (await session.execute(totals_stmt)).one()
            balance = await session.scalar(balance_stmt)
        
        return Summary(
            income=income or ZERO,
            expense=expense or ZERO,
            balance=balance or ZERO,
            transactions=count or 0,
        )
    
    async def budget_status(self, user_id: int, month: str) -> list[BudgetStatus]:
        """
        Spend against each budget row of ``month`` (YYYY-MM).
        
        Only categories with a budget entry appear, ordered by name.
        A malformed month yields an empty list.
        """
        first_day = parse_month(month)
        if first_day is None:
            return []
        next_first_day = shift_month(first_day, 1)
        
        stmt = (
            select(
                MonthlyBudget.category,
                MonthlyBudget.limit_amount,
                _money_sum(Transaction.amount),
            )
            .select_from(MonthlyBudget)
            .outerjoin(
                Transaction,
                and_(
                    Transaction.user_id == MonthlyBudget.user_id,
                    Transaction.category == MonthlyBudget.category,
                    Transaction.type == TransactionType.EXPENSE.value,
                    Transaction.tx_date >= first_day,
                    Transaction.tx_date < next_first_day,
                ),
            )
            .where(
                MonthlyBudget.user_id == user_id,
                MonthlyBudget.month == month_key(first_day),
            )
            .group_by(MonthlyBudget.id, MonthlyBudget.category, MonthlyBudget.limit_amount)
            .order_by(MonthlyBudget.category.asc())
        )
        
        async with self._db.reader() as session:
            rows = (await session.execute(stmt)).all()
        
        results = []
        for category, limit, spent in rows:
            spent = spent or ZERO
            percent, level = classify_budget(
                spent,
                limit,
                self._settings.budget_warning_percent,
                self._settings.budget_exceeded_percent,
            )
            results.append(BudgetStatus(
                category=category,
                limit=limit,
                spent=spent,
                remaining=limit - spent,
                percent=float(percent),
                status=level,
            ))
        return results
    
    async def trend(self, user_id: int, today: Optional[date] = None) -> list[TrendPoint]:
        """
        Income, expense and net for each month of the trailing window.
        
        The window is ``trend_months`` calendar months ending with the
        current month, oldest first. Months without transactions are zero.
        """
        months = trailing_months(today or self._clock(), self._settings.trend_months)
        window_start = months[0]
        window_end = shift_month(months[-1], 1)
        
        stmt = select(
            Transaction.type,
            Transaction.amount,
            Transaction.tx_date,
        ).where(
            Transaction.user_id == user_id,
            Transaction.tx_date >= window_start,
            Transaction.tx_date < window_end,
        )
        
        async with self._db.reader() as session:
            rows = (await session.execute(stmt)).all()
        
        buckets = {month_key(m): {"income": ZERO, "expense": ZERO} for m in months}
        for tx_type, amount, tx_date in rows:
            bucket = buckets.get(month_key(tx_date))
            if bucket is None:
                continue
            if tx_type == TransactionType.INCOME.value:
                bucket["income"] += amount
            else:
                bucket["expense"] += amount
        
        return [
            TrendPoint(
                month=key,
                income=values["income"],
                expense=values["expense"],
                net=values["income"] - values["expense"],
            )
            for key, values in buckets.items()
        ]
