"""
Main Orchestrator for finledger

This module ties the ledger components together and exposes the
request/response interface the presentation layer calls:

1. Authentication (register, login)
2. Accounts (create, list)
3. Transactions (create, update, delete, list)
4. Budgets (set, list with status)
5. Aggregates (summary, trend)

Write operations always answer with an ``OperationResult``: ``ok=True``
when everything was applied, ``ok=False`` with a message when nothing
was. Every call gets a correlation id that ties its log records together.
"""

from datetime import date
from typing import Any, Awaitable, Callable, Optional
from uuid import UUID

from finledger.auth import AuthService
from finledger.config import Settings, get_settings
from finledger.errors import (
    AuthenticationError,
    DuplicateError,
    NotFoundError,
    StoreFailure,
    ValidationError,
)
from finledger.events import EventLogger, configure_logging, create_correlation_id
from finledger.ledger import AccountLedger, BudgetManager, TransactionManager
from finledger.models.ledger import (
    CATEGORY_SUGGESTIONS,
    AccountCreate,
    AccountView,
    AuthResult,
    BudgetStatus,
    OperationResult,
    Summary,
    TransactionCreate,
    TransactionType,
    TransactionUpdate,
    TransactionView,
    TrendPoint,
)
from finledger.queries import AggregationEngine
from finledger.store import Database
from finledger.validation import PayloadValidator


class FinanceService:
    """
    The ledger engine's inbound interface.

    Each method takes the authenticated ``user_id`` (established by a
    prior ``login``) plus a plain payload mapping.
    """

    def __init__(
        self,
        database: Database,
        settings: Optional[Settings] = None,
        event_logger: Optional[EventLogger] = None,
        clock: Callable[[], date] = date.today,
    ):
        settings = settings or get_settings()
        ledger_settings = settings.ledger
        validator = PayloadValidator()

        self._db = database
        self._validator = validator
        self._events = event_logger or EventLogger()
        self._auth = AuthService(database, ledger_settings, validator)
        self._accounts = AccountLedger(database, validator)
        self._transactions = TransactionManager(database, validator)
        self._budgets = BudgetManager(database, validator)
        self._aggregates = AggregationEngine(database, ledger_settings, clock)

    @property
    def database(self) -> Database:
        return self._db

    # -------------------------------------------------------------------------
    # Authentication
    # -------------------------------------------------------------------------

    async def register(self, payload: Any) -> AuthResult:
        correlation_id = create_correlation_id()
        try:
            user, account_id = await self._auth.register(payload)
        except (ValidationError, DuplicateError) as e:
            self._events.log_rejected("register", e, correlation_id=correlation_id)
            return AuthResult(ok=False, message=e.message)
        except StoreFailure as e:
            self._events.log_store_failure("register", str(e), correlation_id=correlation_id)
            return AuthResult(ok=False, message=StoreFailure.public_message)

        self._events.log_user_registered(user.id, account_id, correlation_id)
        return AuthResult(ok=True, user=user)

    async def login(self, payload: Any) -> AuthResult:
        correlation_id = create_correlation_id()
        try:
            user = await self._auth.login(payload)
        except AuthenticationError as e:
            self._events.log_login(None, succeeded=False, correlation_id=correlation_id)
            return AuthResult(ok=False, message=e.message)
        except StoreFailure as e:
            self._events.log_store_failure("login", str(e), correlation_id=correlation_id)
            return AuthResult(ok=False, message=StoreFailure.public_message)

        self._events.log_login(user.id, succeeded=True, correlation_id=correlation_id)
        return AuthResult(ok=True, user=user)

    # -------------------------------------------------------------------------
    # Accounts
    # -------------------------------------------------------------------------

    async def create_account(self, user_id: int, payload: Any) -> OperationResult:
        correlation_id = create_correlation_id()

        async def run() -> int:
            account = self._validator.parse(AccountCreate, payload)
            account_id = await self._accounts.open_account(user_id, account)
            self._events.log_account_created(
                user_id,
                account_id,
                account.type.value,
                str(account.initial_balance),
                correlation_id,
            )
            return account_id

        return await self._write("create_account", user_id, correlation_id, run)

    async def list_accounts(self, user_id: int) -> list[AccountView]:
        return await self._accounts.list_accounts(user_id)

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    async def create_transaction(self, user_id: int, payload: Any) -> OperationResult:
        correlation_id = create_correlation_id()

        async def run() -> int:
            tx = self._validator.parse(TransactionCreate, payload)
            tx_id = await self._transactions.create(user_id, tx)
            self._events.log_transaction_created(
                user_id,
                tx_id,
                tx.type.value,
                str(tx.amount),
                tx.account_id,
                correlation_id,
            )
            return tx_id

        return await self._write("create_transaction", user_id, correlation_id, run)

    async def update_transaction(self, user_id: int, payload: Any) -> OperationResult:
        correlation_id = create_correlation_id()

        async def run() -> None:
            tx = self._validator.parse(TransactionUpdate, payload)
            old_account_id = await self._transactions.update(user_id, tx)
            self._events.log_transaction_updated(
                user_id,
                tx.id,
                old_account_id,
                tx.account_id,
                correlation_id,
            )

        return await self._write("update_transaction", user_id, correlation_id, run)

    async def delete_transaction(self, user_id: int, tx_id: Any) -> OperationResult:
        correlation_id = create_correlation_id()

        async def run() -> None:
            await self._transactions.delete(user_id, tx_id)
            self._events.log_transaction_deleted(user_id, int(tx_id), correlation_id)

        return await self._write("delete_transaction", user_id, correlation_id, run)

    async def list_transactions(
        self,
        user_id: int,
        filters: Any = None,
    ) -> list[TransactionView]:
        """Malformed filters yield an empty list."""
        try:
            return await self._transactions.list(user_id, filters)
        except ValidationError as e:
            self._events.log_rejected("list_transactions", e, user_id=user_id)
            return []

    # -------------------------------------------------------------------------
    # Budgets and aggregates
    # -------------------------------------------------------------------------

    async def set_budget(self, user_id: int, payload: Any) -> OperationResult:
        correlation_id = create_correlation_id()

        async def run() -> None:
            budget = await self._budgets.set_budget(user_id, payload)
            self._events.log_budget_set(
                user_id,
                budget.month,
                budget.category,
                str(budget.limit_amount),
                correlation_id,
            )

        return await self._write("set_budget", user_id, correlation_id, run)

    async def list_budgets(self, user_id: int, month: str) -> list[BudgetStatus]:
        return await self._aggregates.budget_status(user_id, month)

    async def get_summary(self, user_id: int) -> Summary:
        return await self._aggregates.summary(user_id)

    async def get_trend(self, user_id: int) -> list[TrendPoint]:
        return await self._aggregates.trend(user_id)

    def suggest_categories(self, tx_type: str) -> list[str]:
        """Default category names for a transaction type; empty for unknown types."""
        try:
            return list(CATEGORY_SUGGESTIONS[TransactionType(tx_type)])
        except ValueError:
            return []

    # -------------------------------------------------------------------------

    async def _write(
        self,
        operation: str,
        user_id: int,
        correlation_id: UUID,
        run: Callable[[], Awaitable[Optional[int]]],
    ) -> OperationResult:
        """Run one write and fold its outcome into an OperationResult."""
        try:
            created_id = await run()
        except (ValidationError, NotFoundError) as e:
            self._events.log_rejected(operation, e, user_id, correlation_id)
            return OperationResult(ok=False, message=e.message)
        except StoreFailure as e:
            self._events.log_store_failure(operation, str(e), user_id, correlation_id)
            return OperationResult(ok=False, message=StoreFailure.public_message)

        return OperationResult(ok=True, id=created_id)


async def create_app_components(
    settings: Optional[Settings] = None,
    database_url: Optional[str] = None,
) -> FinanceService:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to use; defaults to the cached environment settings.
        database_url: Overrides the configured database URL (e.g. for tests).

    Returns:
        A ready FinanceService whose tables exist.
    """
    settings = settings or get_settings()
    configure_logging(settings.app.log_level)

    database = Database(
        url=database_url or settings.database.url,
        echo=settings.database.echo,
    )
    await database.create_all()

    return FinanceService(database, settings=settings)
