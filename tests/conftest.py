"""
Shared fixtures.

Every test gets its own SQLite file under ``tmp_path``; nothing is
shared between tests and no real user data is touched.
"""

from datetime import date
import pytest
import pytest_asyncio
from sqlalchemy import select

from finledger.auth import AuthService
from finledger.config import LedgerSettings, get_settings
from finledger.ledger import AccountLedger, BudgetManager, TransactionManager, signed_amount
from finledger.queries import AggregationEngine
from finledger.store import Account, Database, Transaction


FIXED_TODAY = date(2024, 6, 15)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keep tests away from a developer's .env and FINLEDGER_* variables."""
    monkeypatch.chdir(tmp_path)
    for name in ("FINLEDGER_DB_URL", "FINLEDGER_DB_ECHO", "FINLEDGER_TREND_MONTHS",
                 "FINLEDGER_DEFAULT_ACCOUNT_NAME", "FINLEDGER_MIN_PASSWORD_LENGTH",
                 "FINLEDGER_BUDGET_WARNING_PERCENT", "FINLEDGER_BUDGET_EXCEEDED_PERCENT",
                 "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest_asyncio.fixture
async def database(tmp_path):
    db = Database(url=f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}", echo=False)
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
def fixed_today():
    return FIXED_TODAY


@pytest.fixture
def ledger_settings():
    return LedgerSettings()


@pytest.fixture
def auth(database, ledger_settings):
    return AuthService(database, ledger_settings)


@pytest.fixture
def accounts(database):
    return AccountLedger(database)


@pytest.fixture
def transactions(database):
    return TransactionManager(database)


@pytest.fixture
def budgets(database):
    return BudgetManager(database)


@pytest.fixture
def aggregates(database, ledger_settings):
    return AggregationEngine(database, ledger_settings, clock=lambda: FIXED_TODAY)


@pytest_asyncio.fixture
async def alice(auth):
    """(user, default_account_id) for a registered user."""
    return await auth.register({
        "name": "Alice",
        "email": "alice@example.com",
        "password": "secret123",
    })


@pytest_asyncio.fixture
async def bob(auth):
    return await auth.register({
        "name": "Bob",
        "email": "bob@example.com",
        "password": "hunter22",
    })


@pytest.fixture
def check_invariant(database):
    """
    Returns a coroutine asserting, for every account of the store,
    current_balance == initial_balance + signed sum of its transactions.
    """
    async def _check():
        async with database.reader() as session:
            account_rows = (await session.scalars(select(Account))).all()
            tx_rows = (await session.scalars(select(Transaction))).all()

        expected = {a.id: a.initial_balance for a in account_rows}
        for tx in tx_rows:
            expected[tx.account_id] += signed_amount(tx.type, tx.amount)

        for account in account_rows:
            assert account.current_balance == expected[account.id], (
                f"account {account.id}: stored {account.current_balance}, "
                f"expected {expected[account.id]}"
            )
        return {a.id: a.current_balance for a in account_rows}

    return _check
