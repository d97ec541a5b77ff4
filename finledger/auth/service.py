"""
Registration and login.

Authentication resolves an email/password pair to a user id. The
ledger trusts the id it is given afterwards, but still re-checks row
ownership on every call.
"""

from typing import Any, Optional

from sqlalchemy import select

from finledger.auth.credentials import hash_password, verify_password
from finledger.config import LedgerSettings, get_settings
from finledger.errors import AuthenticationError, DuplicateError, ValidationError
from finledger.ledger.balance import add_account
from finledger.models.ledger import (
    AccountCreate,
    AccountType,
    LoginRequest,
    RegisterRequest,
    UserView,
)
from finledger.store import Database, User
from finledger.validation import PayloadValidator


class AuthService:
    """
    Creates users and checks their credentials.
    
    Registration also opens the user's default checking account in the
    same unit of work, so a user never exists without one.
    """
    
    def __init__(
        self,
        database: Database,
        settings: Optional[LedgerSettings] = None,
        validator: Optional[PayloadValidator] = None,
    ):
        self._db = database
        self._settings = settings or get_settings().ledger
        self._validator = validator or PayloadValidator()
    
    async def register(self, payload: Any) -> tuple[UserView, int]:
        """
        Create a user and their default account.
        
        Returns:
            (user, default_account_id)
        
        Raises:
            ValidationError: missing field or short password.
            DuplicateError: email already registered.
            StoreFailure: the store refused the write.
        """
        request = self._validator.parse(RegisterRequest, payload)
        
        if len(request.password) < self._settings.min_password_length:
            raise ValidationError(
                f"Password must have at least {self._settings.min_password_length} characters."
            )
        
        async with self._db.unit_of_work() as session:
            existing = await session.scalar(
                select(User.id).where(User.email == request.email)
            )
            if existing is not None:
                raise DuplicateError("Email already registered.")
            
            user = User(
                name=request.name,
                email=request.email,
                password_hash=hash_password(request.password),
            )
            session.add(user)
            await session.flush()
            
            account = await add_account(session, user.id, AccountCreate(
                name=self._settings.default_account_name,
                type=AccountType.CHECKING,
            ))
            
            return UserView(id=user.id, name=user.name, email=user.email), account.id
    
    async def login(self, payload: Any) -> UserView:
        """
        Resolve an email/password pair to a user.
        
        Raises:
            AuthenticationError: unknown email or wrong password (indistinguishable).
        """
        request, _ = self._validator.check(LoginRequest, payload)
        if request is None or not request.email or not request.password:
            raise AuthenticationError("Invalid credentials.")
        
        async with self._db.reader() as session:
            user = await session.scalar(
                select(User).where(User.email == request.email)
            )
        
        if user is None or not verify_password(request.password, user.password_hash):
            raise AuthenticationError("Invalid credentials.")
        
        return UserView.model_validate(user)
