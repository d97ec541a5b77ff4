"""Tests for payload validation messages."""

import pytest
from decimal import Decimal

from finledger.errors import ValidationError
from finledger.models import MAX_AMOUNT, AccountCreate, BudgetSet, TransactionCreate
from finledger.validation import PayloadValidator


@pytest.fixture
def validator():
    return PayloadValidator()


class TestPayloadValidator:
    """Tests for PayloadValidator.check and parse."""

    def test_valid_payload(self, validator):
        """Test that a good mapping comes back typed with no issues."""
        account, issues = validator.check(AccountCreate, {"name": "Cash", "type": "cash"})
        assert issues == []
        assert account.initial_balance == Decimal("0.00")

    def test_model_instance_passes_through(self, validator):
        """Test that an already built model is returned as-is."""
        account = AccountCreate(name="Cash", type="cash")
        parsed, issues = validator.check(AccountCreate, account)
        assert parsed is account
        assert issues == []

    def test_non_mapping_payload(self, validator):
        """Test that lists and strings are rejected outright."""
        parsed, issues = validator.check(AccountCreate, ["Cash", "cash"])
        assert parsed is None
        assert issues[0].issue_type == "invalid_payload"

    def test_missing_fields_use_labels(self, validator):
        """Test the message for missing camelCase fields."""
        with pytest.raises(ValidationError) as exc_info:
            validator.parse(TransactionCreate, {
                "type": "expense",
                "category": "Lazer",
                "amount": "10",
                "date": "2024-01-01",
            })
        assert exc_info.value.message == "Account is required."
        assert exc_info.value.issues[0].field == "accountId"

    def test_none_payload_reports_required(self, validator):
        """Test that no payload at all is a validation error, not a crash."""
        with pytest.raises(ValidationError) as exc_info:
            validator.parse(AccountCreate, None)
        assert "is required" in exc_info.value.message

    def test_blank_category_is_required(self, validator):
        """Test that whitespace-only strings count as missing."""
        with pytest.raises(ValidationError) as exc_info:
            validator.parse(TransactionCreate, {
                "accountId": 1,
                "type": "expense",
                "category": "   ",
                "amount": "10",
                "date": "2024-01-01",
            })
        assert exc_info.value.message == "Category is required."

    def test_non_positive_amount_message(self, validator):
        """Test the message for a zero amount."""
        with pytest.raises(ValidationError) as exc_info:
            validator.parse(TransactionCreate, {
                "accountId": 1,
                "type": "income",
                "category": "Salario",
                "amount": 0,
                "date": "2024-01-01",
            })
        assert exc_info.value.message == "Amount must be greater than zero."

    def test_unknown_type_message(self, validator):
        """Test the message for a type outside the closed set."""
        with pytest.raises(ValidationError) as exc_info:
            validator.parse(TransactionCreate, {
                "accountId": 1,
                "type": "transfer",
                "category": "Outros",
                "amount": 5,
                "date": "2024-01-01",
            })
        assert exc_info.value.message == "Type is not valid."

    def test_bad_date_message(self, validator):
        """Test the message for an unparseable date."""
        with pytest.raises(ValidationError) as exc_info:
            validator.parse(TransactionCreate, {
                "accountId": 1,
                "type": "income",
                "category": "Outros",
                "amount": 5,
                "date": "yesterday",
            })
        assert exc_info.value.message == "Date is not valid."

    def test_month_format_message(self, validator):
        """Test the message for a malformed budget month."""
        with pytest.raises(ValidationError) as exc_info:
            validator.parse(BudgetSet, {"month": "06/2024", "category": "Lazer", "limitAmount": 10})
        assert exc_info.value.message == "Month must use the YYYY-MM format."

    def test_own_validator_message_is_kept(self, validator):
        """Test that custom validator messages lose pydantic's prefix."""
        with pytest.raises(ValidationError) as exc_info:
            validator.parse(TransactionCreate, {
                "accountId": 1,
                "type": "income",
                "category": "Outros",
                "amount": "0.001",
                "date": "2024-01-01",
            })
        assert exc_info.value.message == "Amount must be at least 0.01"

    def test_amount_out_of_range_message(self, validator):
        """Test that amounts past the storable range are rejected by name."""
        with pytest.raises(ValidationError) as exc_info:
            validator.parse(TransactionCreate, {
                "accountId": 1,
                "type": "income",
                "category": "Outros",
                "amount": "100000000000000000000",
                "date": "2024-01-01",
            })
        assert exc_info.value.message == "Amount is out of range."

    def test_opening_balance_range_is_symmetric(self, validator):
        """Test both bounds of the opening balance."""
        for balance in ("1e20", "-1e20"):
            with pytest.raises(ValidationError) as exc_info:
                validator.parse(AccountCreate, {"name": "Card", "type": "credit", "initialBalance": balance})
            assert exc_info.value.message == "Initial balance is out of range."

        account = validator.parse(AccountCreate, {
            "name": "Card",
            "type": "credit",
            "initialBalance": str(-MAX_AMOUNT),
        })
        assert account.initial_balance == -MAX_AMOUNT
