"""
Payload Validation

Turns raw presentation-layer payloads (plain mappings) into typed
request models. Pydantic does the structural work; this module turns
its errors into ``ValidationIssue`` records and a single human-readable
message, and raises ``finledger.errors.ValidationError``.

Validation never fixes input silently beyond trimming whitespace and
rounding money to cents.
"""

from collections.abc import Mapping
from typing import Any, Optional, TypeVar

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from finledger.errors import ValidationError


ModelT = TypeVar("ModelT", bound=BaseModel)


# Display labels for payload keys (both snake_case names and camelCase aliases)
FIELD_LABELS = {
    "id": "Transaction",
    "account_id": "Account",
    "accountId": "Account",
    "type": "Type",
    "category": "Category",
    "description": "Description",
    "amount": "Amount",
    "date": "Date",
    "name": "Name",
    "email": "Email",
    "password": "Password",
    "initial_balance": "Initial balance",
    "initialBalance": "Initial balance",
    "month": "Month",
    "limit_amount": "Limit",
    "limitAmount": "Limit",
    "start_date": "Start date",
    "startDate": "Start date",
    "end_date": "End date",
    "endDate": "End date",
}


class ValidationIssue(BaseModel):
    """A single validation issue found."""
    
    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Pydantic error type (e.g., 'missing', 'greater_than')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )


def _describe(field: str, error_type: str, raw_message: str) -> str:
    label = FIELD_LABELS.get(field, field.replace("_", " ").capitalize() or "Payload")
    
    if error_type in ("missing", "string_too_short"):
        return f"{label} is required."
    if error_type == "greater_than":
        return f"{label} must be greater than zero."
    if error_type in ("less_than_equal", "greater_than_equal"):
        return f"{label} is out of range."
    if error_type == "string_pattern_mismatch" and field == "month":
        return "Month must use the YYYY-MM format."
    if error_type == "enum":
        return f"{label} is not valid."
    if error_type == "finite_number" or error_type.startswith(("date", "decimal", "int")):
        return f"{label} is not valid."
    if error_type == "value_error":
        # Raised by our own field validators; drop pydantic's "Value error, " prefix
        return raw_message.split(", ", 1)[-1]
    return f"{label}: {raw_message}"


class PayloadValidator:
    """
    Validates inbound payloads against request models.
    
    Accepts a mapping (the presentation layer's payload) or an already
    built model instance, which is passed through untouched.
    """
    
    def check(
        self,
        model: type[ModelT],
        payload: Any,
    ) -> tuple[Optional[ModelT], list[ValidationIssue]]:
        """
        Validate without raising.
        
        Returns: (model_or_None, list_of_issues)
        """
        if isinstance(payload, model):
            return payload, []
        
        if payload is None:
            payload = {}
        
        if not isinstance(payload, Mapping):
            return None, [ValidationIssue(
                field="payload",
                issue_type="invalid_payload",
                message="Payload must be a mapping of field names to values.",
            )]
        
        try:
            return model.model_validate(dict(payload)), []
        except PydanticValidationError as e:
            issues = []
            for err in e.errors():
                field = ".".join(str(part) for part in err["loc"]) or "payload"
                issues.append(ValidationIssue(
                    field=field,
                    issue_type=err["type"],
                    message=_describe(field, err["type"], err["msg"]),
                ))
            return None, issues
    
    def parse(self, model: type[ModelT], payload: Any) -> ModelT:
        """
        Validate and return the typed model.
        
        Raises:
            ValidationError: with the first issue's message and all issues attached.
        """
        parsed, issues = self.check(model, payload)
        if parsed is None:
            raise ValidationError(issues[0].message, issues=issues)
        return parsed
