"""
Core Ledger Models for KhaataKitab

These models define the strict schemas for all data flowing through the system.
They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Be serializable for storage and logging
4. Support the audit trail

DESIGN DECISION: Transactions are immutable once created. Corrections are
made by deleting and re-entering, never by editing in place.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
)

from khaatakitab.models.alert import Alert


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of money for a transaction."""
    INCOME = "income"
    EXPENSE = "expense"


# =============================================================================
# CORE LEDGER MODEL
# =============================================================================

class Transaction(BaseModel):
    """
    A single recorded income or expense.

    The ledger is an insertion-ordered list of these. Display order is
    newest-first; trend computations order by `timestamp`.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(
        default_factory=lambda: str(uuid4()),
        min_length=1,
        description="Opaque unique transaction ID"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        decimal_places=2,
        description="Amount in INR (always positive, direction is in `type`)"
    )
    type: TransactionType = Field(
        ...,
        description="income or expense"
    )
    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Free-text category (e.g. Sales, Rent)"
    )
    date: dt.date = Field(
        ...,
        description="Calendar date of the transaction"
    )
    created_at: dt.datetime = Field(
        default_factory=dt.datetime.utcnow,
        description="When the transaction was recorded"
    )

    @computed_field
    @property
    def timestamp(self) -> int:
        """Epoch milliseconds of the transaction date (UTC midnight)."""
        midnight = dt.datetime.combine(self.date, dt.time.min, tzinfo=dt.timezone.utc)
        return int(midnight.timestamp() * 1000)

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE


# =============================================================================
# DERIVED MODELS
# =============================================================================

class MonthlyBucket(BaseModel):
    """
    One month's aggregated totals.

    NOTE: `month` is a short month label ("Jan") without the year, so the
    same month of different years shares one bucket.
    """

    month: str = Field(
        ...,
        description="Short month label, or 'No data' for the empty sentinel"
    )
    income: Decimal = Field(default=Decimal("0"), ge=0)
    expenses: Decimal = Field(default=Decimal("0"), ge=0)


class Prediction(BaseModel):
    """Forecast for the next period. Values are whole rupees."""

    income: int = 0
    expenses: int = 0
    profit: int = 0

    @classmethod
    def zero(cls) -> "Prediction":
        return cls(income=0, expenses=0, profit=0)


class LedgerSnapshot(BaseModel):
    """
    Materialized ledger state handed to the alert engine.

    Totals are always recomputed from `transactions` so that
    balance == total_income - total_expenses holds by construction.
    """
    model_config = ConfigDict(frozen=True)

    transactions: list[Transaction] = Field(default_factory=list)

    @computed_field
    @property
    def total_income(self) -> Decimal:
        return sum(
            (t.amount for t in self.transactions if t.is_income),
            Decimal("0"),
        )

    @computed_field
    @property
    def total_expenses(self) -> Decimal:
        return sum(
            (t.amount for t in self.transactions if t.is_expense),
            Decimal("0"),
        )

    @computed_field
    @property
    def current_balance(self) -> Decimal:
        return self.total_income - self.total_expenses

    @classmethod
    def from_transactions(cls, transactions: list[Transaction]) -> "LedgerSnapshot":
        return cls(transactions=list(transactions))


class DashboardSummary(BaseModel):
    """Everything the dashboard screen needs, computed in one pass."""

    total_income: Decimal
    total_expenses: Decimal
    current_balance: Decimal
    net_profit: Decimal
    transaction_count: int = Field(ge=0)
    monthly_series: list[MonthlyBucket]
    prediction: Prediction
    alerts: list[Alert] = Field(default_factory=list)
    recent_transactions: list[Transaction] = Field(
        default_factory=list,
        description="Newest first"
    )


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class TransactionInput(BaseModel):
    """
    Raw form input for a new transaction.

    Looser than `Transaction`: nothing here is trusted until the
    validator has looked at it.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    amount: Optional[Decimal] = None
    type: TransactionType
    category: Optional[str] = None
    date: Optional[dt.date] = None


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'suspicious_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """Result of validating a transaction form submission."""

    validated_at: dt.datetime = Field(
        default_factory=dt.datetime.utcnow
    )
    is_valid: bool = Field(
        ...,
        description="True when there are no error-level issues"
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[str]:
        return [i.message for i in self.issues if i.severity == "warning"]
