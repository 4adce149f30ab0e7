"""
Transaction Form Validation

DESIGN DECISION: Validation happens in two distinct stages:

STAGE 1 - SCHEMA VALIDATION:
- Required field presence
- Positive amount, at most two decimal places
- Category length

STAGE 2 - SEMANTIC VALIDATION:
- Future date detection
- Unusually old dates
- Absurd amount detection

Stage 2 only runs when stage 1 passes. Errors block the entry;
warnings are shown but the entry can still be saved.

IMPORTANT: Validation NEVER silently fixes issues.
It reports them to the user.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from khaatakitab.config import AppSettings, get_settings
from khaatakitab.models.ledger import (
    Transaction,
    TransactionInput,
    ValidationIssue,
    ValidationResult,
)


MAX_CATEGORY_LENGTH = 100
OLD_DATE_WARNING_DAYS = 365 * 2


class TransactionRejectedError(ValueError):
    """Form input failed validation; `result` lists the issues."""

    def __init__(self, result: ValidationResult):
        self.result = result
        messages = "; ".join(i.message for i in result.issues if i.severity == "error")
        super().__init__(f"Transaction rejected: {messages}")


class TransactionValidator:
    """
    Validates a transaction form submission before it reaches the ledger.
    """

    def __init__(self, settings: Optional[AppSettings] = None):
        self._settings = settings or get_settings().app

    def _validate_schema(
        self,
        form: TransactionInput,
    ) -> list[ValidationIssue]:
        issues = []

        if form.amount is None:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Amount is required",
                severity="error",
                suggested_fix="Enter the amount in rupees",
            ))
        elif form.amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be greater than zero",
                severity="error",
                suggested_fix="Record money going out as an expense, not a negative amount",
            ))
        elif form.amount.as_tuple().exponent < -2:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message="Amount can have at most two decimal places",
                severity="error",
            ))

        if not form.category:
            issues.append(ValidationIssue(
                field="category",
                issue_type="missing",
                message="Category is required",
                severity="error",
                suggested_fix="Pick a category such as Sales or Rent",
            ))
        elif len(form.category) > MAX_CATEGORY_LENGTH:
            issues.append(ValidationIssue(
                field="category",
                issue_type="invalid_value",
                message=f"Category must be at most {MAX_CATEGORY_LENGTH} characters",
                severity="error",
            ))

        if form.date is None:
            issues.append(ValidationIssue(
                field="date",
                issue_type="missing",
                message="Date is required",
                severity="error",
            ))

        return issues

    def _validate_semantic(
        self,
        form: TransactionInput,
        today: date,
    ) -> list[ValidationIssue]:
        issues = []

        max_future_date = today + timedelta(days=self._settings.future_date_tolerance_days)
        if form.date > max_future_date:
            issues.append(ValidationIssue(
                field="date",
                issue_type="future_date",
                message=f"Date ({form.date}) is in the future",
                severity="error",
                suggested_fix="Record transactions on or after the day they happen",
            ))

        if form.date < today - timedelta(days=OLD_DATE_WARNING_DAYS):
            issues.append(ValidationIssue(
                field="date",
                issue_type="suspicious_date",
                message=f"Date ({form.date}) is more than two years ago",
                severity="warning",
                suggested_fix="Please verify the date is correct",
            ))

        max_amount = Decimal(str(self._settings.max_transaction_amount_inr))
        if form.amount > max_amount:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message=f"Amount (₹{form.amount:,.2f}) seems unusually high",
                severity="warning",
                suggested_fix="Please verify this amount is correct",
            ))

        return issues

    def validate(
        self,
        form: TransactionInput,
        today: Optional[date] = None,
    ) -> ValidationResult:
        """
        Run the two-stage validation.

        Args:
            form: The submitted form values
            today: Reference date (defaults to date.today())
        """
        today = today or date.today()

        issues = self._validate_schema(form)
        if not any(issue.severity == "error" for issue in issues):
            issues.extend(self._validate_semantic(form, today))

        return ValidationResult(
            is_valid=not any(issue.severity == "error" for issue in issues),
            issues=issues,
        )

    def to_transaction(
        self,
        form: TransactionInput,
        today: Optional[date] = None,
    ) -> tuple[Transaction, ValidationResult]:
        """
        Validate and build the immutable Transaction.

        Raises:
            TransactionRejectedError: If there are error-level issues
        """
        result = self.validate(form, today=today)
        if not result.is_valid:
            raise TransactionRejectedError(result)

        transaction = Transaction(
            amount=form.amount,
            type=form.type,
            category=form.category,
            date=form.date,
        )
        return transaction, result

    def get_user_friendly_summary(
        self,
        result: ValidationResult,
    ) -> str:
        """
        Generate a user-friendly summary of validation results.
        """
        if result.is_valid and not result.warnings:
            return "✅ All checks passed."

        lines = []

        if result.has_errors:
            lines.append("❌ Please fix the following:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"     💡 {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("⚠️ Please verify:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        return "\n".join(lines)
