"""
Tests for KhaataKitab

Test strategy:
1. Unit tests for individual components (models, analytics, validators)
2. Integration tests for flows (with in-memory storage)
3. No real network calls in tests (use fakes)
"""

import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from pydantic import ValidationError

from khaatakitab.models.alert import (
    ALERT_PRESENTATION,
    PRIORITY_BADGE_VARIANT,
    AlertPriority,
    AlertType,
    badge_variant_for,
    presentation_for,
)
from khaatakitab.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from khaatakitab.models.ledger import (
    LedgerSnapshot,
    Prediction,
    Transaction,
    TransactionType,
    ValidationIssue,
    ValidationResult,
)
from khaatakitab.models.notification import (
    DeliveryReport,
    Notification,
    NotificationPayload,
    NotificationPreferences,
    NotificationType,
)


def make_transaction(amount, type="income", category="Sales", on=date(2025, 1, 15)):
    return Transaction(
        amount=Decimal(str(amount)),
        type=TransactionType(type),
        category=category,
        date=on,
    )


class TestTransactionModel:
    """Tests for the Transaction model."""

    def test_transaction_creation(self):
        """Test Transaction model creation."""
        transaction = make_transaction("1500.50", "expense", "Rent")
        assert transaction.amount == Decimal("1500.50")
        assert transaction.type == TransactionType.EXPENSE
        assert transaction.is_expense
        assert not transaction.is_income
        assert transaction.id

    def test_transaction_ids_are_unique(self):
        """Two transactions never share a generated id."""
        assert make_transaction(100).id != make_transaction(100).id

    def test_transaction_strips_whitespace(self):
        """Test that whitespace is stripped from the category."""
        transaction = make_transaction(100, category="  Sales  ")
        assert transaction.category == "Sales"

    @pytest.mark.parametrize("amount", ["0", "-100"])
    def test_transaction_rejects_non_positive_amount(self, amount):
        """Amounts must be strictly positive; direction lives in `type`."""
        with pytest.raises(ValidationError):
            make_transaction(amount)

    def test_transaction_rejects_empty_category(self):
        with pytest.raises(ValidationError):
            make_transaction(100, category="   ")

    def test_transaction_is_immutable(self):
        """Transactions are never edited in place."""
        transaction = make_transaction(100)
        with pytest.raises(ValidationError):
            transaction.amount = Decimal("200")

    def test_timestamp_is_utc_midnight_in_ms(self):
        transaction = make_transaction(100, on=date(2025, 1, 1))
        assert transaction.timestamp == 1735689600000

    def test_json_round_trip_keeps_decimal_amount(self):
        transaction = make_transaction("99.99")
        restored = Transaction.model_validate(transaction.model_dump(mode="json"))
        assert restored == transaction


class TestLedgerSnapshot:
    """Totals are always derived from the transaction list."""

    def test_empty_snapshot(self):
        snapshot = LedgerSnapshot.from_transactions([])
        assert snapshot.total_income == 0
        assert snapshot.total_expenses == 0
        assert snapshot.current_balance == 0

    def test_totals_and_balance(self):
        snapshot = LedgerSnapshot.from_transactions([
            make_transaction("1000.10", "income"),
            make_transaction("250.05", "expense"),
            make_transaction("500", "income"),
        ])
        assert snapshot.total_income == Decimal("1500.10")
        assert snapshot.total_expenses == Decimal("250.05")
        assert snapshot.current_balance == Decimal("1250.05")

    def test_balance_can_be_negative(self):
        snapshot = LedgerSnapshot.from_transactions([make_transaction(300, "expense")])
        assert snapshot.current_balance == Decimal("-300")


class TestPrediction:

    def test_zero_prediction(self):
        assert Prediction.zero() == Prediction(income=0, expenses=0, profit=0)


class TestAlertPresentation:
    """Every alert kind and priority has a presentation entry."""

    def test_every_alert_type_has_presentation(self):
        assert set(ALERT_PRESENTATION) == set(AlertType)

    def test_every_priority_has_badge_variant(self):
        assert set(PRIORITY_BADGE_VARIANT) == set(AlertPriority)

    def test_presentation_values(self):
        assert presentation_for(AlertType.WARNING).icon == "⚠️"
        assert presentation_for(AlertType.DANGER).color == "red"
        assert presentation_for(AlertType.INFO).label == "Tip"
        assert presentation_for(AlertType.SUCCESS).color == "green"

    def test_badge_variants(self):
        assert badge_variant_for(AlertPriority.HIGH) == "destructive"
        assert badge_variant_for(AlertPriority.MEDIUM) == "default"
        assert badge_variant_for(AlertPriority.LOW) == "secondary"


class TestNotificationModels:
    """Tests for notification payloads and preferences."""

    def test_payload_icon_per_type(self):
        icons = {
            NotificationType.INCOME: "💰",
            NotificationType.EXPENSE: "⚠️",
            NotificationType.INSIGHT: "📊",
            NotificationType.REMINDER: "🔔",
        }
        for notification_type, icon in icons.items():
            payload = NotificationPayload(type=notification_type, title="T", message="M")
            assert payload.icon == icon

    def test_sms_text(self):
        payload = NotificationPayload(
            type=NotificationType.INCOME,
            title="Transaction added",
            message="₹500 income recorded",
        )
        assert payload.sms_text() == "Transaction added: ₹500 income recorded"

    def test_notification_from_payload_starts_unread(self):
        payload = NotificationPayload(
            type=NotificationType.EXPENSE,
            title="Rent",
            message="Paid",
            amount=Decimal("5000"),
        )
        notification = Notification.from_payload(payload)
        assert notification.is_read is False
        assert notification.amount == Decimal("5000")
        assert notification.id is not None

    def test_default_preferences(self):
        preferences = NotificationPreferences()
        assert preferences.app_notifications_enabled is True
        assert preferences.sms_alerts_enabled is False
        assert preferences.expense_threshold is None
        assert all(preferences.allows(t) for t in NotificationType)
        assert preferences.can_send_sms is False

    def test_phone_number_normalized(self):
        preferences = NotificationPreferences(phone_number="+91 98765-43210")
        assert preferences.phone_number == "+919876543210"

    def test_phone_number_too_short_rejected(self):
        with pytest.raises(ValidationError):
            NotificationPreferences(phone_number="12345")

    def test_empty_phone_number_becomes_none(self):
        assert NotificationPreferences(phone_number="").phone_number is None

    def test_sms_needs_phone_number(self):
        preferences = NotificationPreferences(sms_alerts_enabled=True)
        assert preferences.can_send_sms is False
        preferences = NotificationPreferences(
            sms_alerts_enabled=True,
            phone_number="9876543210",
        )
        assert preferences.can_send_sms is True

    def test_type_toggles(self):
        preferences = NotificationPreferences(notify_on_insights=False)
        assert not preferences.allows(NotificationType.INSIGHT)
        assert preferences.allows(NotificationType.INCOME)

    def test_delivery_report_ok(self):
        assert DeliveryReport().ok
        assert not DeliveryReport(errors=["sms: down"]).ok


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            description="Test event",
        )
        assert event.event_type == AuditEventType.TRANSACTION_ADDED
        assert event.severity == AuditSeverity.INFO
        assert event.event_id is not None

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        correlation_id = uuid4()
        event = AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            entity_id="tx-1",
            correlation_id=correlation_id,
            description="Test",
        )
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "transaction_deleted"
        assert log_dict["entity_id"] == "tx-1"
        assert log_dict["correlation_id"] == str(correlation_id)

    def test_audit_event_to_record_serializes_details(self):
        event = AuditEvent(
            event_type=AuditEventType.ALERTS_GENERATED,
            description="Test",
            details={"alert_types": ["warning"]},
        )
        assert event.to_record()["details"] == '{"alert_types": ["warning"]}'

    def test_builder_transaction_added(self):
        correlation_id = uuid4()
        event = AuditEventBuilder.transaction_added(
            transaction_id="tx-1",
            transaction_type="expense",
            amount="500.00",
            category="Rent",
            correlation_id=correlation_id,
        )
        assert event.event_type == AuditEventType.TRANSACTION_ADDED
        assert event.entity_type == "transaction"
        assert event.details["category"] == "Rent"
        assert event.is_user_action is True

    def test_builder_sms_failure_has_own_type(self):
        sms = AuditEventBuilder.notification_failed(channel="sms", error_message="down")
        inbox = AuditEventBuilder.notification_failed(channel="inbox", error_message="disk")
        assert sms.event_type == AuditEventType.SMS_FAILED
        assert inbox.event_type == AuditEventType.NOTIFICATION_FAILED
        assert sms.severity == AuditSeverity.ERROR


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_validation_result_has_errors(self):
        result = ValidationResult(
            is_valid=False,
            issues=[
                ValidationIssue(
                    field="amount",
                    issue_type="missing",
                    message="Amount is required",
                    severity="error",
                ),
                ValidationIssue(
                    field="date",
                    issue_type="suspicious_date",
                    message="Old date",
                    severity="warning",
                ),
            ],
        )
        assert result.has_errors
        assert result.error_count == 1
        assert result.warnings == ["Old date"]

    def test_invalid_severity_rejected(self):
        with pytest.raises(ValidationError):
            ValidationIssue(
                field="amount",
                issue_type="missing",
                message="x",
                severity="fatal",
            )
