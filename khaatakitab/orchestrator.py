"""
Main Orchestrator for KhaataKitab

This module ties together all the components and defines the
end-to-end flows for:
1. Recording (form → validate → append → audit → notify)
2. Dashboard (ledger → totals → monthly series → forecast → alerts)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing reaches the ledger without passing validation
- Notifications are a side-channel: a delivery failure never undoes
  or fails the ledger change that triggered it
- Every mutation is audited

Analytics are pure functions over a snapshot; this module is the only
place that reads the ledger and hands the result to them.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Union
from uuid import UUID

import structlog

from khaatakitab.analytics import (
    aggregate_by_month,
    generate_alerts,
    predict_next_period,
    sort_chronologically,
)
from khaatakitab.audit import AuditLogger, create_correlation_id
from khaatakitab.config import Settings, get_settings
from khaatakitab.formatting import format_inr
from khaatakitab.models.alert import Alert
from khaatakitab.models.ledger import (
    DashboardSummary,
    LedgerSnapshot,
    Transaction,
    TransactionInput,
    TransactionType,
)
from khaatakitab.models.notification import (
    DeliveryReport,
    NotificationPayload,
    NotificationType,
)
from khaatakitab.services.notifications import (
    NotificationService,
    PreferenceService,
    SmsGatewayClient,
    ToastQueueSink,
)
from khaatakitab.services.storage import (
    InMemoryAuditStorage,
    InMemoryLedgerStorage,
    InMemoryNotificationStorage,
    InMemoryPreferenceStorage,
    JsonFileLedgerStorage,
    JsonFileNotificationStorage,
    JsonFilePreferenceStorage,
    LedgerStorageInterface,
    LedgerUnavailableError,
    NotFoundError,
)
from khaatakitab.validation import TransactionRejectedError, TransactionValidator


logger = structlog.get_logger(__name__)


class LedgerFlow:
    """
    Orchestrates every read and write of the transaction ledger.

    Flow for a new entry:
    1. Validate → Two-stage form validation
    2. Append → Persist the immutable Transaction
    3. Audit → Record what was added
    4. Notify → Fire-and-forget income/expense notification
    """

    def __init__(
        self,
        ledger_storage: LedgerStorageInterface,
        validator: Optional[TransactionValidator] = None,
        notification_service: Optional[NotificationService] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._ledger = ledger_storage
        self._validator = validator or TransactionValidator()
        self._notifications = notification_service
        self._audit_logger = audit_logger

    @property
    def validator(self) -> TransactionValidator:
        return self._validator

    async def _log_unavailable(
        self,
        operation: str,
        error: LedgerUnavailableError,
        correlation_id: Optional[UUID],
    ) -> None:
        if self._audit_logger:
            await self._audit_logger.log_ledger_unavailable(
                operation=operation,
                error_message=str(error),
                correlation_id=correlation_id,
            )

    async def _read_ledger(
        self,
        operation: str,
        correlation_id: Optional[UUID] = None,
    ) -> list[Transaction]:
        try:
            return await self._ledger.list_transactions()
        except LedgerUnavailableError as e:
            await self._log_unavailable(operation, e, correlation_id)
            raise

    async def _notify(
        self,
        payload: NotificationPayload,
        correlation_id: Optional[UUID],
    ) -> Optional[DeliveryReport]:
        if self._notifications is None:
            return None
        return await self._notifications.dispatch(payload, correlation_id=correlation_id)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    async def add_transaction(
        self,
        amount: Union[Decimal, str, int, float, None],
        type: Union[TransactionType, str],
        category: Optional[str],
        date: Optional[date],
        correlation_id: Optional[UUID] = None,
        today: Optional[date] = None,
    ) -> Transaction:
        """
        Validate and record a new transaction.

        Returns:
            The stored Transaction

        Raises:
            TransactionRejectedError: If the form has error-level issues
            LedgerUnavailableError: If the ledger cannot be written
        """
        correlation_id = correlation_id or create_correlation_id()

        form = TransactionInput(
            amount=Decimal(str(amount)) if amount is not None else None,
            type=type,
            category=category,
            date=date,
        )

        try:
            transaction, result = self._validator.to_transaction(form, today=today)
        except TransactionRejectedError as e:
            if self._audit_logger:
                await self._audit_logger.log_transaction_rejected(
                    issues=[issue.model_dump() for issue in e.result.issues],
                    correlation_id=correlation_id,
                )
            raise

        for warning in result.warnings:
            logger.warning("transaction_warning", warning=warning)

        try:
            await self._ledger.append_transaction(transaction)
        except LedgerUnavailableError as e:
            await self._log_unavailable("add_transaction", e, correlation_id)
            raise

        if self._audit_logger:
            await self._audit_logger.log_transaction_added(
                transaction_id=transaction.id,
                transaction_type=transaction.type.value,
                amount=str(transaction.amount),
                category=transaction.category,
                correlation_id=correlation_id,
            )

        notification_type = (
            NotificationType.INCOME if transaction.is_income else NotificationType.EXPENSE
        )
        await self._notify(
            NotificationPayload(
                type=notification_type,
                title="Transaction added",
                message=(
                    f"{format_inr(transaction.amount)} {transaction.type.value} "
                    f"recorded under {transaction.category}"
                ),
                category=transaction.category,
                amount=transaction.amount,
                metadata={"transaction_id": transaction.id},
            ),
            correlation_id,
        )

        return transaction

    async def delete_transaction(
        self,
        transaction_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """
        Remove a transaction.

        Raises:
            NotFoundError: If no transaction has this id
            LedgerUnavailableError: If the ledger cannot be written
        """
        correlation_id = correlation_id or create_correlation_id()

        try:
            removed = await self._ledger.remove_transaction(transaction_id)
        except LedgerUnavailableError as e:
            await self._log_unavailable("delete_transaction", e, correlation_id)
            raise

        if not removed:
            raise NotFoundError(f"Transaction not found: {transaction_id}")

        if self._audit_logger:
            await self._audit_logger.log_transaction_deleted(
                transaction_id=transaction_id,
                correlation_id=correlation_id,
            )

    async def reset_ledger(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> int:
        """
        Delete every transaction. Returns how many were removed.

        Raises:
            LedgerUnavailableError: If the ledger cannot be written
        """
        correlation_id = correlation_id or create_correlation_id()

        try:
            removed = await self._ledger.clear()
        except LedgerUnavailableError as e:
            await self._log_unavailable("reset_ledger", e, correlation_id)
            raise

        if self._audit_logger:
            await self._audit_logger.log_ledger_cleared(
                removed_count=removed,
                correlation_id=correlation_id,
            )
        return removed

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def list_transactions(self) -> list[Transaction]:
        """All transactions, newest first."""
        transactions = await self._read_ledger("list_transactions")
        return list(reversed(sort_chronologically(transactions)))

    async def get_dashboard(
        self,
        now: Optional[datetime] = None,
    ) -> DashboardSummary:
        """
        Compute everything the dashboard shows from one ledger read.

        Raises:
            LedgerUnavailableError: If the ledger cannot be read
        """
        transactions = await self._read_ledger("get_dashboard")

        snapshot = LedgerSnapshot.from_transactions(transactions)
        ordered = sort_chronologically(transactions)
        series = aggregate_by_month(ordered)
        prediction = predict_next_period(series, transaction_count=len(transactions))
        alerts = generate_alerts(snapshot, now=now)

        return DashboardSummary(
            total_income=snapshot.total_income,
            total_expenses=snapshot.total_expenses,
            current_balance=snapshot.current_balance,
            net_profit=snapshot.total_income - snapshot.total_expenses,
            transaction_count=len(transactions),
            monthly_series=series,
            prediction=prediction,
            alerts=alerts,
            recent_transactions=list(reversed(ordered)),
        )

    async def send_alerts(
        self,
        alerts: list[Alert],
        correlation_id: Optional[UUID] = None,
    ) -> list[DeliveryReport]:
        """
        Push computed alerts out as insight notifications.
        """
        correlation_id = correlation_id or create_correlation_id()

        if self._audit_logger and alerts:
            await self._audit_logger.log_alerts_generated(
                alert_types=[alert.type.value for alert in alerts],
                correlation_id=correlation_id,
            )

        reports = []
        for alert in alerts:
            report = await self._notify(
                NotificationPayload(
                    type=NotificationType.INSIGHT,
                    title=alert.title,
                    message=alert.message,
                    priority=alert.priority,
                    metadata={"alert_type": alert.type.value},
                ),
                correlation_id,
            )
            if report is not None:
                reports.append(report)
        return reports


@dataclass
class AppComponents:
    """Everything the front end needs, wired together."""

    ledger_flow: LedgerFlow
    notification_service: NotificationService
    preference_service: PreferenceService
    toast_sink: ToastQueueSink
    sms_client: SmsGatewayClient
    audit_logger: AuditLogger


def create_app_components(
    settings: Optional[Settings] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    The ledger backend comes from LEDGER_BACKEND: "memory" keeps
    everything in the process, "json" writes under LEDGER_DATA_DIR.
    """
    settings = settings or get_settings()
    ledger_settings = settings.ledger

    if ledger_settings.backend == "json":
        ledger_storage = JsonFileLedgerStorage(ledger_settings.ledger_file)
        notification_storage = JsonFileNotificationStorage(ledger_settings.notifications_file)
        preference_storage = JsonFilePreferenceStorage(ledger_settings.preferences_file)
    else:
        ledger_storage = InMemoryLedgerStorage()
        notification_storage = InMemoryNotificationStorage()
        preference_storage = InMemoryPreferenceStorage()

    audit_logger = AuditLogger(InMemoryAuditStorage())
    toast_sink = ToastQueueSink()
    sms_client = SmsGatewayClient(settings.sms)

    preference_service = PreferenceService(preference_storage, audit_logger=audit_logger)
    notification_service = NotificationService(
        storage=notification_storage,
        preferences=preference_service,
        sink=toast_sink,
        sms_client=sms_client,
        audit_logger=audit_logger,
    )
    ledger_flow = LedgerFlow(
        ledger_storage=ledger_storage,
        validator=TransactionValidator(settings.app),
        notification_service=notification_service,
        audit_logger=audit_logger,
    )

    logger.info("app_components_created", backend=ledger_settings.backend)

    return AppComponents(
        ledger_flow=ledger_flow,
        notification_service=notification_service,
        preference_service=preference_service,
        toast_sink=toast_sink,
        sms_client=sms_client,
        audit_logger=audit_logger,
    )
