"""
Rule-Based Alert Engine

Evaluates a fixed set of threshold rules against a ledger snapshot and
returns the alerts that fire, in rule order:

1. High expense ratio   (warning / high)
2. Low balance          (danger  / high)
3. Spending spike       (info    / medium)
4. Healthy habits       (success / low)

Every rule is evaluated on its own; one firing never stops another from
being checked. Nothing is cached or stored, the list is rebuilt on every
call from the snapshot it is given.
"""

from datetime import date, datetime, time, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from khaatakitab.formatting import format_inr
from khaatakitab.models.alert import Alert, AlertPriority, AlertType
from khaatakitab.models.ledger import LedgerSnapshot, Transaction


HIGH_EXPENSE_RATIO = Decimal("0.8")
LOW_BALANCE_LIMIT = Decimal("10000")
SPIKE_WINDOW = timedelta(days=7)
SPIKE_MIN_TRANSACTIONS = 3
SPIKE_MULTIPLIER = Decimal("1.2")
HEALTHY_EXPENSE_RATIO = Decimal("0.7")

TODAY_LABEL = "Today"


def _check_expense_ratio(snapshot: LedgerSnapshot) -> Optional[dict]:
    if snapshot.total_income <= 0:
        return None
    ratio = snapshot.total_expenses / snapshot.total_income
    if ratio <= HIGH_EXPENSE_RATIO:
        return None

    # Half rounds up: 82.5% shows as 83%
    percentage = (ratio * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return {
        "type": AlertType.WARNING,
        "priority": AlertPriority.HIGH,
        "title": "High Expense Ratio",
        "message": (
            f"Your expenses are {percentage}% of your income. "
            "Consider reducing non-essential spending."
        ),
    }


def _check_low_balance(snapshot: LedgerSnapshot) -> Optional[dict]:
    balance = snapshot.current_balance
    if not (0 < balance < LOW_BALANCE_LIMIT):
        return None

    return {
        "type": AlertType.DANGER,
        "priority": AlertPriority.HIGH,
        "title": "Low Balance Alert",
        "message": (
            f"Your current balance is {format_inr(balance)}. "
            f"Try to keep at least {format_inr(LOW_BALANCE_LIMIT)} for upcoming expenses."
        ),
    }


def _transaction_moment(transaction: Transaction) -> datetime:
    return datetime.combine(transaction.date, time.min)


def _check_spending_spike(snapshot: LedgerSnapshot, now: datetime) -> Optional[dict]:
    expenses = [t for t in snapshot.transactions if t.is_expense]

    recent = [t for t in expenses if now - _transaction_moment(t) <= SPIKE_WINDOW]
    if len(recent) < SPIKE_MIN_TRANSACTIONS:
        return None

    avg_daily = sum((t.amount for t in recent), Decimal("0")) / len(recent)

    # Matched on the calendar date, independent of the 7-day window
    today: date = now.date()
    today_expenses = sum(
        (t.amount for t in expenses if t.date == today),
        Decimal("0"),
    )

    if today_expenses <= avg_daily * SPIKE_MULTIPLIER:
        return None

    return {
        "type": AlertType.INFO,
        "priority": AlertPriority.MEDIUM,
        "title": "Spending Spike Detected",
        "message": (
            f"Today's expenses ({format_inr(today_expenses)}) are higher than "
            f"your recent average of {format_inr(avg_daily.quantize(Decimal('0.01')))} "
            "per transaction."
        ),
    }


def _check_healthy_habits(snapshot: LedgerSnapshot) -> Optional[dict]:
    if snapshot.current_balance <= 0:
        return None
    if snapshot.total_expenses >= snapshot.total_income * HEALTHY_EXPENSE_RATIO:
        return None

    return {
        "type": AlertType.SUCCESS,
        "priority": AlertPriority.LOW,
        "title": "Healthy Spending Habits",
        "message": (
            "Great job! Your expenses are well within your income. "
            "Keep saving to build a cushion for your business."
        ),
    }


def generate_alerts(
    snapshot: LedgerSnapshot,
    now: Optional[datetime] = None,
) -> list[Alert]:
    """
    Evaluate all alert rules against a ledger snapshot.

    Args:
        snapshot: Current ledger state
        now: Reference time for the spending-spike window (local, naive).
            Defaults to the current time.

    Returns:
        Alerts in rule order with ids 1..n
    """
    now = now or datetime.now()
    if now.tzinfo is not None:
        now = now.astimezone().replace(tzinfo=None)

    candidates = [
        _check_expense_ratio(snapshot),
        _check_low_balance(snapshot),
        _check_spending_spike(snapshot, now),
        _check_healthy_habits(snapshot),
    ]

    alerts = []
    for fired in candidates:
        if fired is None:
            continue
        alerts.append(Alert(id=len(alerts) + 1, date=TODAY_LABEL, **fired))

    return alerts
