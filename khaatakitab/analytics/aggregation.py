"""
Monthly Aggregation

Groups a ledger into per-month income/expense buckets for the cashflow
chart and the forecaster.

NOTE: buckets are keyed by short month name only ("Jan"), so January 2024
and January 2025 land in the same bucket. Callers that care about
chronology should pass transactions sorted by timestamp; output order is
the order in which each month is first seen.
"""

from decimal import Decimal
from typing import Iterable

from khaatakitab.models.ledger import MonthlyBucket, Transaction


NO_DATA_LABEL = "No data"


def month_label(transaction: Transaction) -> str:
    """Short, locale-formatted month name of the transaction date."""
    return transaction.date.strftime("%b")


def sort_chronologically(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Oldest first by timestamp; ties keep ledger order."""
    return sorted(transactions, key=lambda t: t.timestamp)


def aggregate_by_month(transactions: Iterable[Transaction]) -> list[MonthlyBucket]:
    """
    Sum income and expenses per month.

    Never returns an empty list: an empty ledger yields a single
    zero-valued "No data" bucket so the chart and forecaster always
    have something to work with.
    """
    groups: dict[str, dict[str, Decimal]] = {}

    for transaction in transactions:
        key = month_label(transaction)
        if key not in groups:
            groups[key] = {"income": Decimal("0"), "expenses": Decimal("0")}

        if transaction.is_income:
            groups[key]["income"] += transaction.amount
        else:
            groups[key]["expenses"] += transaction.amount

    if not groups:
        return [MonthlyBucket(month=NO_DATA_LABEL)]

    return [
        MonthlyBucket(month=month, income=totals["income"], expenses=totals["expenses"])
        for month, totals in groups.items()
    ]


def category_breakdown(
    transactions: Iterable[Transaction],
    expenses_only: bool = True,
) -> dict[str, Decimal]:
    """Total amount per category, largest first."""
    totals: dict[str, Decimal] = {}
    for transaction in transactions:
        if expenses_only and not transaction.is_expense:
            continue
        totals[transaction.category] = (
            totals.get(transaction.category, Decimal("0")) + transaction.amount
        )
    return dict(sorted(totals.items(), key=lambda item: item[1], reverse=True))
