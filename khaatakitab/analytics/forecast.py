"""
Next-Period Forecast

DESIGN DECISION: The trend estimator here is deliberately simple and is
NOT an ordinary least-squares slope. With buckets indexed 1..n:

    slope     = (Σ idx*value)/n − ((n+1)/2) * (Σ value)/n
    average   = (Σ value)/n
    predicted = round(average + slope * 1.5)

Existing dashboards show numbers produced by exactly this formula, so it
is kept as-is.

Rounding uses Python's built-in round(), i.e. round-half-to-even:
an intermediate value of exactly 2.5 predicts 2, and 3.5 predicts 4.
"""

from typing import Iterable, Optional

from khaatakitab.analytics.aggregation import aggregate_by_month, sort_chronologically
from khaatakitab.models.ledger import MonthlyBucket, Prediction, Transaction


TREND_WEIGHT = 1.5
MIN_TRANSACTIONS = 2


def _trend_value(values: list[float]) -> int:
    n = len(values)
    total = sum(values)
    weighted = sum(idx * value for idx, value in enumerate(values, start=1))

    slope = weighted / n - ((n + 1) / 2) * total / n
    average = total / n
    return round(average + slope * TREND_WEIGHT)


def predict_next_period(
    series: list[MonthlyBucket],
    transaction_count: Optional[int] = None,
) -> Prediction:
    """
    Predict next period's income, expenses and profit from a monthly series.

    Args:
        series: Monthly buckets in the order produced by the aggregator
        transaction_count: Number of transactions the series was built from.
            Below MIN_TRANSACTIONS there is not enough data and the zero
            prediction is returned.

    Returns:
        Prediction in whole rupees
    """
    if transaction_count is not None and transaction_count < MIN_TRANSACTIONS:
        return Prediction.zero()
    if not series:
        return Prediction.zero()

    income = _trend_value([float(bucket.income) for bucket in series])
    expenses = _trend_value([float(bucket.expenses) for bucket in series])

    return Prediction(
        income=income,
        expenses=expenses,
        profit=income - expenses,
    )


def forecast_from_transactions(transactions: Iterable[Transaction]) -> Prediction:
    """Aggregate a ledger chronologically and forecast the next period."""
    ordered = sort_chronologically(transactions)
    series = aggregate_by_month(ordered)
    return predict_next_period(series, transaction_count=len(ordered))
