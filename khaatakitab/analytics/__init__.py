"""Ledger analytics: aggregation, forecasting, alert rules, credit profile."""

from khaatakitab.analytics.aggregation import (
    NO_DATA_LABEL,
    aggregate_by_month,
    category_breakdown,
    sort_chronologically,
)
from khaatakitab.analytics.alerts import generate_alerts
from khaatakitab.analytics.credit import get_credit_profile, rate_score
from khaatakitab.analytics.forecast import (
    forecast_from_transactions,
    predict_next_period,
)

__all__ = [
    "NO_DATA_LABEL",
    "aggregate_by_month",
    "category_breakdown",
    "forecast_from_transactions",
    "generate_alerts",
    "get_credit_profile",
    "predict_next_period",
    "rate_score",
    "sort_chronologically",
]
