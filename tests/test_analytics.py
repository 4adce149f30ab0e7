"""
Tests for the ledger analytics: monthly aggregation, forecasting,
the alert rules and the static credit profile.
"""

import pytest
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from khaatakitab.analytics import (
    NO_DATA_LABEL,
    aggregate_by_month,
    category_breakdown,
    forecast_from_transactions,
    generate_alerts,
    get_credit_profile,
    predict_next_period,
    rate_score,
    sort_chronologically,
)
from khaatakitab.models import (
    AlertPriority,
    AlertType,
    CreditRating,
    LedgerSnapshot,
    MonthlyBucket,
    Prediction,
    Transaction,
    TransactionType,
)


def tx(amount, type, on, category="Sales"):
    return Transaction(
        amount=Decimal(str(amount)),
        type=TransactionType(type),
        category=category,
        date=on,
    )


def snapshot(*transactions):
    return LedgerSnapshot.from_transactions(list(transactions))


# Far from every test date, so the spending-spike rule stays quiet
QUIET_NOW = datetime(2030, 1, 1, 12, 0)


class TestAggregation:
    """Tests for aggregate_by_month."""

    def test_empty_ledger_yields_no_data_bucket(self):
        assert aggregate_by_month([]) == [
            MonthlyBucket(month=NO_DATA_LABEL, income=Decimal("0"), expenses=Decimal("0"))
        ]

    def test_groups_income_and_expenses_per_month(self):
        series = aggregate_by_month([
            tx(1000, "income", date(2025, 1, 5)),
            tx(400, "expense", date(2025, 1, 20)),
            tx(700, "income", date(2025, 2, 1)),
        ])
        assert [b.month for b in series] == ["Jan", "Feb"]
        assert series[0].income == Decimal("1000")
        assert series[0].expenses == Decimal("400")
        assert series[1].income == Decimal("700")
        assert series[1].expenses == Decimal("0")

    def test_output_follows_first_seen_order(self):
        """Order is insertion order of months, not calendar order."""
        series = aggregate_by_month([
            tx(100, "income", date(2025, 3, 1)),
            tx(100, "income", date(2025, 1, 1)),
            tx(100, "income", date(2025, 3, 2)),
        ])
        assert [b.month for b in series] == ["Mar", "Jan"]

    def test_same_month_of_different_years_share_a_bucket(self):
        series = aggregate_by_month([
            tx(100, "income", date(2024, 1, 10)),
            tx(250, "income", date(2025, 1, 10)),
        ])
        assert len(series) == 1
        assert series[0].income == Decimal("350")

    def test_totals_are_conserved(self):
        transactions = [
            tx("10.10", "income", date(2025, 1, 1)),
            tx("20.20", "expense", date(2025, 2, 1)),
            tx("30.30", "income", date(2025, 3, 1)),
            tx("0.01", "expense", date(2025, 3, 2)),
        ]
        series = aggregate_by_month(transactions)
        state = snapshot(*transactions)
        assert sum(b.income for b in series) == state.total_income
        assert sum(b.expenses for b in series) == state.total_expenses

    def test_sort_chronologically_is_stable(self):
        first = tx(1, "income", date(2025, 2, 1))
        second = tx(2, "income", date(2025, 2, 1))
        earlier = tx(3, "income", date(2025, 1, 1))
        assert sort_chronologically([first, second, earlier]) == [earlier, first, second]

    def test_category_breakdown_largest_first(self):
        breakdown = category_breakdown([
            tx(100, "expense", date(2025, 1, 1), "Transport"),
            tx(900, "expense", date(2025, 1, 1), "Rent"),
            tx(50, "expense", date(2025, 1, 2), "Transport"),
            tx(5000, "income", date(2025, 1, 2), "Sales"),
        ])
        assert list(breakdown) == ["Rent", "Transport"]
        assert breakdown["Transport"] == Decimal("150")


class TestForecast:
    """Tests for predict_next_period."""

    def test_flat_series_predicts_average(self):
        series = [
            MonthlyBucket(month="Jan", income=Decimal("1000"), expenses=Decimal("500")),
            MonthlyBucket(month="Feb", income=Decimal("1000"), expenses=Decimal("500")),
        ]
        assert predict_next_period(series) == Prediction(income=1000, expenses=500, profit=500)

    def test_rising_series_extrapolates(self):
        # slope = 500/2 - 1.5*300/2 = 25; 150 + 25*1.5 = 187.5 -> 188
        series = [
            MonthlyBucket(month="Jan", income=Decimal("100")),
            MonthlyBucket(month="Feb", income=Decimal("200")),
        ]
        prediction = predict_next_period(series)
        assert prediction.income == 188
        assert prediction.expenses == 0
        assert prediction.profit == 188

    def test_profit_is_income_minus_expenses(self):
        series = [
            MonthlyBucket(month="Jan", income=Decimal("300"), expenses=Decimal("900")),
            MonthlyBucket(month="Feb", income=Decimal("100"), expenses=Decimal("1200")),
        ]
        prediction = predict_next_period(series)
        assert prediction.profit == prediction.income - prediction.expenses

    def test_rounds_half_to_even(self):
        series = [MonthlyBucket(month="Jan", income=Decimal("2.5"), expenses=Decimal("3.5"))]
        prediction = predict_next_period(series)
        assert prediction.income == 2
        assert prediction.expenses == 4

    @pytest.mark.parametrize("count", [0, 1])
    def test_too_few_transactions_gives_zero(self, count):
        series = [MonthlyBucket(month="Jan", income=Decimal("5000"))]
        assert predict_next_period(series, transaction_count=count) == Prediction.zero()

    def test_empty_series_gives_zero(self):
        assert predict_next_period([]) == Prediction.zero()

    def test_no_data_sentinel_predicts_zero(self):
        assert predict_next_period(aggregate_by_month([])) == Prediction.zero()

    def test_deterministic(self):
        series = [
            MonthlyBucket(month="Jan", income=Decimal("1234.56"), expenses=Decimal("789")),
            MonthlyBucket(month="Feb", income=Decimal("2000"), expenses=Decimal("100.10")),
            MonthlyBucket(month="Mar", income=Decimal("50"), expenses=Decimal("3000")),
        ]
        assert predict_next_period(series) == predict_next_period(series)

    def test_forecast_from_transactions_sorts_first(self):
        transactions = [
            tx(200, "income", date(2025, 2, 1)),
            tx(100, "income", date(2025, 1, 1)),
        ]
        assert forecast_from_transactions(transactions).income == 188

    def test_forecast_from_single_transaction_is_zero(self):
        assert forecast_from_transactions([tx(100, "income", date(2025, 1, 1))]) == Prediction.zero()


class TestAlertRules:
    """Tests for generate_alerts."""

    def test_empty_ledger_has_no_alerts(self):
        assert generate_alerts(snapshot(), now=QUIET_NOW) == []

    def test_expense_ratio_just_above_threshold_fires(self):
        alerts = generate_alerts(
            snapshot(
                tx(1000, "income", date(2025, 1, 1)),
                tx(801, "expense", date(2025, 1, 2)),
            ),
            now=QUIET_NOW,
        )
        ratio_alerts = [a for a in alerts if a.title == "High Expense Ratio"]
        assert len(ratio_alerts) == 1
        assert ratio_alerts[0].type == AlertType.WARNING
        assert ratio_alerts[0].priority == AlertPriority.HIGH
        assert "80%" in ratio_alerts[0].message

    def test_expense_ratio_percentage_rounds_half_up(self):
        alerts = generate_alerts(
            snapshot(
                tx(1000, "income", date(2025, 1, 1)),
                tx(825, "expense", date(2025, 1, 2)),
            ),
            now=QUIET_NOW,
        )
        ratio_alert = next(a for a in alerts if a.title == "High Expense Ratio")
        assert ratio_alert.message.startswith("Your expenses are 83% of your income.")

    def test_expense_ratio_at_threshold_does_not_fire(self):
        alerts = generate_alerts(
            snapshot(
                tx(1000, "income", date(2025, 1, 1)),
                tx(800, "expense", date(2025, 1, 2)),
            ),
            now=QUIET_NOW,
        )
        assert "High Expense Ratio" not in [a.title for a in alerts]

    def test_expense_ratio_needs_income(self):
        alerts = generate_alerts(
            snapshot(tx(500, "expense", date(2025, 1, 1))),
            now=QUIET_NOW,
        )
        assert alerts == []

    def test_zero_balance_is_not_low_balance(self):
        alerts = generate_alerts(
            snapshot(
                tx(1000, "income", date(2025, 1, 1)),
                tx(1000, "expense", date(2025, 1, 2)),
            ),
            now=QUIET_NOW,
        )
        assert [a.title for a in alerts] == ["High Expense Ratio"]

    def test_balance_of_exactly_limit_is_not_low(self):
        alerts = generate_alerts(
            snapshot(tx(10000, "income", date(2025, 1, 1))),
            now=QUIET_NOW,
        )
        assert [a.title for a in alerts] == ["Healthy Spending Habits"]

    def test_balance_just_below_limit_is_low(self):
        alerts = generate_alerts(
            snapshot(tx("9999.99", "income", date(2025, 1, 1))),
            now=QUIET_NOW,
        )
        assert [a.title for a in alerts] == ["Low Balance Alert", "Healthy Spending Habits"]
        assert alerts[0].type == AlertType.DANGER
        assert "₹9,999.99" in alerts[0].message

    def test_healthy_habits_boundary(self):
        """Expenses of exactly 70% of income are not 'healthy'."""
        alerts = generate_alerts(
            snapshot(
                tx(1000, "income", date(2025, 1, 1)),
                tx(700, "expense", date(2025, 1, 2)),
            ),
            now=QUIET_NOW,
        )
        assert [a.title for a in alerts] == ["Low Balance Alert"]

    def test_healthy_habits_alone(self):
        alerts = generate_alerts(
            snapshot(
                tx(100000, "income", date(2025, 1, 1)),
                tx(1000, "expense", date(2025, 1, 2)),
            ),
            now=QUIET_NOW,
        )
        assert len(alerts) == 1
        assert alerts[0].type == AlertType.SUCCESS
        assert alerts[0].priority == AlertPriority.LOW

    def test_spending_spike_fires(self):
        now = datetime(2025, 3, 10, 12, 0)
        alerts = generate_alerts(
            snapshot(
                tx(100, "expense", date(2025, 3, 5)),
                tx(100, "expense", date(2025, 3, 6)),
                tx(500, "expense", date(2025, 3, 10)),
            ),
            now=now,
        )
        assert [a.title for a in alerts] == ["Spending Spike Detected"]
        assert alerts[0].type == AlertType.INFO
        assert alerts[0].priority == AlertPriority.MEDIUM
        assert "₹500" in alerts[0].message

    def test_spending_spike_needs_three_recent_expenses(self):
        now = datetime(2025, 3, 10, 12, 0)
        alerts = generate_alerts(
            snapshot(
                tx(100, "expense", date(2025, 3, 1)),
                tx(100, "expense", date(2025, 3, 6)),
                tx(500, "expense", date(2025, 3, 10)),
            ),
            now=now,
        )
        assert alerts == []

    def test_spending_spike_window_is_inclusive(self):
        now = datetime(2025, 3, 10, 0, 0)
        alerts = generate_alerts(
            snapshot(
                tx(100, "expense", (now - timedelta(days=7)).date()),
                tx(100, "expense", date(2025, 3, 6)),
                tx(500, "expense", date(2025, 3, 10)),
            ),
            now=now,
        )
        assert [a.title for a in alerts] == ["Spending Spike Detected"]

    def test_no_spike_when_today_is_ordinary(self):
        now = datetime(2025, 3, 10, 12, 0)
        alerts = generate_alerts(
            snapshot(
                tx(100, "expense", date(2025, 3, 5)),
                tx(100, "expense", date(2025, 3, 6)),
                tx(100, "expense", date(2025, 3, 10)),
            ),
            now=now,
        )
        assert alerts == []

    def test_aware_now_is_accepted(self):
        now = datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)
        alerts = generate_alerts(snapshot(tx(100000, "income", date(2025, 1, 1))), now=now)
        assert [a.title for a in alerts] == ["Healthy Spending Habits"]

    def test_rules_are_independent_and_ordered(self):
        now = datetime(2025, 3, 10, 12, 0)
        alerts = generate_alerts(
            snapshot(
                tx(1000, "income", date(2025, 1, 1)),
                tx(100, "expense", date(2025, 3, 5)),
                tx(100, "expense", date(2025, 3, 6)),
                tx(650, "expense", date(2025, 3, 10)),
            ),
            now=now,
        )
        assert [a.title for a in alerts] == [
            "High Expense Ratio",
            "Low Balance Alert",
            "Spending Spike Detected",
        ]
        assert [a.id for a in alerts] == [1, 2, 3]
        assert all(a.date == "Today" for a in alerts)


class TestCreditProfile:

    @pytest.mark.parametrize("score, rating", [
        (900, CreditRating.EXCELLENT),
        (750, CreditRating.EXCELLENT),
        (749, CreditRating.GOOD),
        (650, CreditRating.GOOD),
        (649, CreditRating.FAIR),
        (550, CreditRating.FAIR),
        (549, CreditRating.POOR),
        (0, CreditRating.POOR),
    ])
    def test_rating_bands(self, score, rating):
        assert rate_score(score) == rating

    def test_static_profile(self):
        profile = get_credit_profile()
        assert profile.score == 720
        assert profile.max_score == 900
        assert profile.rating == CreditRating.GOOD
        assert profile.score_percentage == pytest.approx(80.0)
        assert [f.label for f in profile.factors] == [
            "Payment History",
            "Credit Utilization",
            "Credit Age",
            "Credit Mix",
        ]
        assert profile.tips
