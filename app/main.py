"""
Streamlit Frontend for KhaataKitab

This is the user interface that small business owners use daily to
record what came in, what went out, and to see where they stand.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Numbers in rupees, formatted the Indian way
3. Clear error messages in simple language
4. Visual feedback for all operations
5. No hidden actions

Every number on screen is recomputed from the ledger on each run;
the UI never keeps its own totals.
"""

import asyncio
from datetime import date, datetime
from decimal import Decimal

import streamlit as st

from khaatakitab.analytics import category_breakdown, get_credit_profile
from khaatakitab.config import get_settings, validate_all_settings
from khaatakitab.formatting import format_inr, relative_time_label
from khaatakitab.models import (
    AlertPriority,
    NotificationType,
    TransactionType,
    badge_variant_for,
    presentation_for,
)
from khaatakitab.orchestrator import AppComponents, create_app_components
from khaatakitab.services.storage import LedgerUnavailableError, NotFoundError
from khaatakitab.validation import TransactionRejectedError


# Page configuration
st.set_page_config(
    page_title="KhaataKitab",
    page_icon="📒",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .alert-box {
        padding: 16px;
        border-radius: 10px;
        margin: 10px 0;
    }
    .alert-warning { background-color: #fff3cd; border-left: 5px solid #ffc107; }
    .alert-danger { background-color: #f8d7da; border-left: 5px solid #dc3545; }
    .alert-info { background-color: #cce5ff; border-left: 5px solid #004085; }
    .alert-success { background-color: #d4edda; border-left: 5px solid #28a745; }
    .big-number {
        font-size: 2.5em;
        font-weight: bold;
        color: #2c3e50;
    }
</style>
""", unsafe_allow_html=True)


PRIORITY_LABELS = {
    AlertPriority.HIGH: "🔴 High",
    AlertPriority.MEDIUM: "🟠 Medium",
    AlertPriority.LOW: "⚪ Low",
}


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components() -> AppComponents:
    """Get or create application components (cached)."""
    return create_app_components()


def show_pending_toasts(components: AppComponents):
    """Draw notifications raised since the last run."""
    for payload in components.toast_sink.drain():
        st.toast(f"{payload.title}: {payload.message}", icon=payload.icon)


def main():
    """Main application entry point."""
    components = get_components()

    unread = run_async(components.notification_service.unread_count())
    inbox_label = f"🔔 Notifications ({unread})" if unread else "🔔 Notifications"

    # Sidebar navigation
    st.sidebar.title("📒 KhaataKitab")
    st.sidebar.markdown("---")

    pages = [
        "📊 Dashboard",
        "➕ Add Transaction",
        "💡 Alerts & Tips",
        "💳 Credit Score",
        inbox_label,
        "⚙️ Settings",
    ]
    page = st.sidebar.radio("Navigate to:", pages, index=0)

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **How to use:**
        1. Add every sale and every expense
        2. Check the dashboard for your balance
        3. Read the tips to keep spending healthy
        """
    )

    try:
        if page == pages[0]:
            render_dashboard_page(components)
        elif page == pages[1]:
            render_add_transaction_page(components)
        elif page == pages[2]:
            render_alerts_page(components)
        elif page == pages[3]:
            render_credit_page()
        elif page == pages[4]:
            render_notifications_page(components)
        elif page == pages[5]:
            render_settings_page(components)
    except LedgerUnavailableError as e:
        st.error(f"❌ Your ledger could not be loaded: {e}")
        st.info("Check the data directory in Settings and try again.")

    show_pending_toasts(components)


def render_dashboard_page(components: AppComponents):
    """Render the dashboard."""
    st.title("📊 Dashboard")

    summary = run_async(components.ledger_flow.get_dashboard())

    st.markdown("### Current Balance")
    st.markdown(
        f'<div class="big-number">{format_inr(summary.current_balance)}</div>',
        unsafe_allow_html=True,
    )

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Total Income", format_inr(summary.total_income))
    with col2:
        st.metric("Total Expenses", format_inr(summary.total_expenses))
    with col3:
        st.metric("Net Profit", format_inr(summary.net_profit))

    st.markdown("---")
    st.markdown("### Next Month Prediction")

    if summary.transaction_count < 2:
        st.info("Add at least two transactions to see a prediction.")
    else:
        col1, col2, col3 = st.columns(3)
        with col1:
            st.metric("Expected Income", format_inr(summary.prediction.income))
        with col2:
            st.metric("Expected Expenses", format_inr(summary.prediction.expenses))
        with col3:
            st.metric("Expected Profit", format_inr(summary.prediction.profit))

    st.markdown("### Cashflow")
    st.bar_chart(
        {
            "Month": [b.month for b in summary.monthly_series],
            "Income": [float(b.income) for b in summary.monthly_series],
            "Expenses": [float(b.expenses) for b in summary.monthly_series],
        },
        x="Month",
        y=["Income", "Expenses"],
    )

    breakdown = category_breakdown(summary.recent_transactions)
    if breakdown:
        st.markdown("### Where the money went")
        for category, amount in breakdown.items():
            st.markdown(f"- **{category}**: {format_inr(amount)}")

    if summary.alerts:
        st.markdown("---")
        top = summary.alerts[0]
        presentation = presentation_for(top.type)
        st.markdown(f"{presentation.icon} **{top.title}**: {top.message}")

    st.markdown("---")
    render_transaction_list(components, summary.recent_transactions)


def render_transaction_list(components: AppComponents, transactions):
    """Recent transactions with a delete button each."""
    st.markdown("### Recent Transactions")

    if not transactions:
        st.info(
            "📋 Your transactions will appear here once you add them. "
            "Use the 'Add Transaction' page to add your first one."
        )
        return

    for transaction in transactions:
        col1, col2, col3, col4 = st.columns([3, 2, 2, 1])
        sign = "+" if transaction.is_income else "-"
        with col1:
            st.markdown(f"**{transaction.category}**")
        with col2:
            st.markdown(transaction.date.strftime("%d %b %Y"))
        with col3:
            st.markdown(f"{sign}{format_inr(transaction.amount)}")
        with col4:
            if st.button("🗑️", key=f"delete_{transaction.id}"):
                try:
                    run_async(components.ledger_flow.delete_transaction(transaction.id))
                    st.success("Transaction deleted")
                except NotFoundError:
                    st.warning("That transaction was already removed.")
                st.rerun()


def render_add_transaction_page(components: AppComponents):
    """Render the add-transaction form."""
    st.title("➕ Add Transaction")
    st.markdown("Record money coming in or going out.")

    categories = get_settings().app.default_categories_list

    with st.form("add_transaction", clear_on_submit=True):
        transaction_type = st.radio(
            "Type",
            options=list(TransactionType),
            format_func=lambda t: "💰 Income" if t == TransactionType.INCOME else "💸 Expense",
            horizontal=True,
        )
        amount = st.number_input(
            "Amount (₹)",
            min_value=0.0,
            step=100.0,
            format="%.2f",
        )
        category = st.selectbox(
            "Category",
            options=categories + ["Other (type below)"],
        )
        custom_category = st.text_input(
            "Custom category",
            help="Only used when 'Other (type below)' is selected",
        )
        transaction_date = st.date_input("Date", value=date.today())

        submitted = st.form_submit_button("💾 Save Transaction", type="primary")

    if not submitted:
        return

    if category == "Other (type below)":
        category = custom_category

    try:
        transaction = run_async(components.ledger_flow.add_transaction(
            amount=Decimal(str(amount)).quantize(Decimal("0.01")),
            type=transaction_type,
            category=category,
            date=transaction_date,
        ))
    except TransactionRejectedError as e:
        validator_summary = components.ledger_flow.validator.get_user_friendly_summary(e.result)
        st.error(validator_summary)
        return

    st.success(
        f"✅ {format_inr(transaction.amount)} {transaction.type.value} recorded "
        f"under {transaction.category}"
    )


def render_alerts_page(components: AppComponents):
    """Render the alerts and tips page."""
    st.title("💡 Alerts & Tips")

    summary = run_async(components.ledger_flow.get_dashboard())

    if not summary.alerts:
        st.info("No alerts right now. Keep recording your transactions!")
        return

    for alert in summary.alerts:
        presentation = presentation_for(alert.type)
        st.markdown(
            f'<div class="alert-box alert-{alert.type.value}">'
            f"{presentation.icon} <b>{alert.title}</b> "
            f"<small>({PRIORITY_LABELS[alert.priority]}, {badge_variant_for(alert.priority)})</small>"
            f"<br>{alert.message}<br><small>{alert.date}</small>"
            f"</div>",
            unsafe_allow_html=True,
        )

    st.markdown("---")
    if st.button("📨 Send these to my notifications"):
        reports = run_async(components.ledger_flow.send_alerts(summary.alerts))
        delivered = sum(1 for r in reports if not r.suppressed)
        st.success(f"Sent {delivered} of {len(summary.alerts)} alerts")


def render_credit_page():
    """Render the credit score page."""
    st.title("💳 Credit Score")

    profile = get_credit_profile()

    st.markdown(
        f'<div class="big-number">{profile.score} / {profile.max_score}</div>',
        unsafe_allow_html=True,
    )
    st.markdown(f"Rating: **{profile.rating.value}**")
    st.progress(profile.score_percentage / 100)

    st.markdown("### What affects your score")
    for factor in profile.factors:
        st.markdown(f"**{factor.label}** ({factor.impact} impact)")
        st.progress(factor.score / 100)

    st.markdown("### How to improve")
    for tip in profile.tips:
        st.markdown(f"- {tip}")


def render_notifications_page(components: AppComponents):
    """Render the notification inbox."""
    st.title("🔔 Notifications")

    service = components.notification_service
    notifications = run_async(service.list_inbox())

    if not notifications:
        st.info("No notifications yet.")
        return

    if st.button("✅ Mark all as read"):
        count = run_async(service.mark_all_as_read())
        st.success(f"Marked {count} notifications as read")
        st.rerun()

    now = datetime.utcnow()
    for notification in notifications:
        col1, col2, col3 = st.columns([6, 1, 1])
        with col1:
            weight = "" if notification.is_read else "**"
            st.markdown(
                f"{notification.icon} {weight}{notification.title}{weight}  \n"
                f"{notification.message}  \n"
                f"<small>{relative_time_label(notification.created_at, now)}</small>",
                unsafe_allow_html=True,
            )
        with col2:
            if not notification.is_read and st.button("👁️", key=f"read_{notification.id}"):
                run_async(service.mark_as_read(notification.id))
                st.rerun()
        with col3:
            if st.button("🗑️", key=f"del_{notification.id}"):
                run_async(service.delete(notification.id))
                st.rerun()


def render_settings_page(components: AppComponents):
    """Render the settings page."""
    st.title("⚙️ Settings")

    preferences = run_async(components.preference_service.get())

    st.markdown("### Notification Preferences")

    with st.form("preferences"):
        app_enabled = st.toggle(
            "In-app notifications",
            value=preferences.app_notifications_enabled,
        )
        sms_enabled = st.toggle(
            "SMS alerts",
            value=preferences.sms_alerts_enabled,
        )
        phone_number = st.text_input(
            "Phone number",
            value=preferences.phone_number or "",
            placeholder="+91 98765 43210",
        )

        st.markdown("**Notify me about**")
        toggles = {}
        for notification_type, field_name in (
            (NotificationType.INCOME, "notify_on_income"),
            (NotificationType.EXPENSE, "notify_on_expense"),
            (NotificationType.INSIGHT, "notify_on_insights"),
            (NotificationType.REMINDER, "notify_on_reminders"),
        ):
            toggles[field_name] = st.checkbox(
                notification_type.value.title(),
                value=getattr(preferences, field_name),
            )

        threshold = st.number_input(
            "Expense threshold (₹)",
            min_value=0.0,
            step=100.0,
            value=float(preferences.expense_threshold or 0),
            help="Only alert for expenses above this amount (0 = every expense)",
        )

        saved = st.form_submit_button("💾 Save Preferences", type="primary")

    if saved:
        try:
            run_async(components.preference_service.update(
                app_notifications_enabled=app_enabled,
                sms_alerts_enabled=sms_enabled,
                phone_number=phone_number or None,
                expense_threshold=Decimal(str(threshold)) if threshold > 0 else None,
                **toggles,
            ))
            st.success("✅ Preferences saved")
        except ValueError as e:
            st.error(f"❌ {e}")

    st.markdown("---")
    st.markdown("### Connection Status")

    status = validate_all_settings()

    services = [
        ("Ledger Storage", "ledger"),
        ("SMS Gateway", "sms"),
        ("Application", "app"),
    ]

    for name, key in services:
        if status.get(key, False):
            st.success(f"✅ {name} - OK")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    if not components.sms_client.is_configured:
        st.warning("SMS gateway URL is not set; SMS alerts will not be sent.")

    st.markdown("---")
    st.markdown("### Danger Zone")
    if st.button("🗑️ Delete all transactions"):
        removed = run_async(components.ledger_flow.reset_ledger())
        st.success(f"Removed {removed} transactions")

    st.markdown("---")
    st.markdown("### Configuration")
    st.markdown(
        "To configure the application, create a `.env` file. "
        "See `.env.example` for the available variables."
    )


if __name__ == "__main__":
    main()
