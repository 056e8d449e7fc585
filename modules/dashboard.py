import logging

import streamlit as st

from core import settings
from core.customer_filter import filter_customers
from core.loan_api import LoanApiError, list_customers
from core.loan_metrics import (
    classify_status,
    collections_trend,
    customer_metrics,
    display_progress,
    portfolio_stats,
    status_badge,
    status_style,
)
from core.view_state import (
    apply_customers,
    begin_reload,
    is_filtering,
    new_view_state,
    select_customer,
    set_status_filter,
)
from modules.customer_forms import render_add_customer_form
from utils.formatting import money

logger = logging.getLogger(__name__)

FILTER_LABELS = {"All": "all", "Active": "active", "Completed": "completed"}


# =========================
# STATE
# =========================
def get_view_state():
    if "view" not in st.session_state:
        st.session_state.view = new_view_state()
    return st.session_state.view


def reload_customers(state) -> bool:
    token = begin_reload(state)

    try:
        customers = list_customers()
    except LoanApiError:
        st.error("Failed to load customers. Please check if the backend server is running.")
        return False

    return apply_customers(state, customers, token)


def render_status(target, label):
    color = status_style(label)["color"]
    target.markdown(
        f"<span style='color:{color}; font-weight:600'>{status_badge(label)}</span>",
        unsafe_allow_html=True,
    )


# =========================
# CUSTOMER CARD
# =========================
def render_customer_card(state, customer):
    metrics = customer_metrics(customer)
    status = classify_status(metrics["progress_percentage"], metrics["remaining"])

    with st.container(border=True):
        top1, top2 = st.columns([3, 2])
        top1.markdown(f"**{customer['name']}**")
        top1.caption(f"Loan #{customer['loan_no']}")
        render_status(top2, status)

        c1, c2 = st.columns(2)
        c1.metric("Loan Amount", money(customer["loan_amount"]))
        c2.metric("Remaining", money(metrics["remaining"]))

        st.progress(
            int(display_progress(metrics["progress_percentage"])),
            text=f"Progress {metrics['progress_percentage']:.1f}%",
        )

        st.caption(f"📞 {customer['mobile']}")
        if customer.get("address"):
            st.caption(f"📍 {customer['address']}")

        if st.button("View Details", key=f"view_{customer['id']}", use_container_width=True):
            select_customer(state, customer["id"])
            st.rerun()


# =========================
# DASHBOARD
# =========================
def render_dashboard(state):
    st.subheader("📊 Loan Management System")
    st.caption("Manage customer loans and track payments efficiently")

    a1, a2, _ = st.columns([1, 1, 4])
    if a1.button("🔄 Refresh"):
        reload_customers(state)
    if a2.button("➕ Add Customer"):
        state["show_add_customer"] = True

    if state["show_add_customer"]:
        if render_add_customer_form(state):
            state["show_add_customer"] = False
            reload_customers(state)
            st.rerun()
        return

    customers = state["customers"]

    # =========================
    # KEY METRICS (full book)
    # =========================
    stats = portfolio_stats(customers)

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total Customers", stats["total_customers"])
    c2.metric("Total Loan Amount", money(stats["total_loan_amount"]))
    c3.metric("Total Collected", money(stats["total_collected"]))
    c4.metric("Completed Loans", f"{stats['completed_loans']}/{stats['total_customers']}")

    st.caption(f"Outstanding across all loans: **{money(stats['total_remaining'])}**")

    # =========================
    # 📈 COLLECTIONS TREND
    # =========================
    if customers:
        trend = collections_trend(customers, months=settings.TREND_MONTHS)
        with st.expander(f"📈 Collections (Last {settings.TREND_MONTHS} Months)"):
            st.bar_chart({row["Month"]: row["Collected"] for row in trend})

    # =========================
    # 🔍 SEARCH & FILTER
    # =========================
    st.markdown("---")
    s1, s2 = st.columns([3, 2])

    state["search_term"] = s1.text_input(
        "Search",
        value=state["search_term"],
        placeholder="Search by name, loan number, or mobile...",
    )

    labels = list(FILTER_LABELS)
    current = labels[list(FILTER_LABELS.values()).index(state["status_filter"])]
    choice = s2.radio("Show", labels, index=labels.index(current), horizontal=True)
    set_status_filter(state, FILTER_LABELS[choice])

    visible = filter_customers(customers, state["search_term"], state["status_filter"])

    # =========================
    # 👥 CUSTOMERS
    # =========================
    if not visible:
        if is_filtering(state):
            st.info("No customers found. Try adjusting your search or filters.")
        else:
            st.info("No customers yet. Get started by adding your first customer.")
        return

    cols = st.columns(3)
    for i, customer in enumerate(visible):
        with cols[i % 3]:
            render_customer_card(state, customer)
