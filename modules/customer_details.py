import logging

import pandas as pd
import streamlit as st

from core.loan_api import (
    LoanApiError,
    get_customer_payments,
    get_customer_summary,
)
from core.loan_metrics import (
    build_customer_summary,
    classify_status,
    display_progress,
    progress_percentage,
    sorted_monthly_totals,
)
from core.statement_exporter import export_statement_docx, export_statement_pdf
from core.view_state import clear_selection, selected_customer
from modules.customer_forms import render_add_payment_form
from modules.dashboard import reload_customers, render_status
from utils.dates import month_key_to_label
from utils.formatting import money

logger = logging.getLogger(__name__)


# ==================================================
# HELPERS
# ==================================================
def load_customer_data(customer):
    """
    Backend summary is authoritative. When it can't be fetched the summary
    is rebuilt from the payments embedded in the customer record.
    """
    try:
        summary = get_customer_summary(customer["id"])
        payments = get_customer_payments(customer["id"])
        return summary, payments, True
    except LoanApiError:
        logger.warning("Falling back to local summary for customer %s", customer["id"])
        return build_customer_summary(customer), customer.get("payments") or [], False


def build_payment_history(payments):
    rows = []
    for p in sorted(payments, key=lambda p: p["date"], reverse=True):
        rows.append({
            "Payment": f"#{p.get('id')}",
            "Date": p["date"].strftime("%d %b %Y, %H:%M"),
            "Amount": money(p["amount"]),
        })
    return rows


def build_monthly_rows(monthly_totals):
    return [
        {"Month": month_key_to_label(key), "Collected": money(amount)}
        for key, amount in sorted_monthly_totals(monthly_totals)
    ]


# ==================================================
# MAIN UI
# ==================================================
def render_customer_details(state):
    customer = selected_customer(state)

    if st.button("⬅️ Back to Dashboard"):
        clear_selection(state)
        reload_customers(state)
        st.rerun()

    if customer is None:
        st.info("This customer is no longer available.")
        return

    st.subheader(f"👤 {customer['name']}")
    st.caption(f"Loan #{customer['loan_no']}")

    summary, payments, authoritative = load_customer_data(customer)
    if not authoritative:
        st.warning("Could not reach the backend. Showing figures from the last loaded data.")

    progress = progress_percentage(summary["total_paid"], summary["loan_amount"])
    fully_paid = summary["remaining"] <= 0

    # ==================================================
    # 📊 SUMMARY
    # ==================================================
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Loan Amount", money(summary["loan_amount"]))
    c2.metric("Total Paid", money(summary["total_paid"]))
    c3.metric("Remaining", money(summary["remaining"]))
    c4.metric("Status", "Complete" if fully_paid else "Active")

    st.progress(int(display_progress(progress)), text=f"Progress {progress:.1f}%")
    render_status(st, classify_status(progress, summary["remaining"]))

    # ==================================================
    # 🧾 CUSTOMER INFO
    # ==================================================
    st.markdown("---")
    st.markdown("### 🧾 Customer Information")
    i1, i2, i3 = st.columns(3)
    i1.write(f"**Phone**  \n{customer['mobile']}")
    i2.write(f"**Address**  \n{customer.get('address') or '—'}")
    i3.write(f"**Loan Number**  \n{customer['loan_no']}")

    # ==================================================
    # 💰 ADD PAYMENT
    # ==================================================
    st.markdown("---")
    if state["show_add_payment"]:
        if render_add_payment_form(state, customer):
            state["show_add_payment"] = False
            reload_customers(state)
            st.rerun()
    elif not fully_paid:
        if st.button("➕ Add Payment", type="primary", disabled=not authoritative):
            state["show_add_payment"] = True
            st.rerun()

    # ==================================================
    # 📅 MONTHLY SUMMARY
    # ==================================================
    st.markdown("---")
    m1, m2 = st.columns([1, 2])

    with m1:
        st.markdown("### 📅 Monthly Summary")
        monthly = build_monthly_rows(summary["monthly_totals"])
        if monthly:
            st.dataframe(pd.DataFrame(monthly), use_container_width=True, hide_index=True)
        else:
            st.info("No payments recorded yet.")

    # ==================================================
    # 📋 PAYMENT HISTORY
    # ==================================================
    with m2:
        st.markdown("### 📋 Recent Payments")
        history = build_payment_history(payments)
        if history:
            st.dataframe(pd.DataFrame(history), use_container_width=True, hide_index=True)
        else:
            st.info("No payments recorded yet.")

    # ==================================================
    # 📄 STATEMENT EXPORT
    # ==================================================
    st.markdown("---")
    st.markdown("### 📄 Statement")

    e1, e2 = st.columns(2)
    if e1.button("Generate PDF"):
        path = export_statement_pdf(customer, summary, payments)
        e1.download_button("Download PDF", path.read_bytes(), file_name=path.name)
    if e2.button("Generate DOCX"):
        path = export_statement_docx(customer, summary, payments)
        e2.download_button("Download DOCX", path.read_bytes(), file_name=path.name)
