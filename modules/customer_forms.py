import logging

import streamlit as st

from core import settings
from core.loan_api import (
    LoanApiError,
    ValidationError,
    create_customer,
    create_payment,
)

logger = logging.getLogger(__name__)


def _show_errors(errors):
    for message in errors.values():
        st.error(message)


# ==================================================
# ➕ ADD CUSTOMER
# ==================================================
def render_add_customer_form(state) -> bool:
    """
    Returns True once a customer was created on the backend.
    """
    st.markdown("### ➕ Add Customer")

    with st.form("add_customer_form", clear_on_submit=True):
        c1, c2 = st.columns(2)

        with c1:
            name = st.text_input("Full Name *")
            mobile = st.text_input("Mobile Number *")
            loan_no = st.text_input("Loan Number *")

        with c2:
            loan_amount = st.number_input(
                f"Loan Amount ({settings.CURRENCY_SYMBOL}) *",
                min_value=0,
                step=1000,
            )
            address = st.text_area("Address")

        c1, c2 = st.columns(2)
        submitted = c1.form_submit_button("Save Customer")
        cancelled = c2.form_submit_button("Cancel")

    if cancelled:
        state["show_add_customer"] = False
        st.rerun()

    if not submitted:
        return False

    try:
        customer = create_customer(
            name=name,
            address=address,
            mobile=mobile,
            loan_no=loan_no,
            loan_amount=loan_amount,
        )
    except ValidationError as e:
        _show_errors(e.errors)
        return False
    except LoanApiError:
        st.error("Failed to add customer. Please check if the backend server is running.")
        return False

    logger.info("Created customer %s (%s)", customer["id"], customer["loan_no"])
    st.success(f"Customer **{customer['name']}** added ✅")
    return True


# ==================================================
# 💰 ADD PAYMENT
# ==================================================
def render_add_payment_form(state, customer) -> bool:
    st.markdown("### 💰 Add Payment")
    st.caption(f"Record a new payment for {customer['name']}")

    with st.form("add_payment_form", clear_on_submit=True):
        amount = st.number_input(
            f"Payment Amount ({settings.CURRENCY_SYMBOL}) *",
            min_value=0,
            step=100,
        )
        c1, c2 = st.columns(2)
        submitted = c1.form_submit_button("Add Payment")
        cancelled = c2.form_submit_button("Cancel")

    if cancelled:
        state["show_add_payment"] = False
        st.rerun()

    if not submitted:
        return False

    try:
        create_payment(customer["id"], amount)
    except ValidationError as e:
        _show_errors(e.errors)
        return False
    except LoanApiError:
        st.error("Failed to add payment. Please try again.")
        return False

    st.success(
        f"{settings.CURRENCY_SYMBOL}{amount:,.0f} payment has been recorded for {customer['name']}."
    )
    return True
