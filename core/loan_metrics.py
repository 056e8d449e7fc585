# core/loan_metrics.py
"""
READ-ONLY loan calculations.
No Streamlit.
No network.
Safe to import anywhere.
"""

from collections import defaultdict
from datetime import date
from typing import Dict, Any, List, Optional, Tuple

from dateutil.relativedelta import relativedelta

from utils.dates import month_key

FULLY_PAID = "Fully Paid"
JUST_STARTED = "Just Started"
IN_PROGRESS = "In Progress"
ALMOST_DONE = "Almost Done"

STATUS_LABELS = (FULLY_PAID, JUST_STARTED, IN_PROGRESS, ALMOST_DONE)

# ==================================================
# CUSTOMER-LEVEL METRICS
# ==================================================
def total_paid(payments: List[Dict[str, Any]]) -> int:
    return sum(p["amount"] for p in payments)


def progress_percentage(paid: float, loan_amount: float) -> float:
    return paid / loan_amount * 100


def loan_metrics(loan_amount: int, payments: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    remaining goes negative on overpayment and progress can pass 100.
    Neither is clamped here.
    """
    paid = total_paid(payments)

    return {
        "total_paid": paid,
        "remaining": loan_amount - paid,
        "progress_percentage": progress_percentage(paid, loan_amount),
    }


def customer_metrics(customer: Dict[str, Any]) -> Dict[str, Any]:
    return loan_metrics(customer["loan_amount"], customer.get("payments") or [])


def display_progress(progress_percentage: float) -> float:
    # progress bars are bounded, the metric itself is not
    return min(progress_percentage, 100)


# ==================================================
# STATUS
# ==================================================
def classify_status(progress_percentage: float, remaining: float) -> str:
    # order matters: an overpaid loan at 120% is Fully Paid, not Almost Done
    if remaining <= 0:
        return FULLY_PAID
    if progress_percentage < 25:
        return JUST_STARTED
    if progress_percentage < 75:
        return IN_PROGRESS
    return ALMOST_DONE


STATUS_STYLES = {
    FULLY_PAID: {"color": "#16a34a", "badge": "🟢"},
    JUST_STARTED: {"color": "#dc2626", "badge": "🔴"},
    IN_PROGRESS: {"color": "#d97706", "badge": "🟡"},
    ALMOST_DONE: {"color": "#2563eb", "badge": "🔵"},
}


def status_style(label: str) -> Dict[str, str]:
    return STATUS_STYLES[label]


def status_badge(label: str) -> str:
    return f"{STATUS_STYLES[label]['badge']} {label}"


# ==================================================
# MONTHLY TOTALS
# ==================================================
def monthly_totals(payments: List[Dict[str, Any]]) -> Dict[str, int]:
    """
    Returns:
    {
        "YYYY-MM": summed amount
    }
    Only months that actually have payments appear.
    """
    buckets = defaultdict(int)

    for p in payments:
        buckets[month_key(p["date"])] += p["amount"]

    return dict(buckets)


def sorted_monthly_totals(totals: Dict[str, int]) -> List[Tuple[str, int]]:
    """
    Most recent month first. Keys are zero-padded so string order is date order.
    """
    return sorted(totals.items(), key=lambda item: item[0], reverse=True)


def build_customer_summary(customer: Dict[str, Any]) -> Dict[str, Any]:
    """
    Local stand-in for the backend summary when only raw payments are at hand.
    """
    payments = customer.get("payments") or []
    metrics = customer_metrics(customer)

    return {
        "customer": customer.get("name", ""),
        "loan_amount": customer["loan_amount"],
        "total_paid": metrics["total_paid"],
        "remaining": metrics["remaining"],
        "monthly_totals": monthly_totals(payments),
    }


# ==================================================
# PORTFOLIO-LEVEL METRICS
# ==================================================
def portfolio_stats(customers: List[Dict[str, Any]]) -> Dict[str, int]:
    """
    Always computed over the full collection, never the filtered view.
    """
    total_loan_amount = 0
    total_collected = 0
    completed_loans = 0

    for customer in customers:
        metrics = customer_metrics(customer)
        total_loan_amount += customer["loan_amount"]
        total_collected += metrics["total_paid"]

        if metrics["remaining"] <= 0:
            completed_loans += 1

    return {
        "total_customers": len(customers),
        "total_loan_amount": total_loan_amount,
        "total_collected": total_collected,
        "total_remaining": total_loan_amount - total_collected,
        "completed_loans": completed_loans,
    }


def collections_trend(
    customers: List[Dict[str, Any]],
    months: int = 6,
    today: Optional[date] = None,
) -> List[Dict[str, Any]]:
    """
    Collected amount per month across the whole book, oldest first.
    Months without payments are listed with 0 so the chart has no gaps.
    """
    today = today or date.today()

    collected = defaultdict(int)
    for customer in customers:
        for key, amount in monthly_totals(customer.get("payments") or []).items():
            collected[key] += amount

    trend = []
    for i in range(months - 1, -1, -1):
        key = month_key(today - relativedelta(months=i))
        trend.append({"Month": key, "Collected": collected.get(key, 0)})

    return trend
