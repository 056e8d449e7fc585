# core/customer_filter.py
"""
Search + status filtering for the customer list.
Pure functions: input order is preserved and the source list is never touched.
"""

from typing import Dict, Any, List

from core.loan_metrics import customer_metrics

STATUS_FILTERS = ("all", "active", "completed")


def matches_search(customer: Dict[str, Any], search_term: str) -> bool:
    term = search_term.lower()

    return (
        term in customer.get("name", "").lower()
        or term in customer.get("loan_no", "").lower()
        # phone numbers have no case
        or search_term in customer.get("mobile", "")
    )


def matches_status(customer: Dict[str, Any], status_filter: str) -> bool:
    if status_filter not in STATUS_FILTERS:
        raise ValueError(f"Unknown status filter: {status_filter}")

    if status_filter == "all":
        return True

    remaining = customer_metrics(customer)["remaining"]

    if status_filter == "completed":
        return remaining <= 0
    return remaining > 0


def filter_customers(
    customers: List[Dict[str, Any]],
    search_term: str = "",
    status_filter: str = "all",
) -> List[Dict[str, Any]]:
    if status_filter not in STATUS_FILTERS:
        raise ValueError(f"Unknown status filter: {status_filter}")

    return [
        c for c in customers
        if matches_search(c, search_term)
        and matches_status(c, status_filter)
    ]
