# core/view_state.py
"""
Explicit dashboard state.

Pages receive this dict instead of reading scattered globals, so the
filter and metric functions only ever see their declared inputs.
Reloads follow last-request-wins: a response is applied only if no newer
reload was started after it.
"""

import logging
from typing import Dict, Any, List, Optional

from core.customer_filter import STATUS_FILTERS

logger = logging.getLogger(__name__)


def new_view_state() -> Dict[str, Any]:
    return {
        "customers": [],
        "selected_customer_id": None,
        "search_term": "",
        "status_filter": "all",
        "show_add_customer": False,
        "show_add_payment": False,
        "request_generation": 0,
    }


# ==================================================
# RELOADS
# ==================================================
def begin_reload(state: Dict[str, Any]) -> int:
    state["request_generation"] += 1
    return state["request_generation"]


def apply_customers(state: Dict[str, Any], customers: List[Dict[str, Any]], token: int) -> bool:
    if token != state["request_generation"]:
        logger.debug(
            "Dropping stale customer list (token %s, latest %s)",
            token, state["request_generation"],
        )
        return False

    # replaced wholesale, never patched
    state["customers"] = list(customers)
    return True


# ==================================================
# NAVIGATION / FILTERS
# ==================================================
def select_customer(state: Dict[str, Any], customer_id) -> None:
    state["selected_customer_id"] = customer_id
    state["show_add_payment"] = False


def clear_selection(state: Dict[str, Any]) -> None:
    state["selected_customer_id"] = None
    state["show_add_payment"] = False


def selected_customer(state: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    customer_id = state["selected_customer_id"]
    if customer_id is None:
        return None

    for c in state["customers"]:
        if c["id"] == customer_id:
            return c
    return None


def set_status_filter(state: Dict[str, Any], status_filter: str) -> None:
    if status_filter not in STATUS_FILTERS:
        raise ValueError(f"Unknown status filter: {status_filter}")
    state["status_filter"] = status_filter


def is_filtering(state: Dict[str, Any]) -> bool:
    return bool(state["search_term"]) or state["status_filter"] != "all"
