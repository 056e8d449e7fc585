# core/loan_api.py
"""
HTTP client for the loan backend.

The backend owns customers, payments and the authoritative summary.
This module only validates input, calls it, and normalizes responses into
plain dicts with snake_case keys and datetime payment dates.
"""

import logging
import math
from typing import Dict, Any, List

import requests

from core import settings
from utils.dates import parse_timestamp

logger = logging.getLogger(__name__)


class LoanApiError(Exception):
    """Backend unreachable, returned an error status, or sent unreadable data."""


class ValidationError(ValueError):
    def __init__(self, errors: Dict[str, str]):
        self.errors = errors
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))


# ==================================================
# VALIDATION (before any request is made)
# ==================================================
def _is_positive_whole(value) -> bool:
    # 0.5 would be truncated to 0 on the wire
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    if isinstance(value, float) and not math.isfinite(value):
        return False
    return value > 0 and int(value) == value


def validate_customer(name, mobile, loan_no, loan_amount) -> Dict[str, str]:
    errors = {}
    if not (name or "").strip():
        errors["name"] = "Name is required"
    if not (mobile or "").strip():
        errors["mobile"] = "Mobile number is required"
    if not (loan_no or "").strip():
        errors["loan_no"] = "Loan number is required"
    if not _is_positive_whole(loan_amount):
        errors["loan_amount"] = "Loan amount must be a whole number greater than 0"
    return errors


def validate_payment(amount) -> Dict[str, str]:
    errors = {}
    if not _is_positive_whole(amount):
        errors["amount"] = "Payment amount must be a whole number greater than 0"
    return errors


# ==================================================
# NORMALIZATION
# ==================================================
def normalize_payment(raw: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": raw.get("id"),
        "customer_id": raw.get("customerId"),
        "amount": raw["amount"],
        "date": parse_timestamp(raw["date"]),
    }


def normalize_customer(raw: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": raw.get("id"),
        "name": raw.get("name") or "",
        "address": raw.get("address") or "",
        "mobile": raw.get("mobile") or "",
        "loan_no": raw.get("loanNo") or "",
        "loan_amount": raw["loanAmount"],
        "payments": [normalize_payment(p) for p in raw.get("payments") or []],
    }


def normalize_summary(raw: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "customer": raw.get("customer", ""),
        "loan_amount": raw["loanAmount"],
        "total_paid": raw["totalPaid"],
        "remaining": raw["remaining"],
        "monthly_totals": dict(raw.get("monthlyTotals") or {}),
    }


# ==================================================
# TRANSPORT
# ==================================================
def _url(path: str) -> str:
    return f"{settings.API_BASE_URL}{path}"


def _request(method: str, path: str, payload: Dict[str, Any] = None):
    logger.info("%s %s", method, path)

    try:
        response = requests.request(
            method,
            _url(path),
            json=payload,
            timeout=settings.API_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        return response.json()
    except (requests.RequestException, ValueError) as e:
        logger.exception("Backend call failed: %s %s", method, path)
        raise LoanApiError(f"{method} {path} failed: {e}") from e


def _normalized(normalize, raw, what: str):
    try:
        return normalize(raw)
    except (KeyError, TypeError, ValueError) as e:
        logger.exception("Malformed %s in backend response", what)
        raise LoanApiError(f"Malformed {what} in backend response") from e


# ==================================================
# OPERATIONS
# ==================================================
def list_customers() -> List[Dict[str, Any]]:
    data = _request("GET", "/customers")
    return [_normalized(normalize_customer, c, "customer") for c in data]


def create_customer(name, address, mobile, loan_no, loan_amount) -> Dict[str, Any]:
    errors = validate_customer(name, mobile, loan_no, loan_amount)
    if errors:
        raise ValidationError(errors)

    data = _request("POST", "/customers", {
        "name": name.strip(),
        "address": (address or "").strip(),
        "mobile": mobile.strip(),
        "loanNo": loan_no.strip(),
        "loanAmount": int(loan_amount),
    })
    return _normalized(normalize_customer, data, "customer")


def get_customer_summary(customer_id) -> Dict[str, Any]:
    data = _request("GET", f"/customers/{customer_id}/summary")
    return _normalized(normalize_summary, data, "summary")


def get_customer_payments(customer_id) -> List[Dict[str, Any]]:
    data = _request("GET", f"/customers/{customer_id}/payments")
    return [_normalized(normalize_payment, p, "payment") for p in data]


def create_payment(customer_id, amount) -> Dict[str, Any]:
    errors = validate_payment(amount)
    if errors:
        raise ValidationError(errors)

    data = _request("POST", "/payments", {
        "customerId": customer_id,
        "amount": int(amount),
    })
    return _normalized(normalize_payment, data, "payment")
