# tests/test_loan_api.py

from datetime import datetime

import pytest
import requests

import core.loan_api as api
from core.customer_filter import filter_customers


class FakeResponse:
    def __init__(self, payload, status=200):
        self.payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.payload


def _fake_backend(monkeypatch, payload, status=200):
    calls = []

    def fake_request(method, url, json=None, timeout=None):
        calls.append({"method": method, "url": url, "json": json, "timeout": timeout})
        return FakeResponse(payload, status)

    monkeypatch.setattr(api.requests, "request", fake_request)
    monkeypatch.setattr(api.settings, "API_BASE_URL", "http://backend.test")
    return calls


def test_list_customers_normalizes_wire_format(monkeypatch):
    calls = _fake_backend(monkeypatch, [
        {
            "id": 1,
            "name": "Ravi",
            "address": None,
            "mobile": "9876543210",
            "loanNo": "LN-1",
            "loanAmount": 10000,
            "payments": [
                {"id": 5, "customerId": 1, "amount": 3000, "date": "2024-03-05T10:15:00.000Z"},
            ],
        },
        {"id": 2, "name": "Sita", "mobile": "9", "loanNo": "LN-2", "loanAmount": 500},
    ])

    customers = api.list_customers()

    assert calls[0]["method"] == "GET"
    assert calls[0]["url"] == "http://backend.test/customers"

    ravi, sita = customers
    assert ravi["loan_no"] == "LN-1"
    assert ravi["loan_amount"] == 10000
    assert ravi["address"] == ""
    assert ravi["payments"][0]["customer_id"] == 1
    assert ravi["payments"][0]["date"] == datetime(2024, 3, 5, 10, 15)
    assert sita["payments"] == []


def test_summary_keys_are_snake_case(monkeypatch):
    calls = _fake_backend(monkeypatch, {
        "customer": "Ravi",
        "loanAmount": 10000,
        "totalPaid": 5000,
        "remaining": 5000,
        "monthlyTotals": {"2024-03": 5000},
    })

    summary = api.get_customer_summary(1)

    assert calls[0]["url"] == "http://backend.test/customers/1/summary"
    assert summary["total_paid"] == 5000
    assert summary["monthly_totals"] == {"2024-03": 5000}


def test_get_customer_payments(monkeypatch):
    calls = _fake_backend(monkeypatch, [
        {"id": 9, "customerId": 3, "amount": 250, "date": "2024-01-31T23:59:00"},
    ])

    payments = api.get_customer_payments(3)

    assert calls[0]["url"] == "http://backend.test/customers/3/payments"
    assert payments[0]["amount"] == 250
    assert payments[0]["date"].day == 31


def test_create_customer_posts_camel_case(monkeypatch):
    calls = _fake_backend(monkeypatch, {
        "id": 11, "name": "Meena", "address": "Main Rd", "mobile": "955",
        "loanNo": "LN-11", "loanAmount": 2000,
    })

    customer = api.create_customer(" Meena ", "Main Rd", "955", "LN-11", 2000)

    assert calls[0]["method"] == "POST"
    assert calls[0]["json"] == {
        "name": "Meena",
        "address": "Main Rd",
        "mobile": "955",
        "loanNo": "LN-11",
        "loanAmount": 2000,
    }
    assert customer["id"] == 11


def test_invalid_customer_never_reaches_backend(monkeypatch):
    calls = _fake_backend(monkeypatch, {})

    with pytest.raises(api.ValidationError) as exc:
        api.create_customer("", "", "  ", "LN-1", 0)

    assert set(exc.value.errors) == {"name", "mobile", "loan_amount"}
    assert calls == []


def test_create_payment(monkeypatch):
    calls = _fake_backend(monkeypatch, {
        "id": 3, "customerId": 1, "amount": 500, "date": "2024-06-01T08:00:00",
    })

    payment = api.create_payment(1, 500)

    assert calls[0]["url"] == "http://backend.test/payments"
    assert calls[0]["json"] == {"customerId": 1, "amount": 500}
    assert payment["customer_id"] == 1


@pytest.mark.parametrize("amount", [0, -10, None, 0.5, 99.9, float("inf"), "500"])
def test_invalid_payment_amount_is_rejected_locally(monkeypatch, amount):
    calls = _fake_backend(monkeypatch, {})

    with pytest.raises(api.ValidationError):
        api.create_payment(1, amount)

    assert calls == []


def test_http_error_becomes_loan_api_error(monkeypatch):
    _fake_backend(monkeypatch, {"error": "boom"}, status=500)

    with pytest.raises(api.LoanApiError):
        api.list_customers()


def test_connection_error_becomes_loan_api_error(monkeypatch):
    def refuse(*args, **kwargs):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(api.requests, "request", refuse)

    with pytest.raises(api.LoanApiError):
        api.create_payment(1, 100)


def test_malformed_record_becomes_loan_api_error(monkeypatch):
    _fake_backend(monkeypatch, [{"id": 1, "name": "No amount"}])

    with pytest.raises(api.LoanApiError):
        api.list_customers()


@pytest.mark.parametrize("loan_amount", [0.9, 1500.5, -1])
def test_fractional_loan_amount_is_rejected_locally(monkeypatch, loan_amount):
    """
    Regression test:
    0.9 used to pass validation and go out as loanAmount 0
    """
    calls = _fake_backend(monkeypatch, {})

    with pytest.raises(api.ValidationError) as exc:
        api.create_customer("Asha", "", "9876543210", "LN-7", loan_amount)

    assert set(exc.value.errors) == {"loan_amount"}
    assert calls == []


def test_whole_float_amount_is_sent_as_int(monkeypatch):
    calls = _fake_backend(monkeypatch, {
        "id": 4, "customerId": 1, "amount": 500, "date": "2024-06-01T08:00:00",
    })

    api.create_payment(1, 500.0)

    assert calls[0]["json"] == {"customerId": 1, "amount": 500}
    assert isinstance(calls[0]["json"]["amount"], int)


def test_null_text_fields_stay_searchable(monkeypatch):
    _fake_backend(monkeypatch, [
        {"id": 1, "name": None, "address": None, "mobile": None,
         "loanNo": None, "loanAmount": 1000},
        {"id": 2, "name": "Ravi", "mobile": "9876543210",
         "loanNo": "LN-2", "loanAmount": 1000},
    ])

    customers = api.list_customers()

    assert customers[0]["name"] == ""
    assert customers[0]["mobile"] == ""
    assert customers[0]["loan_no"] == ""
    assert [c["id"] for c in filter_customers(customers, "98", "all")] == [2]
