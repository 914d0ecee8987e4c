#tests/test_debts.py
import pytest
from pydantic import ValidationError

from tracker.debts import (
    debt_totals,
    filter_debts,
    parse_debts,
    pretty_debts_table,
    summarize_debts,
    weighted_apr_bps,
)
from tracker.optimization import compute_avalanche_plan
from tracker.schemas import Debt
from tracker.utils import bps_to_apr, dollars_to_cents, format_debt_kind, money

def sample_debts():
    return [
        Debt(id=1, name="Visa", kind="card", balance_cents=300_000, apr_bps=1999, min_payment_cents=9_000, due_day=5),
        Debt(id=2, name="Car", kind="auto_loan", balance_cents=900_000, apr_bps=649, min_payment_cents=30_000, due_day=20),
        Debt(id=3, name="Amex", kind="card", balance_cents=0, apr_bps=2099, min_payment_cents=0, due_day=12, active=False),
    ]

def test_debt_validation_limits():
    with pytest.raises(ValidationError):
        Debt(id=1, name="Bad", balance_cents=-1, apr_bps=0, min_payment_cents=0)
    with pytest.raises(ValidationError):
        Debt(id=1, name="Bad", balance_cents=0, apr_bps=0, min_payment_cents=0, due_day=29)
    with pytest.raises(ValidationError):
        Debt(id=1, name="Bad", balance_cents=0, apr_bps=-5, min_payment_cents=0)

def test_parse_debts_reports_errors_instead_of_raising():
    debts, error = parse_debts([{"id": 1, "name": "Visa", "balance_cents": 100, "apr_bps": 0, "min_payment_cents": 0}])
    assert error is None and debts[0].name == "Visa"
    debts, error = parse_debts([{"id": 1, "name": "Visa", "balance_cents": 100, "apr_bps": 0,
                                 "min_payment_cents": 0, "due_day": 31}])
    assert debts == [] and "due_day" in error
    assert parse_debts({"id": 1})[1] == "Debts must be a list of objects."

def test_filter_default_order_is_active_first_then_name():
    names = [d.name for d in filter_debts(sample_debts())]
    assert names == ["Car", "Visa", "Amex"]

def test_filter_by_search_kind_and_status():
    debts = sample_debts()
    assert [d.id for d in filter_debts(debts, search="a")] == [2, 1]
    assert [d.id for d in filter_debts(debts, kind="card")] == [1, 3]
    assert [d.id for d in filter_debts(debts, status="closed")] == [3]
    assert [d.id for d in filter_debts(debts, status="active", kind="card")] == [1]

def test_filter_sort_keys():
    debts = sample_debts()
    assert [d.id for d in filter_debts(debts, sort_by="balance_desc")] == [2, 1, 3]
    assert [d.id for d in filter_debts(debts, sort_by="apr_asc")] == [2, 1, 3]
    assert [d.id for d in filter_debts(debts, sort_by="due_desc")] == [2, 3, 1]
    assert [d.id for d in filter_debts(debts, sort_by="type_asc")] == [2, 1, 3]
    assert [d.id for d in filter_debts(debts, sort_by="min_asc")] == [3, 1, 2]
    assert [d.id for d in filter_debts(debts, sort_by="bogus")] == [2, 1, 3]

def test_debt_totals_and_weighted_apr():
    totals = debt_totals(sample_debts())
    assert totals["total_cents"] == 1_200_000
    assert totals["active_total_cents"] == 1_200_000
    assert [d.id for d in totals["active_debts"]] == [1, 2]
    assert weighted_apr_bps(sample_debts()) == (1999 * 300_000 + 649 * 900_000) / 1_200_000
    assert weighted_apr_bps([]) == 0.0

def test_summaries_and_table():
    text = summarize_debts(sample_debts())
    assert "Total debts: $12,000.00" in text
    assert "Total minimums: $390.00/month" in text
    assert summarize_debts([]) == "No debts provided."
    table = pretty_debts_table(sample_debts())
    assert list(table["Type"]) == ["Credit Card", "Auto Loan", "Credit Card"]
    assert list(table["Status"]) == ["Active", "Active", "Closed"]

def test_formatting_helpers():
    assert money(123_456_78) == "$123,456.78"
    assert money(-5) == "-$0.05"
    assert bps_to_apr(1999) == "19.99%"
    assert format_debt_kind("line_of_credit") == "Line of Credit"
    assert format_debt_kind("boat") == "boat"
    assert dollars_to_cents("12.5") == 1250

def test_parse_debts_rejects_duplicate_ids():
    raw = [
        {"id": 1, "name": "Visa", "balance_cents": 1_000, "apr_bps": 0, "min_payment_cents": 0},
        {"id": 1, "name": "Loan", "balance_cents": 5_000, "apr_bps": 0, "min_payment_cents": 0},
    ]
    assert parse_debts(raw) == ([], "Duplicate debt id 1")
    raw[1]["id"] = 2
    debts, error = parse_debts(raw)
    assert error is None
    # both balances survive into the plan
    plan = compute_avalanche_plan(debts, 100_000)
    assert sum(m.total_paid_cents for m in plan.months) == 6_000

def test_dollars_to_cents_rejects_non_finite():
    for value in ("inf", "-inf", "nan", float("inf")):
        with pytest.raises(ValueError):
            dollars_to_cents(value)
