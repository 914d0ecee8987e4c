#tests/test_payments.py
from datetime import date

import pytest

from tracker.payments import amend_payment, apply_payment, payments_this_month, reverse_payment
from tracker.schemas import Debt, Payment

def sample_debt(balance=10_000):
    return Debt(id=1, name="Visa", balance_cents=balance, apr_bps=1999, min_payment_cents=2_500)

def pay(amount, paid_on=date(2026, 10, 3), debt_id=1, pid=1):
    return Payment(id=pid, debt_id=debt_id, paid_on=paid_on, amount_cents=amount)

def test_apply_payment_decrements_balance():
    debt = sample_debt()
    updated = apply_payment(debt, pay(4_000))
    assert updated.balance_cents == 6_000
    assert debt.balance_cents == 10_000

def test_apply_payment_floors_at_zero():
    assert apply_payment(sample_debt(), pay(15_000)).balance_cents == 0

def test_reverse_payment_restores_balance():
    debt = apply_payment(sample_debt(), pay(4_000))
    assert reverse_payment(debt, pay(4_000)).balance_cents == 10_000

def test_amend_payment_adjusts_by_difference():
    debt = apply_payment(sample_debt(), pay(4_000))
    debt, updated = amend_payment(debt, pay(4_000), 1_000)
    assert debt.balance_cents == 9_000
    assert updated.amount_cents == 1_000
    debt, _ = amend_payment(debt, updated, 50_000)
    assert debt.balance_cents == 0

def test_amend_payment_rejects_non_positive_amount():
    with pytest.raises(ValueError):
        amend_payment(sample_debt(), pay(1_000), 0)

def test_payment_for_another_debt_is_rejected():
    with pytest.raises(ValueError):
        apply_payment(sample_debt(), pay(1_000, debt_id=2))
    with pytest.raises(ValueError):
        reverse_payment(sample_debt(), pay(1_000, debt_id=2))

def test_payment_amount_must_be_positive():
    with pytest.raises(ValueError):
        Payment(id=1, debt_id=1, paid_on=date(2026, 10, 1), amount_cents=0)

def test_payments_this_month():
    payments = [
        pay(1_000, date(2026, 10, 1), pid=1),
        pay(2_500, date(2026, 10, 17), pid=2),
        pay(9_999, date(2026, 9, 30), pid=3),
        pay(4_000, date(2025, 10, 5), pid=4),
    ]
    assert payments_this_month(payments, date(2026, 10, 18)) == (2, 3_500)
    assert payments_this_month([], date(2026, 10, 18)) == (0, 0)
