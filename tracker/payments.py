# tracker/payments.py
"""
Balance bookkeeping for payments. Recording a payment lowers the debt's
balance (never below zero), deleting one puts the amount back and editing
one swaps the old amount for the new. Each helper returns an updated copy
of the debt; the persistence layer is expected to store the payment row and
the new balance in one transaction.
"""

from datetime import date
from typing import Iterable, Optional, Tuple

from .schemas import Debt, Payment


def _check_owner(debt: Debt, payment: Payment) -> None:
    if payment.debt_id != debt.id:
        raise ValueError(f"payment {payment.id} belongs to debt {payment.debt_id}, not {debt.id}")


def apply_payment(debt: Debt, payment: Payment) -> Debt:
    _check_owner(debt, payment)
    new_balance = max(0, debt.balance_cents - payment.amount_cents)
    return debt.model_copy(update={"balance_cents": new_balance})


def reverse_payment(debt: Debt, payment: Payment) -> Debt:
    _check_owner(debt, payment)
    return debt.model_copy(update={"balance_cents": debt.balance_cents + payment.amount_cents})


def amend_payment(debt: Debt, old: Payment, new_amount_cents: int) -> Tuple[Debt, Payment]:
    """Change a recorded payment's amount and adjust the balance by the difference."""
    _check_owner(debt, old)
    if new_amount_cents <= 0:
        raise ValueError("payment amount must be greater than zero")
    new_balance = max(0, debt.balance_cents + old.amount_cents - new_amount_cents)
    updated = old.model_copy(update={"amount_cents": new_amount_cents})
    return debt.model_copy(update={"balance_cents": new_balance}), updated


def payments_this_month(payments: Iterable[Payment], today: Optional[date] = None) -> Tuple[int, int]:
    """(count, total cents) of payments made in today's calendar month."""
    today = today or date.today()
    count = 0
    total = 0
    for p in payments:
        if p.paid_on.year == today.year and p.paid_on.month == today.month:
            count += 1
            total += p.amount_cents
    return count, total
