# tracker/budget.py
from datetime import date
from typing import Iterable, List, Optional

from .schemas import Budget, BudgetCategory, BudgetExpense, CategorySpending, Debt

def sum_of_min_payments(debts: Iterable[Debt]) -> int:
    """Monthly minimums owed on active debts that still carry a balance."""
    return sum(d.min_payment_cents for d in debts if d.active and d.balance_cents > 0)

def non_debt_limits(categories: Iterable[BudgetCategory]) -> int:
    return sum(c.limit_cents for c in categories if not c.is_debt_payoff)

def has_debt_payoff_category(categories: Iterable[BudgetCategory]) -> bool:
    return any(c.is_debt_payoff for c in categories)

def suggested_extra_payment(income_cents: int, categories: List[BudgetCategory], min_payments_cents: int) -> int:
    """
    Extra money the budget leaves for debt on top of the minimums.

    With a debt-payoff category everything not allotted to the other
    categories counts as available for debt. Without one, only income not
    allotted to any category counts, and only when the limits leave room.
    """
    if has_debt_payoff_category(categories):
        available_for_debt = income_cents - non_debt_limits(categories)
        return max(0, available_for_debt - min_payments_cents)
    total_limits = sum(c.limit_cents for c in categories)
    if total_limits >= income_cents:
        return 0
    return max(0, income_cents - total_limits - min_payments_cents)

def suggested_plan_budget(budget: Optional[Budget], categories: List[BudgetCategory]) -> int:
    """Monthly amount to pre-fill the payoff plan with: income minus non-debt limits."""
    if budget is None or budget.income_cents <= 0:
        return 0
    return max(0, budget.income_cents - non_debt_limits(categories))

def find_budget(budgets: Iterable[Budget], year: int, month: int) -> Optional[Budget]:
    for b in budgets:
        if b.year == year and b.month == month:
            return b
    return None

def suggested_plan_budget_for_month(budgets: Iterable[Budget], categories: Iterable[BudgetCategory],
                                    today: Optional[date] = None) -> int:
    today = today or date.today()
    budget = find_budget(budgets, today.year, today.month)
    if budget is None:
        return 0
    own = [c for c in categories if c.budget_id == budget.id]
    return suggested_plan_budget(budget, own)

def total_spent_for_category(expenses: Iterable[BudgetExpense], category_id: int) -> int:
    return sum(e.amount_cents for e in expenses if e.category_id == category_id)

def category_spending(categories: List[BudgetCategory], expenses: List[BudgetExpense],
                      income_cents: int, min_payments_cents: int) -> List[CategorySpending]:
    """Per-category spent/remaining, in sort order, with the payoff suggestion on the debt category."""
    suggestion = suggested_extra_payment(income_cents, categories, min_payments_cents)
    rows: List[CategorySpending] = []
    for c in sorted(categories, key=lambda c: (c.sort_order, c.id)):
        spent = total_spent_for_category(expenses, c.id)
        rows.append(CategorySpending(
            category=c,
            spent_cents=spent,
            remaining_cents=c.limit_cents - spent,
            suggested_payoff_cents=suggestion if c.is_debt_payoff else None,
        ))
    return rows
