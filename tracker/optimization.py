# tracker/optimization.py
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional

from .config import MAX_PLAN_MONTHS
from .schemas import Debt, RepaymentMonth, RepaymentPlan, Strategy

logger = logging.getLogger(__name__)

# 12 months * 10000 bps
_BPS_PER_MONTH = Decimal(120000)

def _monthly_interest(balance_cents: int, apr_bps: int) -> int:
    """Interest for one month, rounded half away from zero to whole cents."""
    if balance_cents <= 0 or apr_bps <= 0:
        return 0
    exact = Decimal(balance_cents) * Decimal(apr_bps) / _BPS_PER_MONTH
    return max(0, int(exact.quantize(Decimal(1), rounding=ROUND_HALF_UP)))

def _participating(debts: List[Debt]) -> List[Debt]:
    return [d for d in debts if d.active and d.balance_cents > 0]

def _is_all_cleared(balances: Dict[int, int]) -> bool:
    return all(b <= 0 for b in balances.values())

def _priority_order(debts: List[Debt], balances: Dict[int, int], strategy: Strategy) -> List[Debt]:
    """Debts still owing, best target first. sorted() is stable so full ties keep input order."""
    owing = [d for d in debts if balances[d.id] > 0]
    if strategy == Strategy.SNOWBALL:
        return sorted(owing, key=lambda d: (balances[d.id], -d.apr_bps))
    return sorted(owing, key=lambda d: (-d.apr_bps, balances[d.id]))

def parse_strategy(text: Optional[str]) -> Strategy:
    """Unknown or empty strategy names fall back to avalanche."""
    try:
        return Strategy((text or "").strip().lower())
    except ValueError:
        return Strategy.AVALANCHE

def generate_plan(debts: List[Debt], monthly_budget_cents: int, strategy: Strategy,
                  max_months: int = MAX_PLAN_MONTHS) -> RepaymentPlan:
    """
    Simulate month-by-month payoff of ``debts`` with a fixed monthly budget.

    Each month: accrue interest on every balance, pay minimums (capped by
    what is left of the budget and by the balance), then pour the remainder
    into the top-priority debt, re-ranking after every payment. Inactive and
    zero-balance debts are ignored. The caller's debts are never modified.

    ``payoff_months`` is the number of months needed to clear everything, or
    ``max_months`` when the horizon runs out; ``converged`` tells the two apart.
    """
    strategy = Strategy(strategy)
    active = _participating(debts)
    balances = {d.id: d.balance_cents for d in active}

    months: List[RepaymentMonth] = []
    total_interest = 0

    for mi in range(1, max_months + 1):
        if _is_all_cleared(balances):
            logger.debug("%s plan: paid off in %d months, interest %d",
                         strategy.value, mi - 1, total_interest)
            return RepaymentPlan(strategy=strategy, months=months, total_interest_cents=total_interest,
                                 payoff_months=mi - 1, converged=True)

        month = RepaymentMonth(month_index=mi)

        for d in active:
            interest = _monthly_interest(balances[d.id], d.apr_bps)
            balances[d.id] += interest
            month.interest_cents += interest
        total_interest += month.interest_cents

        remaining = monthly_budget_cents

        # Minimums go out in priority order too, so an underfunded budget
        # still covers the strategy's target first.
        for d in _priority_order(active, balances, strategy):
            pay = min(d.min_payment_cents, remaining, balances[d.id])
            if pay > 0:
                balances[d.id] -= pay
                month.payments[d.id] = month.payments.get(d.id, 0) + pay
                month.total_paid_cents += pay
                remaining -= pay

        while remaining > 0:
            order = _priority_order(active, balances, strategy)
            if not order:
                break
            target = order[0]
            pay = min(remaining, balances[target.id])
            balances[target.id] -= pay
            month.payments[target.id] = month.payments.get(target.id, 0) + pay
            month.total_paid_cents += pay
            remaining -= pay

        month.balances = {d.id: balances[d.id] for d in active}
        months.append(month)

    converged = _is_all_cleared(balances)
    if not converged:
        logger.info("%s plan: %d cents still owing after %d months",
                    strategy.value, sum(balances.values()), max_months)
    return RepaymentPlan(strategy=strategy, months=months, total_interest_cents=total_interest,
                         payoff_months=max_months, converged=converged)

def compute_avalanche_plan(debts: List[Debt], budget_cents: int, max_months: int = MAX_PLAN_MONTHS) -> RepaymentPlan:
    return generate_plan(debts, budget_cents, Strategy.AVALANCHE, max_months)

def compute_snowball_plan(debts: List[Debt], budget_cents: int, max_months: int = MAX_PLAN_MONTHS) -> RepaymentPlan:
    return generate_plan(debts, budget_cents, Strategy.SNOWBALL, max_months)
