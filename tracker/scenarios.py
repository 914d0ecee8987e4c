# tracker/scenarios.py
from typing import Any, Dict, List

from .config import MAX_PLAN_MONTHS
from .optimization import compute_avalanche_plan, compute_snowball_plan, generate_plan
from .schemas import Debt, RepaymentPlan, Strategy

def _rank(plan: RepaymentPlan):
    # Paid-off plans beat unfinished ones, then less interest, then fewer months.
    return (not plan.converged, plan.total_interest_cents, plan.payoff_months)

def compare_strategies(debts: List[Debt], budget_cents: int, max_months: int = MAX_PLAN_MONTHS) -> Dict[str, Any]:
    aval = compute_avalanche_plan(debts, budget_cents, max_months)
    snow = compute_snowball_plan(debts, budget_cents, max_months)
    best = min((aval, snow), key=_rank)
    return {
        "budget_cents": budget_cents,
        "avalanche": aval,
        "snowball": snow,
        "best_plan": best.strategy,
        "interest_difference_cents": abs(aval.total_interest_cents - snow.total_interest_cents),
    }

def compare_baseline_vs_extra(debts: List[Debt], budget_cents: int, extra_cents: int = 0,
                              strategy: Strategy = Strategy.AVALANCHE,
                              max_months: int = MAX_PLAN_MONTHS) -> Dict[str, Any]:
    base = generate_plan(debts, budget_cents, strategy, max_months)
    scenario = generate_plan(debts, budget_cents + max(0, extra_cents), strategy, max_months)
    return {
        "baseline": base,
        "scenario": scenario,
        "interest_savings_cents": max(0, base.total_interest_cents - scenario.total_interest_cents),
        "months_saved": max(0, base.payoff_months - scenario.payoff_months),
    }
