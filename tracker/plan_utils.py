# tracker/plan_utils.py
from datetime import date
from typing import Dict, List, Optional

import pandas as pd

from .schemas import Debt, RepaymentPlan
from .utils import month_year_iter

SCHEDULE_COLUMNS = ["month", "year", "calendar_month", "debt_id", "debt", "payment",
                    "balance", "month_interest_total", "total_paid_month"]

def plan_to_dataframe(plan: RepaymentPlan, debts: List[Debt], start: Optional[date] = None) -> pd.DataFrame:
    """One row per (month, debt) with the payment made and the end balance."""
    start = start or date.today()
    names: Dict[int, str] = {d.id: d.name for d in debts}
    calendar = month_year_iter(start.month, start.year, len(plan.months))
    rows = []
    for m, (cal_month, cal_year) in zip(plan.months, calendar):
        for debt_id, balance in m.balances.items():
            rows.append({
                "month": m.month_index,
                "year": cal_year,
                "calendar_month": cal_month,
                "debt_id": debt_id,
                "debt": names.get(debt_id, str(debt_id)),
                "payment": m.payments.get(debt_id, 0),
                "balance": balance,
                "month_interest_total": m.interest_cents,
                "total_paid_month": m.total_paid_cents,
            })
    if not rows:
        return pd.DataFrame(columns=SCHEDULE_COLUMNS)
    return pd.DataFrame(rows, columns=SCHEDULE_COLUMNS)

def simulate_total_balance_series(initial_debts: List[Debt], plan: RepaymentPlan) -> List[int]:
    """Total owed before month 1, then after each simulated month."""
    start = sum(d.balance_cents for d in initial_debts if d.active and d.balance_cents > 0)
    return [start] + [sum(m.balances.values()) for m in plan.months]

def debt_payoff_months(plan: RepaymentPlan) -> Dict[int, int]:
    """Month index in which each debt first reaches zero. Debts never cleared are left out."""
    out: Dict[int, int] = {}
    for m in plan.months:
        for debt_id, balance in m.balances.items():
            if balance <= 0 and debt_id not in out:
                out[debt_id] = m.month_index
    return out

def plan_totals(plan: RepaymentPlan) -> Dict[str, int]:
    total_paid = sum(m.total_paid_cents for m in plan.months)
    return {
        "total_paid_cents": total_paid,
        "total_interest_cents": plan.total_interest_cents,
        "principal_cents": max(0, total_paid - plan.total_interest_cents),
    }
