import json
import logging
import math
import time
from datetime import date
from typing import List, Dict, Any, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from tracker.budget import (
    category_spending,
    suggested_extra_payment,
    suggested_plan_budget,
    suggested_plan_budget_for_month,
    sum_of_min_payments,
)
from tracker.config import (
    DEFAULT_BUDGET_DOLLARS,
    DEFAULT_PROVINCE,
    LOG_LEVEL,
    MAX_PLAN_MONTHS,
    RATE_LIMIT_MAX_ATTEMPTS,
    RATE_LIMIT_WINDOW_SECONDS,
    TAX_YEAR,
)
from tracker.debts import (
    debt_totals,
    filter_debts,
    parse_debts,
    pretty_debts_table,
    summarize_debts,
    weighted_apr_bps,
)
from tracker.optimization import generate_plan, parse_strategy
from tracker.payments import amend_payment, apply_payment, payments_this_month, reverse_payment
from tracker.plan_utils import debt_payoff_months, plan_to_dataframe, plan_totals, simulate_total_balance_series
from tracker.ratelimit import RateLimiter
from tracker.scenarios import compare_baseline_vs_extra, compare_strategies
from tracker.schemas import Budget, BudgetCategory, BudgetExpense, Debt, Payment
from tracker.tax_brackets import compute_tax, list_provinces
from tracker.utils import bps_to_apr, dollars_to_cents, money

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

# ======================================
# App + CORS
# ======================================
app = FastAPI(
    title="Debt Payoff Tracker",
    description="Payoff plans, tax brackets and budget links for personal debts",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # tighten in prod
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

limiter = RateLimiter(RATE_LIMIT_MAX_ATTEMPTS, RATE_LIMIT_WINDOW_SECONDS)


def rate_limited(request: Request) -> None:
    host = request.client.host if request.client else "unknown"
    if not limiter.allow(host):
        raise HTTPException(status_code=429, detail="Too many requests. Please try again later.")


# ======================================
# Models
# ======================================
class DebtsRequest(BaseModel):
    debts: List[Dict[str, Any]]

class DebtFilterRequest(BaseModel):
    debts: List[Dict[str, Any]]
    search: str = ""
    kind: str = ""
    status: str = ""
    sort: str = "default"

class PlanRequest(BaseModel):
    debts: List[Dict[str, Any]]
    budget_dollars: float = Field(default=DEFAULT_BUDGET_DOLLARS, allow_inf_nan=False)
    strategy: str = "avalanche"  # avalanche | snowball
    max_months: int = Field(default=MAX_PLAN_MONTHS, gt=0)

class WhatIfRequest(BaseModel):
    debts: List[Dict[str, Any]]
    budget_dollars: float = Field(default=DEFAULT_BUDGET_DOLLARS, allow_inf_nan=False)
    extra_dollars: float = Field(default=0.0, allow_inf_nan=False)
    strategy: str = "avalanche"
    max_months: int = Field(default=MAX_PLAN_MONTHS, gt=0)

class BudgetSummaryRequest(BaseModel):
    budget: Budget
    categories: List[BudgetCategory] = []
    expenses: List[BudgetExpense] = []
    debts: List[Dict[str, Any]] = []

class PaymentRequest(BaseModel):
    debt: Debt
    payment: Payment

class AmendPaymentRequest(BaseModel):
    debt: Debt
    payment: Payment
    new_amount_cents: int

class PaymentsMonthRequest(BaseModel):
    payments: List[Payment] = []
    today: Optional[date] = None

class PlanBudgetRequest(BaseModel):
    budgets: List[Budget] = []
    categories: List[BudgetCategory] = []
    today: Optional[date] = None


# ======================================
# Defaults
# ======================================
DEFAULT_DEBTS = [
    {"id": 1, "name": "Visa", "kind": "card", "balance_cents": 450000, "apr_bps": 1999, "min_payment_cents": 9000, "due_day": 5},
    {"id": 2, "name": "Car Loan", "kind": "auto_loan", "balance_cents": 1200000, "apr_bps": 649, "min_payment_cents": 32000, "due_day": 15},
    {"id": 3, "name": "Line of Credit", "kind": "line_of_credit", "balance_cents": 300000, "apr_bps": 995, "min_payment_cents": 5000, "due_day": 20},
]


# ======================================
# Helpers
# ======================================
def require_debts(data: List[Dict[str, Any]]) -> List[Debt]:
    debts, error = parse_debts(data)
    if error:
        logger.info("Rejected debts payload: %s", error)
        raise HTTPException(status_code=400, detail=error)
    return debts

def budget_to_cents(dollars: float, field: str = "budget_dollars") -> int:
    if not math.isfinite(dollars):
        raise HTTPException(status_code=400, detail=f"{field} must be a finite number")
    if dollars < 0:
        raise HTTPException(status_code=400, detail=f"{field} cannot be negative")
    return dollars_to_cents(dollars)

def plan_payload(plan, debts: List[Debt]) -> Dict[str, Any]:
    totals = plan_totals(plan)
    schedule_df = plan_to_dataframe(plan, debts)
    return {
        "strategy": plan.strategy.value,
        "payoff_months": plan.payoff_months,
        "converged": plan.converged,
        "total_interest_cents": plan.total_interest_cents,
        "total_paid_cents": totals["total_paid_cents"],
        "principal_cents": totals["principal_cents"],
        "debt_payoff_months": debt_payoff_months(plan),
        "months": [m.model_dump() for m in plan.months],
        "schedule": json.loads(schedule_df.to_json(orient="records")),
        "balance_series": simulate_total_balance_series(debts, plan),
        "formatted": {
            "payoff": (f"{plan.payoff_months} months ({plan.payoff_months/12:.1f} years)"
                       if plan.converged else f"Not paid off within {plan.payoff_months} months"),
            "total_interest": money(plan.total_interest_cents),
            "total_paid": money(totals["total_paid_cents"]),
        },
    }


# ======================================
# Routes
# ======================================
@app.get("/api/health")
async def health_check():
    return {"status": "healthy", "message": "Debt Payoff Tracker API is running!", "timestamp": time.time()}

@app.get("/api/defaults/debts")
async def get_default_debts():
    return {"debts": DEFAULT_DEBTS}

@app.post("/api/debts/validate")
async def validate_debts(request: DebtsRequest):
    debts, error = parse_debts(request.debts)
    if error:
        return {"valid": False, "error": error}
    totals = debt_totals(debts)
    min_sum = sum_of_min_payments(debts)
    w_apr = weighted_apr_bps(debts)
    return {
        "valid": True,
        "summary": {
            "debts_count": len(debts),
            "total_cents": totals["total_cents"],
            "active_total_cents": totals["active_total_cents"],
            "active_debts_count": len(totals["active_debts"]),
            "total_min_payments_cents": min_sum,
            "weighted_apr_bps": w_apr,
            "formatted": {
                "total": money(totals["total_cents"]),
                "active_total": money(totals["active_total_cents"]),
                "total_min_payments": money(min_sum),
                "weighted_apr": bps_to_apr(w_apr),
            },
            "text": summarize_debts(debts),
        },
    }

@app.post("/api/debts/filter")
async def filter_debt_list(request: DebtFilterRequest):
    debts = require_debts(request.debts)
    out = filter_debts(debts, request.search, request.kind, request.status, request.sort)
    return {
        "debts": [d.model_dump() for d in out],
        "table": json.loads(pretty_debts_table(out).to_json(orient="records")),
    }

@app.post("/api/plans/generate")
async def generate_repayment_plan(request: PlanRequest):
    debts = require_debts(request.debts)
    budget_cents = budget_to_cents(request.budget_dollars)
    plan = generate_plan(debts, budget_cents, parse_strategy(request.strategy), request.max_months)
    payload = plan_payload(plan, debts)
    payload["budget_cents"] = budget_cents
    return payload

@app.post("/api/plans/compare")
async def compare_plans(request: PlanRequest):
    debts = require_debts(request.debts)
    budget_cents = budget_to_cents(request.budget_dollars)
    result = compare_strategies(debts, budget_cents, request.max_months)
    return {
        "budget_cents": budget_cents,
        "best_plan": result["best_plan"].value,
        "interest_difference_cents": result["interest_difference_cents"],
        "avalanche": plan_payload(result["avalanche"], debts),
        "snowball": plan_payload(result["snowball"], debts),
    }

@app.post("/api/scenarios/whatif")
async def whatif_analysis(request: WhatIfRequest):
    debts = require_debts(request.debts)
    budget_cents = budget_to_cents(request.budget_dollars)
    extra_cents = budget_to_cents(request.extra_dollars, "extra_dollars")
    comparison = compare_baseline_vs_extra(debts, budget_cents, extra_cents,
                                           parse_strategy(request.strategy), request.max_months)
    base = comparison["baseline"]
    scenario = comparison["scenario"]
    return {
        "baseline": {"payoff_months": base.payoff_months, "converged": base.converged,
                     "total_interest_cents": base.total_interest_cents},
        "scenario": {"payoff_months": scenario.payoff_months, "converged": scenario.converged,
                     "total_interest_cents": scenario.total_interest_cents},
        "savings": {
            "months_saved": comparison["months_saved"],
            "interest_saved_cents": comparison["interest_savings_cents"],
        },
        "formatted": {
            "interest_saved": money(comparison["interest_savings_cents"]),
            "months_saved": f"{comparison['months_saved']} months",
        },
    }

@app.get("/api/tax/provinces")
async def get_provinces():
    return {"provinces": [{"code": c, "name": n} for c, n in list_provinces()]}

@app.get("/api/tax/brackets")
async def tax_brackets(province: str = DEFAULT_PROVINCE, income: Optional[str] = None):
    income_cents = 0
    if income:
        try:
            value = float(income)
        except ValueError:
            value = -1.0
        if math.isfinite(value) and value >= 0:
            income_cents = dollars_to_cents(value)
    breakdown = compute_tax(province, income_cents)
    payload = breakdown.model_dump()
    payload["tax_year"] = TAX_YEAR
    payload["income_filled"] = income is not None
    payload["formatted"] = {
        "income": money(income_cents),
        "total_tax": money(breakdown.total_tax_cents),
        "effective_rate": f"{breakdown.effective_rate_pct:.2f}%",
    }
    return payload

@app.post("/api/budget/summary")
async def budget_summary(request: BudgetSummaryRequest):
    debts = require_debts(request.debts)
    own_categories = [c for c in request.categories if c.budget_id == request.budget.id]
    min_sum = sum_of_min_payments(debts)
    income = request.budget.income_cents
    rows = category_spending(own_categories, request.expenses, income, min_sum)
    return {
        "budget": request.budget.model_dump(),
        "categories": [r.model_dump() for r in rows],
        "min_payments_sum_cents": min_sum,
        "suggested_extra_cents": suggested_extra_payment(income, own_categories, min_sum),
        "suggested_plan_budget_cents": suggested_plan_budget(request.budget, own_categories),
    }

@app.post("/api/budget/plan-budget")
async def plan_budget_prefill(request: PlanBudgetRequest):
    """Pre-fill for the payoff plan form, from the budget of the current month."""
    cents = suggested_plan_budget_for_month(request.budgets, request.categories, request.today)
    return {"budget_cents": cents, "budget_dollars": cents / 100, "formatted": money(cents)}

@app.post("/api/payments/this-month")
async def payments_month_summary(request: PaymentsMonthRequest):
    count, total = payments_this_month(request.payments, request.today)
    return {"count": count, "total_cents": total, "formatted": money(total)}

@app.post("/api/payments/apply", dependencies=[Depends(rate_limited)])
async def record_payment(request: PaymentRequest):
    try:
        debt = apply_payment(request.debt, request.payment)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"debt": debt.model_dump()}

@app.post("/api/payments/reverse", dependencies=[Depends(rate_limited)])
async def delete_payment(request: PaymentRequest):
    try:
        debt = reverse_payment(request.debt, request.payment)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"debt": debt.model_dump()}

@app.post("/api/payments/amend", dependencies=[Depends(rate_limited)])
async def edit_payment(request: AmendPaymentRequest):
    try:
        debt, payment = amend_payment(request.debt, request.payment, request.new_amount_cents)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"debt": debt.model_dump(), "payment": payment.model_dump(mode="json")}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app:app", host="0.0.0.0", port=8000, reload=True)
