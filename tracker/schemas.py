# tracker/schemas.py
from datetime import date
from enum import Enum
from typing import Optional, List, Dict

from pydantic import BaseModel, Field, computed_field

DEBT_KINDS = (
    "card",
    "line_of_credit",
    "personal_loan",
    "auto_loan",
    "student_loan",
    "mortgage",
    "other_loan",
)

class Strategy(str, Enum):
    SNOWBALL = "snowball"    # smallest balance first
    AVALANCHE = "avalanche"  # highest APR first

class Debt(BaseModel):
    """
    Snapshot of one debt. Money is in cents, APR in basis points
    (1999 == 19.99%). Balance only changes through the payment helpers in
    tracker.payments, which return a new Debt instead of mutating.
    """
    id: int
    name: str
    kind: str = "card"
    balance_cents: int = Field(ge=0)
    apr_bps: int = Field(ge=0)
    min_payment_cents: int = Field(ge=0)
    payment_cents: int = Field(default=0, ge=0)  # optional fixed payment
    due_day: int = Field(default=1, ge=1, le=28)
    notes: str = ""
    active: bool = True

class Payment(BaseModel):
    id: int
    debt_id: int
    paid_on: date
    amount_cents: int = Field(gt=0)
    note: str = ""

class Budget(BaseModel):
    id: int
    year: int = Field(ge=2000, le=2100)
    month: int = Field(ge=1, le=12)
    income_cents: int = Field(default=0, ge=0)

class BudgetCategory(BaseModel):
    id: int
    budget_id: int
    name: str
    limit_cents: int = Field(default=0, ge=0)
    is_debt_payoff: bool = False  # "extra for debt" category, linked to the plan
    sort_order: int = 0

class BudgetExpense(BaseModel):
    id: int
    category_id: int
    spent_on: date
    amount_cents: int = Field(gt=0)
    note: str = ""

# Plan reporting types (used by optimization)
class RepaymentMonth(BaseModel):
    month_index: int
    interest_cents: int = 0
    payments: Dict[int, int] = Field(default_factory=dict)  # debt id -> paid this month
    balances: Dict[int, int] = Field(default_factory=dict)  # debt id -> end-of-month balance
    total_paid_cents: int = 0

class RepaymentPlan(BaseModel):
    strategy: Strategy
    months: List[RepaymentMonth]
    total_interest_cents: int
    payoff_months: int
    # False when the horizon ran out with a balance still owing.
    converged: bool

class BracketFill(BaseModel):
    label: str
    rate_pct: float
    income_in_bracket_cents: int
    tax_cents: int
    full_bracket_cents: int
    fill_pct: float  # 0-100, bar width

class TaxBreakdown(BaseModel):
    province: str
    province_name: str
    income_cents: int
    fills: List[BracketFill]
    total_tax_cents: int

    @computed_field
    @property
    def effective_rate_pct(self) -> float:
        if self.income_cents <= 0:
            return 0.0
        return self.total_tax_cents / self.income_cents * 100.0

class CategorySpending(BaseModel):
    category: BudgetCategory
    spent_cents: int
    remaining_cents: int
    # Only set on the debt-payoff category.
    suggested_payoff_cents: Optional[int] = None
