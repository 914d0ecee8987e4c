# tracker/debts.py
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd
from pydantic import ValidationError

from .budget import sum_of_min_payments
from .schemas import Debt
from .utils import bps_to_apr, format_debt_kind, money

_SORT_KEYS = {
    "name": lambda d: d.name,
    "balance": lambda d: d.balance_cents,
    "apr": lambda d: d.apr_bps,
    "min": lambda d: d.min_payment_cents,
    "due": lambda d: d.due_day,
    "type": lambda d: d.kind,
}

# ---------- Parsing & Presentation ----------

def parse_debts(data: Any) -> Tuple[List[Debt], Optional[str]]:
    """
    Validate raw debt dicts. Returns (debts, None) or ([], error message).
    Ids must be unique: plans and payments key balances by debt id.
    """
    if not isinstance(data, list):
        return [], "Debts must be a list of objects."
    debts: List[Debt] = []
    seen = set()
    for i, d in enumerate(data):
        try:
            debt = Debt.model_validate(d)
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(p) for p in first["loc"])
            return [], f"Debt {i+1} invalid field {field}: {first['msg']}"
        if debt.id in seen:
            return [], f"Duplicate debt id {debt.id}"
        seen.add(debt.id)
        debts.append(debt)
    return debts, None

def pretty_debts_table(debts: List[Debt]) -> pd.DataFrame:
    rows = []
    for d in debts:
        rows.append({
            "Debt": d.name,
            "Type": format_debt_kind(d.kind),
            "Balance": money(d.balance_cents),
            "APR": bps_to_apr(d.apr_bps),
            "Min Payment": money(d.min_payment_cents),
            "Due Day": d.due_day,
            "Status": "Active" if d.active else "Closed",
        })
    return pd.DataFrame(rows, columns=["Debt", "Type", "Balance", "APR", "Min Payment", "Due Day", "Status"])

# ---------- Listing ----------

def filter_debts(debts: List[Debt], search: str = "", kind: str = "", status: str = "",
                 sort_by: str = "default") -> List[Debt]:
    """
    Narrow and order a debt list the way the dashboard does.

    ``search`` is a case-sensitive substring of the name, ``kind`` an exact
    debt kind, ``status`` one of "active"/"closed" (anything else keeps
    both). ``sort_by`` is ``<field>_asc`` or ``<field>_desc`` for name,
    balance, apr, min, due and type; the default puts active debts first and
    then sorts by name.
    """
    out = [d for d in debts if search in d.name] if search else list(debts)
    if kind:
        out = [d for d in out if d.kind == kind]
    if status == "active":
        out = [d for d in out if d.active]
    elif status == "closed":
        out = [d for d in out if not d.active]

    field, _, direction = (sort_by or "").rpartition("_")
    key = _SORT_KEYS.get(field)
    if key is not None and direction in ("asc", "desc"):
        return sorted(out, key=key, reverse=direction == "desc")
    return sorted(out, key=lambda d: (not d.active, d.name))

def debt_totals(debts: List[Debt]) -> Dict[str, Any]:
    """Dashboard totals: all balances, active balances, and active debts still owing."""
    total = sum(d.balance_cents for d in debts)
    active_total = sum(d.balance_cents for d in debts if d.active)
    owing = [d for d in debts if d.active and d.balance_cents > 0]
    return {"total_cents": total, "active_total_cents": active_total, "active_debts": owing}

def weighted_apr_bps(debts: List[Debt]) -> float:
    total = sum(d.balance_cents for d in debts)
    if total <= 0:
        return 0.0
    return sum(d.apr_bps * d.balance_cents for d in debts) / total

def summarize_debts(debts: List[Debt]) -> str:
    if not debts:
        return "No debts provided."
    total_bal = sum(d.balance_cents for d in debts)
    lines = [
        f"Total debts: {money(total_bal)}",
        f"Weighted APR: {weighted_apr_bps(debts) / 100:.2f}%",
        f"Total minimums: {money(sum_of_min_payments(debts))}/month",
    ]
    return "\n".join(lines)
