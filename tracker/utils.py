# tracker/utils.py
import math

DEBT_KIND_LABELS = {
    "card": "Credit Card",
    "line_of_credit": "Line of Credit",
    "personal_loan": "Personal Loan",
    "auto_loan": "Auto Loan",
    "student_loan": "Student Loan",
    "mortgage": "Mortgage",
    "other_loan": "Other Loan",
}

def money(cents: int) -> str:
    sign = "-" if cents < 0 else ""
    dollars, rem = divmod(abs(int(cents)), 100)
    return f"{sign}${dollars:,}.{rem:02d}"

def bps_to_apr(bps: int) -> str:
    return f"{bps / 100.0:.2f}%"

def format_debt_kind(kind: str) -> str:
    return DEBT_KIND_LABELS.get(kind, kind)

def dollars_to_cents(value) -> int:
    """Truncates toward zero, e.g. 12.349 -> 1234. Raises ValueError for inf and nan."""
    dollars = float(value)
    if not math.isfinite(dollars):
        raise ValueError(f"not a finite amount: {value!r}")
    return int(dollars * 100)

def month_year_iter(start_month=1, start_year=2025, months=12):
    m, y = start_month, start_year
    for _ in range(months):
        yield m, y
        m += 1
        if m > 12:
            m = 1
            y += 1
