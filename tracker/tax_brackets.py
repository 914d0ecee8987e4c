# tracker/tax_brackets.py
"""
Combined federal + provincial marginal income-tax brackets (2025, other
income) and the per-bracket breakdown used to draw the bracket fill bars.

Each bracket is ``(upper_bound_cents, marginal_rate_pct)`` with cumulative,
ascending bounds. The last bracket of every province carries the sentinel
bound ``TOP_BRACKET_SENTINEL`` and means "no upper bound".
"""

from types import MappingProxyType
from typing import List, Tuple

from .config import DEFAULT_PROVINCE
from .schemas import BracketFill, TaxBreakdown

TOP_BRACKET_SENTINEL = 99_999_999_00
# Anything above this bound is treated as the open-ended top bracket.
_OPEN_BRACKET_THRESHOLD = 99_999_900_00

PROVINCE_BRACKETS = MappingProxyType({
    "ON": (
        (52_886_00, 19.55),
        (57_375_00, 23.65),
        (93_132_00, 29.65),
        (105_775_00, 31.48),
        (109_727_00, 33.89),
        (114_750_00, 37.91),
        (150_000_00, 43.41),
        (177_882_00, 44.97),
        (220_000_00, 48.28),
        (253_414_00, 49.84),
        (TOP_BRACKET_SENTINEL, 53.53),
    ),
    "BC": (
        (49_279_00, 19.56),
        (98_560_00, 28.20),
        (113_158_00, 31.00),
        (137_407_00, 32.79),
        (186_306_00, 38.29),
        (259_829_00, 49.80),
        (TOP_BRACKET_SENTINEL, 53.50),
    ),
    "AB": (
        (142_292_00, 25.00),
        (170_751_00, 30.50),
        (227_668_00, 36.00),
        (341_502_00, 38.00),
        (TOP_BRACKET_SENTINEL, 48.00),
    ),
    "QC": (
        (51_425_00, 27.53),
        (102_865_00, 32.53),
        (119_545_00, 37.12),
        (TOP_BRACKET_SENTINEL, 45.71),
    ),
    "SK": (
        (52_057_00, 25.50),
        (148_734_00, 32.50),
        (TOP_BRACKET_SENTINEL, 35.50),
    ),
    "MB": (
        (47_000_00, 25.80),
        (100_000_00, 27.75),
        (TOP_BRACKET_SENTINEL, 33.25),
    ),
    "NS": (
        (29_590_00, 23.79),
        (59_180_00, 30.00),
        (93_000_00, 31.00),
        (150_000_00, 34.67),
        (TOP_BRACKET_SENTINEL, 39.00),
    ),
    "NB": (
        (47_715_00, 24.20),
        (95_431_00, 31.32),
        (176_756_00, 34.32),
        (TOP_BRACKET_SENTINEL, 36.84),
    ),
    "NL": (
        (43_198_00, 23.70),
        (86_395_00, 30.50),
        (154_244_00, 33.80),
        (215_000_00, 36.50),
        (TOP_BRACKET_SENTINEL, 39.50),
    ),
    "PE": (
        (31_984_00, 23.75),
        (63_969_00, 30.25),
        (TOP_BRACKET_SENTINEL, 33.25),
    ),
    "NT": (
        (50_897_00, 19.90),
        (101_792_00, 26.40),
        (165_429_00, 29.90),
        (235_675_00, 33.40),
        (TOP_BRACKET_SENTINEL, 36.90),
    ),
    "NU": (
        (50_897_00, 19.90),
        (101_792_00, 26.40),
        (165_429_00, 29.90),
        (235_675_00, 33.40),
        (TOP_BRACKET_SENTINEL, 36.90),
    ),
    "YT": (
        (55_867_00, 19.05),
        (111_733_00, 25.55),
        (173_205_00, 31.05),
        (246_752_00, 34.37),
        (TOP_BRACKET_SENTINEL, 37.70),
    ),
})

PROVINCE_NAMES = MappingProxyType({
    "ON": "Ontario",
    "BC": "British Columbia",
    "AB": "Alberta",
    "QC": "Quebec",
    "SK": "Saskatchewan",
    "MB": "Manitoba",
    "NS": "Nova Scotia",
    "NB": "New Brunswick",
    "NL": "Newfoundland and Labrador",
    "PE": "Prince Edward Island",
    "NT": "Northwest Territories",
    "NU": "Nunavut",
    "YT": "Yukon",
})

# Display order for province pickers.
PROVINCE_ORDER = ("ON", "BC", "AB", "QC", "SK", "MB", "NS", "NB", "NL", "PE", "NT", "NU", "YT")


def _is_open_bracket(bound_cents: int) -> bool:
    return bound_cents > _OPEN_BRACKET_THRESHOLD


def normalize_province(code: str) -> str:
    """Return ``code`` upper-cased if known, else the default province."""
    code = (code or "").strip().upper()
    if code in PROVINCE_BRACKETS:
        return code
    return DEFAULT_PROVINCE if DEFAULT_PROVINCE in PROVINCE_BRACKETS else "ON"


def list_provinces() -> List[Tuple[str, str]]:
    return [(code, PROVINCE_NAMES[code]) for code in PROVINCE_ORDER]


def format_dollars(cents: int) -> str:
    """Whole dollars with thousands separators; cents are dropped."""
    return f"{int(cents) // 100:,}"


def format_bracket_label(low_cents: int, high_cents: int) -> str:
    if _is_open_bracket(high_cents):
        return f"Over ${format_dollars(low_cents)}"
    return f"${format_dollars(low_cents)} – ${format_dollars(high_cents)}"


def compute_bracket_fills(province: str, income_cents: int) -> Tuple[List[BracketFill], int]:
    """
    Split ``income_cents`` across the province's brackets.

    Returns the fills in ascending order, stopping at the bracket the income
    ends in, and the total tax. Tax per bracket is truncated toward zero.
    The open-ended top bracket is sized to the income it holds, so its bar is
    always drawn full.
    """
    brackets = PROVINCE_BRACKETS[normalize_province(province)]

    fills: List[BracketFill] = []
    total_tax_cents = 0
    prev = 0
    for bound, rate_pct in brackets:
        is_top = _is_open_bracket(bound)
        band_top = income_cents + 1 if is_top else bound

        full_bracket = band_top - prev
        in_bracket = full_bracket
        if income_cents < band_top:
            in_bracket = max(0, income_cents - prev)
            if is_top and in_bracket > 0:
                full_bracket = in_bracket

        tax = int(in_bracket * (rate_pct / 100.0))
        total_tax_cents += tax

        fill_pct = 100.0
        if full_bracket > 0:
            fill_pct = in_bracket / full_bracket * 100

        fills.append(BracketFill(
            label=format_bracket_label(prev, bound),
            rate_pct=rate_pct,
            income_in_bracket_cents=in_bracket,
            tax_cents=tax,
            full_bracket_cents=full_bracket,
            fill_pct=fill_pct,
        ))
        prev = band_top
        if income_cents < band_top:
            break
    return fills, total_tax_cents


def compute_tax(province: str, income_cents: int) -> TaxBreakdown:
    code = normalize_province(province)
    fills, total = compute_bracket_fills(code, income_cents)
    return TaxBreakdown(
        province=code,
        province_name=PROVINCE_NAMES[code],
        income_cents=income_cents,
        fills=fills,
        total_tax_cents=total,
    )
