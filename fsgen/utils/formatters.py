"""
Shared number formatting for statements and exports.

Conventions:
  Indian         →  1,23,45,678     (last three digits, then pairs)
  International  →  12,345,678      (groups of three)
  None           →  12345678
  Custom "3,2"   →  first group of 3, then repeat the last size (2)

Amounts are first scaled to the unit of measurement (lakhs, crores, ...) and
rounded half away from zero to the requested decimal places.
"""

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext

UNIT_MULTIPLIERS = {
    "full-number": 1,
    "thousands": 1_000,
    "ten-thousands": 10_000,
    "lakhs": 100_000,
    "crores": 10_000_000,
    "ten-crores": 100_000_000,
    "hundred-crores": 1_000_000_000,
}

UNIT_LABELS = {
    "full-number": "₹ (Full Number)",
    "thousands": "₹ (Thousands)",
    "ten-thousands": "₹ (Ten Thousands)",
    "lakhs": "₹ (Lakhs)",
    "crores": "₹ (Crores)",
    "ten-crores": "₹ (Ten Crores)",
    "hundred-crores": "₹ (100 Crores)",
}

_STYLE_GROUPS = {
    "indian": [3, 2],
    "international": [3],
}


def _parse_grouping(pattern) -> list:
    if not pattern:
        return []
    groups = []
    for part in str(pattern).split(","):
        try:
            size = int(part.strip())
        except ValueError:
            continue
        if size > 0:
            groups.append(size)
    return groups


def _group_digits(digits: str, groups: list) -> str:
    """Insert commas into a digit string: first group from the right, then repeat the last size."""
    if not groups or len(digits) <= groups[0]:
        return digits
    parts = [digits[-groups[0]:]]
    rest = digits[:-groups[0]]
    repeat = groups[-1]
    while rest:
        parts.insert(0, rest[-repeat:])
        rest = rest[:-repeat]
    return ",".join(parts)


def format_inr(value, unit_of_measurement: str = "lakhs", decimal_points: int = 0,
               number_style: str = "indian", custom_number_grouping: str = None) -> str:
    """Format an amount for display: format_inr(12345678, "full-number") → "1,23,45,678"."""
    try:
        value = float(value)
    except (TypeError, ValueError):
        return "0"
    if not math.isfinite(value):
        return "0"

    decimal_points = max(0, int(decimal_points or 0))
    converted = value / UNIT_MULTIPLIERS.get(unit_of_measurement, 1)
    quantum = Decimal(1).scaleb(-decimal_points)
    with localcontext() as ctx:
        # Room for every integer digit of a float plus the decimals
        ctx.prec = 330 + decimal_points
        rounded = Decimal(repr(converted)).quantize(quantum, rounding=ROUND_HALF_UP)
        text = f"{abs(rounded):.{decimal_points}f}"
    int_part, _, frac_part = text.partition(".")

    if number_style == "custom":
        groups = _parse_grouping(custom_number_grouping)
    else:
        groups = _STYLE_GROUPS.get(number_style, [])
    int_part = _group_digits(int_part, groups)

    sign = "-" if rounded < 0 else ""
    return f"{sign}{int_part}.{frac_part}" if frac_part else f"{sign}{int_part}"


def format_amount(value, formatting) -> str:
    """format_inr driven by a company's FormattingSettings."""
    return format_inr(
        value,
        formatting.unit_of_measurement,
        formatting.decimal_points,
        formatting.number_style,
        formatting.custom_number_grouping,
    )


def get_unit_label(unit_of_measurement: str) -> str:
    return UNIT_LABELS.get(unit_of_measurement, UNIT_LABELS["full-number"])
