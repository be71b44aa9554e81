"""
Values -- Decimal helpers for currency and hour amounts.

Responsibility:
    All money and hour arithmetic in the engine is ``Decimal``.  This module
    owns the conversion of loosely typed inputs (settings values arrive as
    strings or numbers from the storage layer) and the rounding rules:
    currency to cents, hours to tenths, both ROUND_HALF_UP.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - Floats never reach arithmetic; they are converted through ``str``.
    - NaN, infinities and out-of-range magnitudes are rejected at
      conversion, so they can never propagate into a currency total.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")
CENTS = Decimal("0.01")
TENTHS = Decimal("0.1")

# Largest magnitude accepted from outside.  Keeps every product the billing
# engine forms (hours x rate, subtotal x tax rate) within the 28-digit
# context, so quantizing a total never overflows.
MAX_MAGNITUDE = Decimal("1e8")


def to_decimal(value: Any) -> Decimal | None:
    """
    Convert a number or numeric string to a finite Decimal.

    Returns:
        The Decimal, or None for None, empty strings, booleans,
        non-numeric text, NaN, infinities and values whose magnitude
        reaches ``MAX_MAGNITUDE``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            result = Decimal(text)
        except InvalidOperation:
            return None
    else:
        return None

    if not result.is_finite() or abs(result) >= MAX_MAGNITUDE:
        return None
    return result


def round_currency(amount: Decimal) -> Decimal:
    """Round to cents."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def round_hours(hours: Decimal) -> Decimal:
    """Round to tenths of an hour."""
    return hours.quantize(TENTHS, rounding=ROUND_HALF_UP)
