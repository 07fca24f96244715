# ledgerdesk/domain/services/money.py
"""
Numeric coercion and currency helpers shared by the totals core.

Form fields arrive as whatever the user typed ("45,000.00", "", "12abc",
None).  ``to_decimal`` mirrors the ``parseFloat(x) || 0`` policy of the edit
screens: anything that does not start with a number becomes zero and no
exception ever escapes.  Rounding is applied only at the edges
(serialization and display), never between computation steps.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any

ZERO = Decimal("0")
HUNDRED = Decimal("100")
PAISA = Decimal("0.01")

# Magnitudes a JS number can hold; beyond this parseFloat gives Infinity
# (coerced to zero here) and below it gives 0
_MAX_EXPONENT = 308
_MIN_EXPONENT = -324

# Leading numeric prefix, the way parseFloat reads it
_NUMBER_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_NOISE_RE = re.compile(r"[,\s₹]|^rs\.?", re.IGNORECASE)


def _in_range(value: Decimal) -> Decimal:
    if not value.is_finite():
        return ZERO
    if value and not _MIN_EXPONENT <= value.adjusted() <= _MAX_EXPONENT:
        return ZERO
    return value


def to_decimal(value: Any) -> Decimal:
    """Coerce a form value to Decimal; unparseable or out-of-range input becomes 0."""
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, Decimal):
        return _in_range(value)

    if isinstance(value, int):
        return _in_range(Decimal(value))

    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return ZERO
        return Decimal(str(value))

    text = _NOISE_RE.sub("", str(value))
    match = _NUMBER_RE.match(text)
    if not match:
        return ZERO
    try:
        result = Decimal(match.group(0))
    except InvalidOperation:
        return ZERO
    return _in_range(result)


def round_money(value: Any) -> Decimal:
    """Quantize to paisa (2 dp, half-up) for display or serialization."""
    if isinstance(value, Decimal) and value.is_finite():
        amount = value
    else:
        amount = to_decimal(value)
    with localcontext() as ctx:
        # Enough digits for every paisa of large computed totals
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return amount.quantize(PAISA, rounding=ROUND_HALF_UP)


def json_number(value: Any) -> float | None:
    """Float for a JSON body; null when the amount is too large for a JSON number."""
    number = float(value if isinstance(value, Decimal) else to_decimal(value))
    if number in (float("inf"), float("-inf")):
        return None
    return number


def format_inr(value: Any) -> str:
    """
    Format an amount the way Indian invoices print it.

    >>> format_inr(100300)
    '₹1,00,300.00'
    """
    amount = round_money(value)
    sign = "-" if amount < 0 else ""
    whole, _, fraction = f"{amount.copy_abs():.2f}".partition(".")

    # Last three digits, then groups of two (lakh / crore grouping)
    head, tail = whole[:-3], whole[-3:]
    groups: list[str] = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    grouped = ",".join(groups + [tail]) if groups else tail

    return f"{sign}₹{grouped}.{fraction}"
