# ledgerdesk/domain/services/line_items.py
"""
Line item amount calculator.

    gross      = quantity * rate
    discount   = gross * discount / 100     (percentage)
               = discount                   (flat)
    taxable    = gross - discount
    tax        = taxable * tax_rate / 100
    amount     = taxable + tax

Everything stays in Decimal at full precision; rounding happens only when a
value is displayed or serialized.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

from ledgerdesk.domain.services.money import HUNDRED, ZERO, to_decimal

logger = logging.getLogger("line_items")


class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FLAT = "flat"

    @classmethod
    def coerce(cls, value: Any) -> DiscountType:
        """Unknown or missing discount types fall back to percentage."""
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        if text in ("flat", "amount", "fixed"):
            return cls.FLAT
        return cls.PERCENTAGE


class InvalidLineItemError(Exception):
    """Raised in strict mode when a line item prices below zero."""

    def __init__(self, message: str, taxable_amount: Decimal | None = None, line_id: str | None = None):
        super().__init__(message)
        self.taxable_amount = taxable_amount
        self.line_id = line_id


@dataclass(frozen=True)
class LineItemAmounts:
    gross_amount: Decimal
    discount_amount: Decimal
    taxable_amount: Decimal
    tax_amount: Decimal
    amount: Decimal


def compute_line_item(
    quantity: Any,
    rate: Any,
    discount: Any = ZERO,
    discount_type: Any = DiscountType.PERCENTAGE,
    tax_rate: Any = ZERO,
    *,
    strict: bool = False,
    line_id: str | None = None,
) -> LineItemAmounts:
    """
    Price a single line item.

    Inputs go through ``to_decimal`` so blanks and garbage count as zero.
    A discount larger than the gross amount is not guarded against unless
    ``strict`` is set, in which case a negative taxable amount raises
    :class:`InvalidLineItemError`.
    """
    qty = to_decimal(quantity)
    unit_rate = to_decimal(rate)
    disc = to_decimal(discount)
    tax_pct = to_decimal(tax_rate)

    gross = qty * unit_rate
    if DiscountType.coerce(discount_type) is DiscountType.PERCENTAGE:
        discount_amount = gross * disc / HUNDRED
    else:
        discount_amount = disc

    taxable = gross - discount_amount
    if strict and taxable < ZERO:
        logger.warning("Line item %s has negative taxable amount %s", line_id, taxable)
        raise InvalidLineItemError(
            f"Discount exceeds line value (taxable amount {taxable})",
            taxable_amount=taxable,
            line_id=line_id,
        )

    tax = taxable * tax_pct / HUNDRED
    return LineItemAmounts(
        gross_amount=gross,
        discount_amount=discount_amount,
        taxable_amount=taxable,
        tax_amount=tax,
        amount=taxable + tax,
    )
