# ledgerdesk/domain/services/document_totals.py
"""
Document totals aggregation.

Sums line items into a subtotal and GST heads, then adds shipping and
adjustment:

    total = sub_total + cgst + sgst + igst + shipping_charges + adjustment

Each line's tax lands in exactly one place: IGST for inter-state supplies
(or for a line explicitly taxed with an IGST code), otherwise split evenly
into CGST and SGST.  Withholding (TDS/TCS) is reported separately through
``balance_due`` and never changes ``total``.

The computation is pure and rebuilt from scratch on every call; documents
carry a few dozen lines at most.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Iterable, Mapping

from ledgerdesk.config.settings import settings
from ledgerdesk.domain.models.documents import DocumentTotals, LineItem
from ledgerdesk.domain.services.money import HUNDRED, ZERO, to_decimal
from ledgerdesk.domain.services.place_of_supply import is_inter_state
from ledgerdesk.domain.services.tax_rates import get_withholding_rate, is_igst_code

logger = logging.getLogger("document_totals")

TWO = Decimal("2")


def _as_line_item(item: LineItem | Mapping[str, Any]) -> LineItem:
    if isinstance(item, LineItem):
        return item
    return LineItem.model_validate(item)


def _rate_label(rate: Decimal) -> str:
    """9 -> "9", 2.50 -> "2.5"."""
    return format(rate.normalize(), "f")


def compute_document_totals(
    items: Iterable[LineItem | Mapping[str, Any]],
    shipping_charges: Any = ZERO,
    adjustment: Any = ZERO,
    place_of_supply: str | None = None,
    home_state_code: str | None = None,
    *,
    igst_tax_name_override: bool | None = None,
    withholding_type: str | None = None,
    withholding_code: str | None = None,
    strict: bool | None = None,
) -> DocumentTotals:
    """
    Aggregate line items into :class:`DocumentTotals`.

    Args:
        items: LineItem objects or their camelCase JSON dicts.
        shipping_charges, adjustment: added to the total as entered
            (blank / garbage counts as zero).
        place_of_supply: state of the counterparty in any accepted shape.
        home_state_code: seller's GST state code; defaults to
            ``settings.HOME_STATE_CODE``.
        igst_tax_name_override: when true (the default from settings) a
            line whose ``taxName`` starts with "IGST" is booked to IGST even
            on an intra-state document.
        withholding_type: "TDS" (deducted from balance due) or "TCS"
            (collected on top of it).
        withholding_code: option code such as "tds1" giving the percentage
            applied to the subtotal.
        strict: raise InvalidLineItemError for lines priced below zero.
    """
    home = home_state_code or settings.HOME_STATE_CODE
    override = settings.IGST_TAX_NAME_OVERRIDE if igst_tax_name_override is None else igst_tax_name_override
    strict = settings.STRICT_LINE_ITEMS if strict is None else strict

    inter_state = is_inter_state(place_of_supply, home)

    sub_total = ZERO
    cgst = ZERO
    sgst = ZERO
    igst = ZERO
    splits: dict[str, Decimal] = {}

    for raw in items:
        item = _as_line_item(raw)
        amounts = item.amounts(strict=strict)
        tax_amount = amounts.tax_amount

        sub_total += amounts.taxable_amount

        if inter_state or (override and is_igst_code(item.tax_name)):
            igst += tax_amount
            if item.tax:
                key = f"IGST{_rate_label(item.tax)}"
                splits[key] = splits.get(key, ZERO) + tax_amount
        else:
            half = tax_amount / TWO
            cgst += half
            sgst += half
            if item.tax:
                half_rate = _rate_label(item.tax / TWO)
                for head in ("CGST", "SGST"):
                    key = f"{head}{half_rate}"
                    splits[key] = splits.get(key, ZERO) + half

    shipping = to_decimal(shipping_charges)
    adjust = to_decimal(adjustment)
    tax_total = cgst + sgst + igst
    total = sub_total + cgst + sgst + igst + shipping + adjust

    wh_type = (withholding_type or "").strip().upper() or None
    wh_amount = ZERO
    if wh_type in ("TDS", "TCS") and withholding_code:
        wh_amount = sub_total * get_withholding_rate(withholding_code) / HUNDRED
    elif wh_type is not None and wh_type not in ("TDS", "TCS"):
        logger.warning("Ignoring unknown withholding type %r", withholding_type)
        wh_type = None

    if wh_type == "TCS":
        balance_due = total + wh_amount
    else:
        balance_due = total - wh_amount

    return DocumentTotals(
        sub_total=sub_total,
        cgst=cgst,
        sgst=sgst,
        igst=igst,
        shipping_charges=shipping,
        adjustment=adjust,
        total=total,
        tax_total=tax_total,
        gst_splits=splits,
        inter_state=inter_state,
        withholding_type=wh_type,
        withholding_amount=wh_amount,
        balance_due=balance_due,
    )
