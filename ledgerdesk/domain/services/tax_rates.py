# ledgerdesk/domain/services/tax_rates.py
"""
Static tax rate table.

Tax codes are what the line item ``taxName`` carries ("GST18", "IGST5",
"none"); the rate is what ends up in the ``tax`` field.  Withholding
options (TDS / TCS) apply at document level, not per line.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from ledgerdesk.domain.services.money import HUNDRED, ZERO, to_decimal

GST_SLABS = (0, 5, 12, 18, 28)


@dataclass(frozen=True)
class TaxOption:
    value: str
    label: str
    rate: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {"value": self.value, "label": self.label, "rate": float(self.rate)}


TAX_OPTIONS: tuple[TaxOption, ...] = (
    TaxOption("none", "None", ZERO),
    *(TaxOption(f"GST{slab}", f"GST {slab}%", Decimal(slab)) for slab in GST_SLABS),
    *(TaxOption(f"IGST{slab}", f"IGST {slab}%", Decimal(slab)) for slab in GST_SLABS),
)

TAX_RATES: dict[str, Decimal] = {opt.value: opt.rate for opt in TAX_OPTIONS}

WITHHOLDING_OPTIONS: tuple[TaxOption, ...] = (
    TaxOption("none", "None", ZERO),
    TaxOption("tds1", "TDS 1%", Decimal("1")),
    TaxOption("tds2", "TDS 2%", Decimal("2")),
    TaxOption("tcs1", "TCS 1%", Decimal("1")),
)

_WITHHOLDING_RATES: dict[str, Decimal] = {opt.value: opt.rate for opt in WITHHOLDING_OPTIONS}

_DIGITS_RE = re.compile(r"\d+")


def get_tax_rate(code: str | None) -> Decimal:
    """Rate for a tax code; unknown or empty codes are tax free."""
    if not code:
        return ZERO
    return TAX_RATES.get(code.strip(), ZERO)


def is_igst_code(tax_name: str | None) -> bool:
    return bool(tax_name) and tax_name.startswith("IGST")


def parse_tax_rate(tax_name: str | None, fallback: Any = None) -> Decimal:
    """
    Rate implied by a tax code stored on an existing document.

    GST/IGST codes carry their slab in the name ("GST18" -> 18).  For any
    other code the stored ``tax`` value is trusted only when it looks like a
    percentage (below 100); older records stored the tax *amount* there.
    """
    name = (tax_name or "").strip().upper()
    if name.startswith("GST") or name.startswith("IGST"):
        match = _DIGITS_RE.search(name)
        return Decimal(match.group(0)) if match else ZERO

    rate = to_decimal(fallback)
    if ZERO < rate < HUNDRED:
        return rate
    return ZERO


def get_withholding_rate(code: str | None) -> Decimal:
    """Rate for a TDS/TCS option ("tds1" -> 1); digits are read from unknown codes."""
    if not code:
        return ZERO
    code = code.strip().lower()
    if code in _WITHHOLDING_RATES:
        return _WITHHOLDING_RATES[code]
    match = _DIGITS_RE.search(code)
    return Decimal(match.group(0)) if match else ZERO


def list_tax_options() -> list[dict[str, Any]]:
    return [opt.to_dict() for opt in TAX_OPTIONS]


def list_withholding_options() -> list[dict[str, Any]]:
    return [opt.to_dict() for opt in WITHHOLDING_OPTIONS]
