# ledgerdesk/domain/services/place_of_supply.py
"""
Place-of-supply resolution and GST regime classification.

A document's place of supply decides whether its tax is split into
CGST + SGST (intra-state) or charged as IGST (inter-state).  The value
arrives in several shapes depending on where it was entered:

    "Maharashtra"            (state dropdown)
    "27"                     (state code)
    "27 - Maharashtra"       (customer master label)
    "27-Maharashtra"         (imported invoices)
    "27AADCB2230M1ZP"        (a GSTIN, first two digits are the state)
"""

from __future__ import annotations

import logging
import re
from enum import Enum

logger = logging.getLogger("place_of_supply")

STATE_CODES: dict[str, str] = {
    "01": "Jammu and Kashmir", "02": "Himachal Pradesh", "03": "Punjab",
    "04": "Chandigarh", "05": "Uttarakhand", "06": "Haryana",
    "07": "Delhi", "08": "Rajasthan", "09": "Uttar Pradesh",
    "10": "Bihar", "11": "Sikkim", "12": "Arunachal Pradesh",
    "13": "Nagaland", "14": "Manipur", "15": "Mizoram",
    "16": "Tripura", "17": "Meghalaya", "18": "Assam",
    "19": "West Bengal", "20": "Jharkhand", "21": "Odisha",
    "22": "Chhattisgarh", "23": "Madhya Pradesh", "24": "Gujarat",
    "25": "Daman and Diu", "26": "Dadra and Nagar Haveli", "27": "Maharashtra",
    "29": "Karnataka", "30": "Goa", "31": "Lakshadweep",
    "32": "Kerala", "33": "Tamil Nadu", "34": "Puducherry",
    "35": "Andaman and Nicobar Islands", "36": "Telangana", "37": "Andhra Pradesh",
    "38": "Ladakh", "97": "Other Territory",
}

# Alternate spellings seen in customer masters
_STATE_ALIASES: dict[str, str] = {
    "andaman and nicobar": "35",
    "andhra pradesh (new)": "37",
    "dadra and nagar haveli and daman and diu": "26",
    "new delhi": "07",
    "nct of delhi": "07",
    "orissa": "21",
    "pondicherry": "34",
    "uttaranchal": "05",
}

# Names offered by the place-of-supply dropdown, in display order
INDIAN_STATES: tuple[str, ...] = (
    "Andhra Pradesh", "Arunachal Pradesh", "Assam", "Bihar", "Chhattisgarh",
    "Goa", "Gujarat", "Haryana", "Himachal Pradesh", "Jharkhand", "Karnataka",
    "Kerala", "Madhya Pradesh", "Maharashtra", "Manipur", "Meghalaya",
    "Mizoram", "Nagaland", "Odisha", "Punjab", "Rajasthan", "Sikkim",
    "Tamil Nadu", "Telangana", "Tripura", "Uttar Pradesh", "Uttarakhand",
    "West Bengal", "Andaman and Nicobar Islands", "Chandigarh",
    "Dadra and Nagar Haveli", "Daman and Diu", "Delhi", "Jammu and Kashmir",
    "Ladakh", "Lakshadweep", "Puducherry",
)

_CODE_LABEL_RE = re.compile(r"^(\d{2})\s*-\s*(.*)$")
_GSTIN_RE = re.compile(r"^(\d{2})[A-Z]{5}\d{4}[A-Z][A-Z\d]Z[A-Z\d]$")


class TaxRegime(str, Enum):
    INTRA = "intra"
    INTER = "inter"
    EXEMPT = "exempt"


def _name_key(name: str) -> str:
    return " ".join(name.replace("&", " and ").lower().split())


_NAME_TO_CODE: dict[str, str] = {_name_key(n): c for c, n in STATE_CODES.items()}
_NAME_TO_CODE.update(_STATE_ALIASES)


def normalize_place_of_supply(value: str | None) -> str:
    """Strip a leading code from a "27 - Maharashtra" style label."""
    if not value:
        return ""
    parts = value.split(" - ")
    picked = parts[-1] if len(parts) > 1 else value
    return picked.strip()


def state_name(code: str | None) -> str | None:
    if not code:
        return None
    return STATE_CODES.get(code)


def state_from_gstin(gstin: str | None) -> str | None:
    """Two-digit state code of a GSTIN, or None when it does not look like one."""
    if not gstin:
        return None
    match = _GSTIN_RE.match(gstin.strip().upper())
    if not match or match.group(1) not in STATE_CODES:
        return None
    return match.group(1)


def resolve_state_code(value: str | None) -> str | None:
    """Best-effort two-digit GST state code for any place-of-supply shape."""
    if not value:
        return None
    text = value.strip()
    if not text:
        return None

    if text.isdigit():
        code = text.zfill(2)
        return code if code in STATE_CODES else None

    match = _CODE_LABEL_RE.match(text)
    if match and match.group(1) in STATE_CODES:
        return match.group(1)

    from_gstin = state_from_gstin(text)
    if from_gstin:
        return from_gstin

    return _NAME_TO_CODE.get(_name_key(normalize_place_of_supply(text)))


def is_inter_state(place_of_supply: str | None, home_state_code: str) -> bool:
    """
    True when the supply leaves the seller's home state.

    An empty place of supply is treated as intra-state.  A value that cannot
    be resolved to a state code is compared by name against the home state.
    """
    normalized = normalize_place_of_supply(place_of_supply)
    if not normalized:
        return False

    # "7" and "07" are the same state
    home = resolve_state_code(home_state_code) or home_state_code

    code = resolve_state_code(place_of_supply)
    if code is not None:
        return code != home

    home_name = state_name(home) or ""
    if _name_key(normalized) == _name_key(home_name):
        return False
    logger.debug("Unresolved place of supply %r treated as inter-state", place_of_supply)
    return True


def determine_tax_regime(
    place_of_supply: str | None,
    home_state_code: str,
    tax_exempt: bool = False,
) -> TaxRegime:
    """Classify a transaction for a counterparty; tax exemption wins over geography."""
    if tax_exempt:
        return TaxRegime.EXEMPT
    if is_inter_state(place_of_supply, home_state_code):
        return TaxRegime.INTER
    return TaxRegime.INTRA
