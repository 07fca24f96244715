# ledgerdesk/api/v1/routes/reference.py
"""Static lookup tables for the edit screens' dropdowns."""

from __future__ import annotations

from fastapi import APIRouter

from ledgerdesk.api.v1.envelope import ok
from ledgerdesk.config.settings import settings
from ledgerdesk.domain.services.place_of_supply import INDIAN_STATES, STATE_CODES, resolve_state_code
from ledgerdesk.domain.services.tax_rates import list_tax_options, list_withholding_options

router = APIRouter(tags=["Reference"])


@router.get("/tax-rates", response_model=dict)
async def get_tax_rates():
    """Tax and withholding options with their percentage rates."""
    return ok(data={
        "taxes": list_tax_options(),
        "withholding": list_withholding_options(),
    })


@router.get("/places-of-supply", response_model=dict)
async def get_places_of_supply():
    """State dropdown entries with their GST state codes."""
    return ok(data={
        "homeStateCode": settings.HOME_STATE_CODE,
        "homeState": STATE_CODES.get(settings.HOME_STATE_CODE),
        "states": [{"name": name, "code": resolve_state_code(name)} for name in INDIAN_STATES],
    })
