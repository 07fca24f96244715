# ledgerdesk/api/v1/routes/totals.py
"""
Line item and document totals computation endpoints.

Stateless: the caller sends the current form values and gets back the
derived figures, exactly what the edit screens recompute on every change.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from ledgerdesk.api.v1.envelope import ok
from ledgerdesk.api.v1.schemas.totals import DocumentComputeRequest, LineItemComputeRequest
from ledgerdesk.domain.services.document_totals import compute_document_totals
from ledgerdesk.domain.services.line_items import compute_line_item
from ledgerdesk.domain.services.money import format_inr, json_number
from ledgerdesk.domain.services.tax_rates import get_tax_rate

logger = logging.getLogger("api.v1.totals")

router = APIRouter(prefix="/totals", tags=["Totals"])


@router.post("/line-item", response_model=dict)
async def compute_line_item_endpoint(body: LineItemComputeRequest):
    """Price a single line item."""
    tax_rate = body.tax if body.tax is not None else get_tax_rate(body.tax_name)
    result = compute_line_item(
        body.quantity,
        body.rate,
        body.discount,
        body.discount_type,
        tax_rate,
        strict=body.strict,
    )
    return ok(data={
        "grossAmount": json_number(result.gross_amount),
        "discountAmount": json_number(result.discount_amount),
        "taxableAmount": json_number(result.taxable_amount),
        "taxAmount": json_number(result.tax_amount),
        "amount": json_number(result.amount),
        "display": {"amount": format_inr(result.amount)},
    })


@router.post("/document", response_model=dict)
async def compute_document_endpoint(body: DocumentComputeRequest):
    """Aggregate a document's line items into its totals."""
    totals = compute_document_totals(
        body.items,
        shipping_charges=body.shipping_charges,
        adjustment=body.adjustment,
        place_of_supply=body.place_of_supply,
        home_state_code=body.home_state_code,
        withholding_type=body.tds_type,
        withholding_code=body.tds_tax,
        strict=body.strict,
    )
    data = totals.to_payload()
    data["items"] = [item.model_dump(mode="json", by_alias=True) for item in body.items]
    data["display"] = {
        "subTotal": format_inr(totals.sub_total),
        "cgst": format_inr(totals.cgst),
        "sgst": format_inr(totals.sgst),
        "igst": format_inr(totals.igst),
        "total": format_inr(totals.total),
        "balanceDue": format_inr(totals.balance_due),
    }
    return ok(data=data)
