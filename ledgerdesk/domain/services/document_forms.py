# ledgerdesk/domain/services/document_forms.py
"""
Edit-session state for a single priced document.

One ``DocumentForm`` backs the edit screen of a quote, credit note, purchase
order or delivery challan.  It owns the transient line item rows, applies
each user change, and rebuilds the totals from scratch whenever they are
read.  The whole document is serialized back in one payload on submit.

Header fields the form does not understand (customer name, notes, terms,
salesperson ...) are carried through untouched.
"""

from __future__ import annotations

import logging
import time
from decimal import Decimal
from typing import Any, Mapping

from pydantic.alias_generators import to_camel

from ledgerdesk.config.settings import settings
from ledgerdesk.domain.models.documents import DocumentKind, DocumentTotals, LineItem
from ledgerdesk.domain.services.document_totals import compute_document_totals
from ledgerdesk.domain.services.money import ZERO, json_number, round_money, to_decimal
from ledgerdesk.domain.services.place_of_supply import normalize_place_of_supply
from ledgerdesk.domain.services.tax_rates import get_tax_rate, parse_tax_rate

logger = logging.getLogger("document_forms")

# Keys recomputed on every save; stale values from the backend are dropped
_DERIVED_KEYS = frozenset({
    "items", "subTotal", "cgst", "sgst", "igst", "total", "tdsAmount",
    "balanceDue", "placeOfSupply", "shippingCharges", "adjustment",
    "tdsType", "tdsTax",
})


class DocumentValidationError(Exception):
    """Raised when a document is not complete enough to be saved."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class DocumentForm:
    """Form controller shared by every document type."""

    def __init__(
        self,
        kind: DocumentKind | str,
        line_items: list[LineItem] | None = None,
        *,
        document_id: str | None = None,
        header: dict[str, Any] | None = None,
        place_of_supply: str | None = None,
        shipping_charges: Any = ZERO,
        adjustment: Any = ZERO,
        withholding_type: str | None = None,
        withholding_code: str | None = None,
        home_state_code: str | None = None,
    ) -> None:
        self.kind = DocumentKind(kind)
        self.document_id = document_id
        self.header: dict[str, Any] = dict(header or {})
        self.line_items: list[LineItem] = list(line_items or [])
        self.place_of_supply = normalize_place_of_supply(place_of_supply)
        self.shipping_charges: Decimal = to_decimal(shipping_charges)
        self.adjustment: Decimal = to_decimal(adjustment)
        self.withholding_type = withholding_type
        self.withholding_code = withholding_code
        self.home_state_code = home_state_code or settings.HOME_STATE_CODE

        if not self.line_items:
            self.add_line_item()

    # ---- construction / serialization ----

    @classmethod
    def from_payload(
        cls,
        kind: DocumentKind | str,
        payload: Mapping[str, Any],
        home_state_code: str | None = None,
    ) -> DocumentForm:
        """Build a form from a document as returned by the backend."""
        items = [
            LineItem.model_validate({**raw, "id": raw.get("id") or str(index + 1)})
            for index, raw in enumerate(payload.get("items") or [])
        ]
        header = {k: v for k, v in payload.items() if k not in _DERIVED_KEYS}
        document_id = payload.get("id") or payload.get("_id")

        return cls(
            kind,
            items,
            document_id=str(document_id) if document_id else None,
            header=header,
            place_of_supply=payload.get("placeOfSupply"),
            shipping_charges=payload.get("shippingCharges"),
            adjustment=payload.get("adjustment"),
            withholding_type=payload.get("tdsType"),
            withholding_code=payload.get("tdsTax"),
            home_state_code=home_state_code,
        )

    def to_payload(self, status: str | None = None) -> dict[str, Any]:
        """Whole-document payload with items and freshly computed totals."""
        totals = self.totals
        payload: dict[str, Any] = dict(self.header)
        payload.update({
            "placeOfSupply": self.place_of_supply,
            "items": [item.model_dump(mode="json", by_alias=True) for item in self.line_items],
            "subTotal": json_number(totals.sub_total),
            "shippingCharges": json_number(totals.shipping_charges),
            "cgst": json_number(totals.cgst),
            "sgst": json_number(totals.sgst),
            "igst": json_number(totals.igst),
            "adjustment": json_number(totals.adjustment),
            "total": json_number(totals.total),
            "tdsType": self.withholding_type,
            "tdsTax": self.withholding_code,
            "tdsAmount": json_number(totals.withholding_amount),
        })
        if status is not None:
            payload["status"] = status
        return payload

    # ---- totals ----

    @property
    def totals(self) -> DocumentTotals:
        return compute_document_totals(
            self.line_items,
            shipping_charges=self.shipping_charges,
            adjustment=self.adjustment,
            place_of_supply=self.place_of_supply,
            home_state_code=self.home_state_code,
            withholding_type=self.withholding_type,
            withholding_code=self.withholding_code,
        )

    def validate(self) -> None:
        field = self.kind.counterparty_field
        if not self.header.get(field):
            party = "vendor" if field == "vendorId" else "customer"
            raise DocumentValidationError(f"Please select a {party}", field=field)

    # ---- line items ----

    def _next_id(self) -> str:
        taken = {item.id for item in self.line_items}
        candidate = int(time.time() * 1000)
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)

    def get_line_item(self, line_id: str) -> LineItem:
        for item in self.line_items:
            if item.id == line_id:
                return item
        raise KeyError(f"Line item {line_id} not found")

    def add_line_item(self, **fields: Any) -> LineItem:
        item = LineItem.model_validate({
            "quantity": 1,
            "discount_type": "percentage",
            "tax_name": "none",
            **fields,
            "id": fields.get("id") or self._next_id(),
        })
        self.line_items.append(item)
        return item

    def update_line_item(self, line_id: str, **changes: Any) -> LineItem:
        """Apply field changes (snake_case or camelCase keys) to one row."""
        current = self.get_line_item(line_id)
        data = current.model_dump()
        data.pop("amount", None)
        for key, value in changes.items():
            data[_field_name(key)] = value
        data["id"] = line_id

        updated = LineItem.model_validate(data)
        self.line_items = [updated if item is current else item for item in self.line_items]
        return updated

    def remove_line_item(self, line_id: str) -> bool:
        """Drop a row; the last remaining row is kept so the form is never empty."""
        if len(self.line_items) <= 1:
            return False
        before = len(self.line_items)
        self.line_items = [item for item in self.line_items if item.id != line_id]
        return len(self.line_items) != before

    def select_catalog_item(self, line_id: str, catalog_item: Mapping[str, Any]) -> LineItem:
        """Fill a row from a product/service master record."""
        price = to_decimal(catalog_item.get("rate")) or to_decimal(catalog_item.get("sellingPrice"))
        return self.update_line_item(
            line_id,
            item_id=catalog_item.get("id") or "",
            name=catalog_item.get("name") or "",
            description=catalog_item.get("description") or "",
            account=catalog_item.get("salesAccount") or "sales",
            rate=price,
        )

    def select_tax(self, line_id: str, tax_code: str) -> LineItem:
        return self.update_line_item(line_id, tax=get_tax_rate(tax_code), tax_name=tax_code or "none")

    # ---- header ----

    def set_place_of_supply(self, value: str | None) -> None:
        self.place_of_supply = normalize_place_of_supply(value)

    def set_shipping_charges(self, value: Any) -> None:
        self.shipping_charges = to_decimal(value)

    def set_adjustment(self, value: Any) -> None:
        self.adjustment = to_decimal(value)

    def set_withholding(self, withholding_type: str | None, code: str | None) -> None:
        self.withholding_type = withholding_type
        self.withholding_code = code

    def import_invoice_items(self, invoice: Mapping[str, Any]) -> None:
        """
        Replace the rows with those of an existing invoice.

        Used when a credit note is raised against an invoice: quantity
        defaults to 1, the tax rate is re-read from the tax code and the
        invoice's place of supply carries over.
        """
        if invoice.get("id"):
            self.header["invoiceId"] = invoice.get("id")
        if invoice.get("invoiceNumber"):
            self.header["invoiceNumber"] = invoice.get("invoiceNumber")
        self.header["originalInvoiceTotal"] = float(
            to_decimal(invoice.get("amount")) or to_decimal(invoice.get("total"))
        )
        if invoice.get("placeOfSupply"):
            self.set_place_of_supply(invoice.get("placeOfSupply"))

        raw_items = invoice.get("items") or []
        if not raw_items:
            return

        imported: list[LineItem] = []
        for index, raw in enumerate(raw_items):
            tax_name = raw.get("taxName") or "none"
            imported.append(LineItem(
                id=str(index + 1),
                item_id=raw.get("itemId") or "",
                name=raw.get("name") or "",
                description=raw.get("description") or "",
                account=raw.get("account") or "sales",
                quantity=to_decimal(raw.get("quantity")) or 1,
                rate=raw.get("rate"),
                discount=round_money(raw.get("discount")),
                discount_type=raw.get("discountType") or "percentage",
                tax=parse_tax_rate(tax_name, raw.get("tax")),
                tax_name=tax_name,
            ))
        self.line_items = imported
        logger.info("Imported %d items from invoice %s", len(imported), invoice.get("id"))


def _field_name(key: str) -> str:
    """Map a camelCase wire key to the LineItem attribute name."""
    if key in LineItem.model_fields:
        return key
    for name in LineItem.model_fields:
        if to_camel(name) == key:
            return name
    return key
