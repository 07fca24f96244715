# ledgerdesk/domain/models/documents.py
"""
Line items, document totals and document kinds.

Field names are snake_case in Python and camelCase on the wire, matching the
JSON the document backend stores (``itemId``, ``discountType``,
``taxName``, ``subTotal`` ...).
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, computed_field, field_validator
from pydantic.alias_generators import to_camel

from ledgerdesk.domain.services.line_items import DiscountType, LineItemAmounts, compute_line_item
from ledgerdesk.domain.services.money import ZERO, json_number, to_decimal

# Decimal in Python, plain JSON number on the wire
Money = Annotated[Decimal, PlainSerializer(json_number, return_type=Optional[float], when_used="json")]


class DocumentKind(str, Enum):
    QUOTE = "quote"
    CREDIT_NOTE = "credit_note"
    PURCHASE_ORDER = "purchase_order"
    DELIVERY_CHALLAN = "delivery_challan"
    INVOICE = "invoice"

    @property
    def resource(self) -> str:
        return _RESOURCES[self]

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")

    @property
    def counterparty_field(self) -> str:
        """Payload key that must be filled before the document can be saved."""
        return "vendorId" if self is DocumentKind.PURCHASE_ORDER else "customerId"


_RESOURCES = {
    DocumentKind.QUOTE: "quotes",
    DocumentKind.CREDIT_NOTE: "credit-notes",
    DocumentKind.PURCHASE_ORDER: "purchase-orders",
    DocumentKind.DELIVERY_CHALLAN: "delivery-challans",
    DocumentKind.INVOICE: "invoices",
}


class LineItem(BaseModel):
    """
    One priced row of a document.

    ``amount`` is derived on every read from the other fields; an ``amount``
    present in incoming JSON is ignored so it can never drift.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        validate_assignment=True,
    )

    id: str = ""
    item_id: str = ""
    name: str = ""
    description: str = ""
    account: str = ""
    quantity: Money = ZERO
    rate: Money = ZERO
    discount: Money = ZERO
    discount_type: DiscountType = DiscountType.PERCENTAGE
    tax: Money = ZERO
    tax_name: str = "none"

    @field_validator("quantity", "rate", "discount", "tax", mode="before")
    @classmethod
    def _coerce_number(cls, value: Any) -> Decimal:
        return to_decimal(value)

    @field_validator("discount_type", mode="before")
    @classmethod
    def _coerce_discount_type(cls, value: Any) -> DiscountType:
        return DiscountType.coerce(value)

    @field_validator("id", "item_id", "name", "description", "account", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("tax_name", mode="before")
    @classmethod
    def _coerce_tax_name(cls, value: Any) -> str:
        return str(value).strip() if value else "none"

    def amounts(self, strict: bool = False) -> LineItemAmounts:
        return compute_line_item(
            self.quantity,
            self.rate,
            self.discount,
            self.discount_type,
            self.tax,
            strict=strict,
            line_id=self.id or None,
        )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def amount(self) -> Money:
        return self.amounts().amount


class DocumentTotals(BaseModel):
    """Aggregated money figures of a document; ``total`` excludes withholding."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    sub_total: Money = ZERO
    cgst: Money = ZERO
    sgst: Money = ZERO
    igst: Money = ZERO
    shipping_charges: Money = ZERO
    adjustment: Money = ZERO
    total: Money = ZERO

    tax_total: Money = ZERO
    gst_splits: dict[str, Money] = Field(default_factory=dict)
    inter_state: bool = False

    withholding_type: Optional[str] = None
    withholding_amount: Money = ZERO
    balance_due: Money = ZERO

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
