# ledgerdesk/api/v1/schemas/totals.py
"""Request schemas for the totals computation endpoints."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ledgerdesk.domain.models.documents import LineItem


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LineItemComputeRequest(_CamelModel):
    """Raw line item inputs; numbers may arrive as strings from form fields."""

    quantity: Any = 0
    rate: Any = 0
    discount: Any = 0
    discount_type: str = "percentage"
    tax: Any = None
    tax_name: str | None = Field(
        default=None,
        description="Tax code (GST18, IGST5, none); used when ``tax`` is not given",
    )
    strict: bool = False


class DocumentComputeRequest(_CamelModel):
    """A whole document's pricing inputs."""

    items: list[LineItem] = Field(default_factory=list)
    shipping_charges: Any = 0
    adjustment: Any = 0
    place_of_supply: str | None = None
    home_state_code: str | None = Field(default=None, min_length=2, max_length=2)
    tds_type: str | None = None
    tds_tax: str | None = None
    strict: bool | None = None
