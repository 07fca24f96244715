"""Tests for the line item amount calculator."""

from decimal import Decimal

import pytest

from ledgerdesk.domain.models.documents import LineItem
from ledgerdesk.domain.services.line_items import (
    DiscountType,
    InvalidLineItemError,
    compute_line_item,
)


class TestComputeLineItem:

    def test_percentage_discount_with_gst(self):
        result = compute_line_item(10, 100, 10, "percentage", 18)
        assert result.gross_amount == Decimal("1000")
        assert result.discount_amount == Decimal("100")
        assert result.taxable_amount == Decimal("900")
        assert result.tax_amount == Decimal("162")
        assert result.amount == Decimal("1062")

    def test_flat_discount_without_tax(self):
        result = compute_line_item(5, 50, 25, "flat", 0)
        assert result.taxable_amount == Decimal("225")
        assert result.tax_amount == Decimal("0")
        assert result.amount == Decimal("225")

    @pytest.mark.parametrize(
        "q, r, d, t",
        [("3", "33.33", "12.5", "5"), ("1.5", "19.99", "0", "28"), ("7", "0.07", "100", "12")],
    )
    def test_percentage_formula(self, q, r, d, t):
        q, r, d, t = map(Decimal, (q, r, d, t))
        expected = (q * r - q * r * d / 100) * (1 + t / 100)
        assert compute_line_item(q, r, d, DiscountType.PERCENTAGE, t).amount == expected

    def test_flat_formula(self):
        q, r, d, t = Decimal("4"), Decimal("12.25"), Decimal("3.5"), Decimal("18")
        expected = (q * r - d) * (1 + t / 100)
        assert compute_line_item(q, r, d, DiscountType.FLAT, t).amount == expected

    def test_no_intermediate_rounding(self):
        result = compute_line_item(1, "0.01", 0, "percentage", 18)
        assert result.tax_amount == Decimal("0.0018")

    def test_garbage_inputs_become_zero(self):
        result = compute_line_item("abc", None, "", "percentage", float("nan"))
        assert result.amount == Decimal("0")

    def test_out_of_range_input_becomes_zero(self):
        result = compute_line_item("1e9999999", 1, 0, "percentage", 18)
        assert result.amount == Decimal("0")

    def test_large_inputs_do_not_overflow(self):
        result = compute_line_item("1e300", "1e300", "1e300", "flat", "1e300")
        assert result.gross_amount == Decimal("1e600")
        assert result.tax_amount == (Decimal("1e600") - Decimal("1e300")) * Decimal("1e300") / 100

    def test_unknown_discount_type_is_percentage(self):
        result = compute_line_item(1, 200, 10, "weird", 0)
        assert result.discount_amount == Decimal("20")

    def test_negative_taxable_passes_through(self):
        result = compute_line_item(1, 100, 150, "flat", 18)
        assert result.taxable_amount == Decimal("-50")
        assert result.amount == Decimal("-59")

    def test_strict_mode_rejects_negative_taxable(self):
        with pytest.raises(InvalidLineItemError) as exc_info:
            compute_line_item(1, 100, 150, "flat", 18, strict=True, line_id="row-3")
        assert exc_info.value.line_id == "row-3"
        assert exc_info.value.taxable_amount == Decimal("-50")


class TestLineItemModel:

    def test_amount_is_derived(self):
        item = LineItem.model_validate({
            "quantity": "10", "rate": "100", "discount": "10",
            "discountType": "percentage", "tax": "18", "taxName": "GST18",
            "amount": 5,
        })
        assert item.amount == Decimal("1062")

    def test_amount_follows_assignment(self):
        item = LineItem(quantity=1, rate=100)
        item.quantity = "3"
        assert item.amount == Decimal("300")

    def test_camel_case_wire_format(self):
        item = LineItem(id="1", item_id="itm", quantity=2, rate="45,000.00", tax_name="GST5", tax=5)
        payload = item.model_dump(mode="json", by_alias=True)
        assert payload["itemId"] == "itm"
        assert payload["taxName"] == "GST5"
        assert payload["discountType"] == "percentage"
        assert payload["rate"] == 45000.0
        assert payload["amount"] == 94500.0

    def test_defaults(self):
        item = LineItem.model_validate({"taxName": None, "discountType": None})
        assert item.tax_name == "none"
        assert item.discount_type is DiscountType.PERCENTAGE
        assert item.amount == Decimal("0")
