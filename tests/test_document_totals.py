"""Tests for the document totals aggregator."""

from decimal import Decimal

import pytest

from ledgerdesk.domain.models.documents import LineItem
from ledgerdesk.domain.services.document_totals import compute_document_totals
from ledgerdesk.domain.services.line_items import InvalidLineItemError


def _item(**overrides) -> dict:
    base = {
        "quantity": 10, "rate": 100, "discount": 10, "discountType": "percentage",
        "tax": 18, "taxName": "GST18",
    }
    base.update(overrides)
    return base


class TestIntraState:

    def test_home_state_splits_cgst_sgst(self):
        totals = compute_document_totals([_item()], place_of_supply="Maharashtra", home_state_code="27")
        assert totals.sub_total == Decimal("900")
        assert totals.cgst == Decimal("81")
        assert totals.sgst == Decimal("81")
        assert totals.igst == Decimal("0")
        assert totals.total == Decimal("1062")
        assert not totals.inter_state

    def test_unset_place_of_supply_is_intra(self):
        totals = compute_document_totals([_item()], home_state_code="27")
        assert totals.igst == Decimal("0")
        assert totals.cgst == totals.sgst == totals.tax_total / 2

    def test_default_home_state_from_settings(self):
        totals = compute_document_totals([_item()], place_of_supply="27 - Maharashtra")
        assert totals.igst == Decimal("0")


class TestInterState:

    def test_unpadded_home_state_code(self):
        totals = compute_document_totals([_item()], place_of_supply="Delhi", home_state_code="7")
        assert not totals.inter_state
        assert totals.igst == Decimal("0")
        assert totals.cgst == totals.sgst == Decimal("81")

    def test_other_state_goes_to_igst(self):
        totals = compute_document_totals([_item()], place_of_supply="Karnataka", home_state_code="27")
        assert totals.igst == Decimal("162")
        assert totals.cgst == Decimal("0")
        assert totals.sgst == Decimal("0")
        assert totals.inter_state

    def test_igst_tax_name_overrides_intra_state(self):
        items = [_item(), _item(taxName="IGST18")]
        totals = compute_document_totals(items, place_of_supply="Maharashtra", home_state_code="27")
        assert totals.igst == Decimal("162")
        assert totals.cgst == Decimal("81")
        assert totals.sgst == Decimal("81")

    def test_override_can_be_disabled(self):
        totals = compute_document_totals(
            [_item(taxName="IGST18")],
            place_of_supply="Maharashtra",
            home_state_code="27",
            igst_tax_name_override=False,
        )
        assert totals.igst == Decimal("0")
        assert totals.cgst == Decimal("81")


class TestSumLaw:

    @pytest.mark.parametrize("pos", ["Maharashtra", "Karnataka", None])
    def test_total_is_sum_of_parts(self, pos):
        items = [
            _item(),
            _item(quantity=5, rate=50, discount=25, discountType="flat", tax=0, taxName="GST0"),
            _item(quantity="2.5", rate="19.99", discount=0, tax=5, taxName="IGST5"),
        ]
        totals = compute_document_totals(
            items, shipping_charges="40", adjustment="-1.25", place_of_supply=pos, home_state_code="27",
        )
        assert totals.total == (
            totals.sub_total + totals.cgst + totals.sgst + totals.igst
            + totals.shipping_charges + totals.adjustment
        )
        assert totals.shipping_charges == Decimal("40")
        assert totals.adjustment == Decimal("-1.25")

    def test_idempotent(self):
        items = [LineItem.model_validate(_item()), LineItem.model_validate(_item(taxName="IGST18"))]
        first = compute_document_totals(items, 10, 1, "Goa", "27")
        second = compute_document_totals(items, 10, 1, "Goa", "27")
        assert first == second

    def test_empty_document(self):
        totals = compute_document_totals([], shipping_charges=None, adjustment="")
        assert totals.total == Decimal("0")


class TestGstSplits:

    def test_intra_splits_by_half_rate(self):
        items = [_item(), _item(quantity=1, rate=100, discount=0, tax=5, taxName="GST5")]
        totals = compute_document_totals(items, place_of_supply="Maharashtra", home_state_code="27")
        assert totals.gst_splits == {
            "CGST9": Decimal("81"),
            "SGST9": Decimal("81"),
            "CGST2.5": Decimal("2.5"),
            "SGST2.5": Decimal("2.5"),
        }

    def test_inter_splits_by_full_rate(self):
        totals = compute_document_totals([_item()], place_of_supply="Kerala", home_state_code="27")
        assert totals.gst_splits == {"IGST18": Decimal("162")}

    def test_zero_rate_not_listed(self):
        totals = compute_document_totals([_item(tax=0, taxName="GST0")], home_state_code="27")
        assert totals.gst_splits == {}


class TestWithholding:

    def test_tds_reduces_balance_due_only(self):
        totals = compute_document_totals(
            [_item()], home_state_code="27", withholding_type="TDS", withholding_code="tds1",
        )
        assert totals.withholding_amount == Decimal("9")
        assert totals.total == Decimal("1062")
        assert totals.balance_due == Decimal("1053")

    def test_tcs_adds_to_balance_due(self):
        totals = compute_document_totals(
            [_item()], home_state_code="27", withholding_type="tcs", withholding_code="tcs1",
        )
        assert totals.withholding_type == "TCS"
        assert totals.balance_due == Decimal("1071")

    def test_no_withholding(self):
        totals = compute_document_totals([_item()], home_state_code="27", withholding_type="TDS")
        assert totals.withholding_amount == Decimal("0")
        assert totals.balance_due == totals.total


class TestStrict:

    def test_strict_raises_for_negative_line(self):
        with pytest.raises(InvalidLineItemError):
            compute_document_totals(
                [_item(discount=5000, discountType="flat")], home_state_code="27", strict=True,
            )

    def test_lenient_by_default(self):
        totals = compute_document_totals(
            [_item(discount=5000, discountType="flat")], home_state_code="27", strict=False,
        )
        assert totals.sub_total == Decimal("-4000")


class TestPayload:

    def test_camel_case_numbers(self):
        payload = compute_document_totals([_item()], 50, 0, "Karnataka", "27").to_payload()
        assert payload["subTotal"] == 900.0
        assert payload["igst"] == 162.0
        assert payload["shippingCharges"] == 50.0
        assert payload["total"] == 1112.0
        assert payload["gstSplits"] == {"IGST18": 162.0}
        assert payload["interState"] is True
