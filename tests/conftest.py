"""Shared test fixtures for the ledgerdesk test suite."""

import asyncio

import pytest


@pytest.fixture(scope="session")
def event_loop():
    """Use a single event loop for the entire test session."""
    loop = asyncio.new_event_loop()
    yield loop
    loop.close()


@pytest.fixture
def gst18_item() -> dict:
    """10 x 100 with 10% discount, taxed GST 18%."""
    return {
        "id": "1",
        "itemId": "itm-1",
        "name": "Laptop stand",
        "quantity": 10,
        "rate": 100,
        "discount": 10,
        "discountType": "percentage",
        "tax": 18,
        "taxName": "GST18",
    }


@pytest.fixture
def credit_note_payload(gst18_item) -> dict:
    """Credit note as stored by the document backend."""
    return {
        "id": "cn-42",
        "customerId": "cust-7",
        "customerName": "XYZ Enterprises",
        "creditNoteNumber": "CN-00042",
        "placeOfSupply": "27 - Maharashtra",
        "items": [gst18_item, {**gst18_item, "id": "2", "amount": 99999}],
        "subTotal": 1,
        "cgst": 2,
        "sgst": 3,
        "igst": 4,
        "shippingCharges": "50",
        "adjustment": "-0.5",
        "total": 12345,
        "tdsType": "TDS",
        "tdsTax": "tds1",
        "customerNotes": "Thanks for your business.",
        "status": "draft",
    }
