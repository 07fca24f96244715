# ledgerdesk/domain/services/document_service.py
"""
Load / convert / submit flows for document edit sessions.

Wraps ``DocumentsClient`` with the steps an edit screen goes through:
fetch the stored document into a ``DocumentForm``, optionally pull the
rows of an invoice into a credit note, and send the recomputed document
back.  A failed save is reported, never retried.
"""

from __future__ import annotations

import logging
from typing import Any

from ledgerdesk.domain.models.documents import DocumentKind
from ledgerdesk.domain.services.document_forms import DocumentForm, DocumentValidationError
from ledgerdesk.domain.services.line_items import InvalidLineItemError
from ledgerdesk.infrastructure.external.documents_client import DocumentsApiError, DocumentsClient

logger = logging.getLogger("document_service")


async def load_document_form(
    kind: DocumentKind | str,
    document_id: str,
    client: DocumentsClient | None = None,
    home_state_code: str | None = None,
) -> DocumentForm:
    """Fetch a stored document and open it for editing.

    Raises
    ------
    DocumentsApiError
        When the backend cannot return the document.
    """
    client = client or DocumentsClient()
    data = await client.fetch_document(kind, document_id)
    form = DocumentForm.from_payload(kind, data, home_state_code=home_state_code)
    if form.document_id is None:
        form.document_id = document_id
    return form


async def load_invoice_into_credit_note(
    form: DocumentForm,
    invoice_id: str,
    client: DocumentsClient | None = None,
) -> bool:
    """Copy an invoice's rows into a credit note form.

    Returns ``False`` and leaves the form as it was when the invoice cannot
    be fetched.
    """
    client = client or DocumentsClient()
    try:
        invoice = await client.fetch_document(DocumentKind.INVOICE, invoice_id)
    except DocumentsApiError as e:
        logger.error("Failed to load invoice %s items: %s", invoice_id, e)
        return False

    invoice.setdefault("id", invoice_id)
    form.import_invoice_items(invoice)
    return True


async def submit_document_form(
    form: DocumentForm,
    status: str | None = None,
    client: DocumentsClient | None = None,
) -> dict[str, Any]:
    """Validate and persist the whole document.

    Returns
    -------
    dict
        ``{"success": True, "data": {...}, "message": "Credit note updated"}``
        or ``{"success": False, "error": "..."}``
    """
    label = form.kind.label.capitalize()
    action = "update" if form.document_id else "create"

    try:
        form.validate()
        payload = form.to_payload(status=status)
    except (DocumentValidationError, InvalidLineItemError) as e:
        return {"success": False, "error": str(e)}

    client = client or DocumentsClient()
    try:
        data = await client.save_document(form.kind, payload, form.document_id)
    except DocumentsApiError as e:
        logger.error("Failed to %s %s %s: %s", action, form.kind.label, form.document_id, e)
        return {"success": False, "error": f"Failed to {action} {form.kind.label}"}

    if not form.document_id and data.get("id"):
        form.document_id = str(data["id"])

    logger.info("%s %s %sd (status=%s)", label, form.document_id, action, status)
    return {"success": True, "data": data, "message": f"{label} {action}d successfully"}
