# ledgerdesk/infrastructure/external/documents_client.py
"""
Client for the document REST backend.

The backend owns persistence for quotes, credit notes, purchase orders,
delivery challans and invoices:

    GET  /api/<resource>/<id>   -> {"success": true, "data": {...}}
    PUT  /api/<resource>/<id>   -> {"success": true, "data": {...}}
    POST /api/<resource>        -> {"success": true, "data": {...}}

Failures come back either as HTTP errors or as ``{"success": false,
"message": "..."}``.  Both raise :class:`DocumentsApiError`; nothing is
retried.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from ledgerdesk.config.settings import settings
from ledgerdesk.domain.models.documents import DocumentKind

logger = logging.getLogger("documents_client")


class DocumentsApiError(Exception):
    """Raised when the document backend rejects or fails a request."""

    def __init__(self, message: str, status_code: int = 0, response: dict | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response or {}


class DocumentsClient:
    """Thin async wrapper over the backend's JSON endpoints."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base = (base_url or settings.BACKEND_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.BACKEND_TIMEOUT
        # Injected in tests (httpx.MockTransport)
        self._transport = transport

    def _url(self, kind: DocumentKind, document_id: str | None = None) -> str:
        url = f"{self.base}/api/{kind.resource}"
        if document_id:
            url = f"{url}/{document_id}"
        return url

    async def _request(
        self,
        method: str,
        url: str,
        json_body: dict | None = None,
    ) -> Dict[str, Any]:
        logger.info("Backend %s %s", method, url)

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                r = await client.request(
                    method, url, json=json_body, headers={"Content-Type": "application/json"},
                )
                r.raise_for_status()
            except httpx.HTTPStatusError as exc:
                body: dict = {}
                try:
                    body = exc.response.json()
                except ValueError:
                    pass
                if not isinstance(body, dict):
                    body = {}
                logger.error(
                    "Backend HTTP error: %s %s -> %d %s",
                    method, url, exc.response.status_code, body,
                )
                raise DocumentsApiError(
                    body.get("message") or f"Backend error: {exc.response.status_code}",
                    status_code=exc.response.status_code,
                    response=body,
                ) from exc
            except httpx.TimeoutException as exc:
                logger.error("Backend timeout: %s %s", method, url)
                raise DocumentsApiError("Backend timeout") from exc
            except httpx.HTTPError as exc:
                logger.error("Backend transport error: %s %s (%s)", method, url, exc)
                raise DocumentsApiError(f"Backend unreachable: {exc}") from exc

        try:
            data = r.json()
        except ValueError as exc:
            logger.warning(
                "Backend returned non-JSON body: %s %s (status=%d, body=%.200s)",
                method, url, r.status_code, r.text,
            )
            raise DocumentsApiError("Backend returned a non-JSON response", status_code=r.status_code) from exc

        if not isinstance(data, dict) or not data.get("success", False):
            message = data.get("message") if isinstance(data, dict) else None
            raise DocumentsApiError(
                message or "Backend reported failure",
                status_code=r.status_code,
                response=data if isinstance(data, dict) else {},
            )
        return data

    # ----------------------------------------------------------------
    # Documents
    # ----------------------------------------------------------------

    async def fetch_document(self, kind: DocumentKind | str, document_id: str) -> Dict[str, Any]:
        """Return the ``data`` object of a stored document."""
        kind = DocumentKind(kind)
        resp = await self._request("GET", self._url(kind, document_id))
        return resp.get("data") or {}

    async def save_document(
        self,
        kind: DocumentKind | str,
        payload: Dict[str, Any],
        document_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """PUT an existing document, or POST a new one when no id is given."""
        kind = DocumentKind(kind)
        method = "PUT" if document_id else "POST"
        resp = await self._request(method, self._url(kind, document_id), json_body=payload)
        return resp.get("data") or {}
