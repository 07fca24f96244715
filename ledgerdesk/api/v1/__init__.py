# ledgerdesk/api/v1/__init__.py
"""
Versioned API v1 — aggregates all sub-routers under ``/api/v1``.

Usage in ``main.py``::

    from ledgerdesk.api.v1 import v1_router
    app.include_router(v1_router)
"""

from fastapi import APIRouter

from ledgerdesk.api.v1.routes.reference import router as reference_router
from ledgerdesk.api.v1.routes.totals import router as totals_router

v1_router = APIRouter(prefix="/api/v1")

v1_router.include_router(reference_router)
v1_router.include_router(totals_router)

__all__ = ["v1_router"]
