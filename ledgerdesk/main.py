import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ledgerdesk.api.routes import router as root_router
from ledgerdesk.api.v1 import v1_router
from ledgerdesk.api.v1.envelope import error
from ledgerdesk.config.settings import settings
from ledgerdesk.core.logging_config import setup_logging
from ledgerdesk.domain.services.line_items import InvalidLineItemError
from ledgerdesk.domain.services.money import json_number

setup_logging()

logger = logging.getLogger("main")

app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG)


@app.exception_handler(InvalidLineItemError)
async def invalid_line_item_handler(request: Request, exc: InvalidLineItemError):
    logger.info("Rejected line item %s: %s", exc.line_id, exc)
    return JSONResponse(
        status_code=422,
        content=error(
            str(exc),
            errors=[{
                "lineId": exc.line_id,
                "taxableAmount": json_number(exc.taxable_amount) if exc.taxable_amount is not None else None,
            }],
        ),
    )


app.include_router(root_router)
app.include_router(v1_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("ledgerdesk.main:app", host="0.0.0.0", port=settings.PORT, log_config=None)
