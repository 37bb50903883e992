"""Global handler mapping LedgerError kinds to HTTP responses.

Every rejected ledger command surfaces as a 4xx with one uniform body:

    {"error": {"kind": "InsufficientBalance", "message": "..."}}
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from badge_ledger.core.errors import LedgerError

logger = logging.getLogger(__name__)

STATUS_BY_KIND: dict[str, int] = {
    "Unauthorized": 403,
    "NotFound": 404,
    "AlreadyExists": 409,
    "InvalidInput": 422,
    "InsufficientBalance": 409,
    "AlreadyRevoked": 409,
    "Expired": 409,
    "TransferFailed": 409,
    "RewardUnavailable": 409,
}


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
        status_code = STATUS_BY_KIND.get(exc.kind, 400)
        logger.info(
            "Ledger command rejected kind=%s path=%s",
            exc.kind,
            request.url.path,
        )
        return JSONResponse(
            status_code=status_code,
            content={"error": {"kind": exc.kind, "message": exc.message}},
        )
