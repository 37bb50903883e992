"""Health endpoint.

Liveness plus backing-store status.  Returns 200 even when degraded; the
``status`` field carries the actual health so an orchestrator does not
restart the process for a store outage.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from badge_ledger.api.dependencies import LedgerDep
from badge_ledger.db.engine import engine

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
def health(ledger: LedgerDep) -> dict:
    checks: dict[str, str] = {}
    overall = "ok"

    if engine is not None:
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            checks["database"] = "ok"
        except SQLAlchemyError:
            logger.warning("Database health check failed", exc_info=True)
            checks["database"] = "degraded"
            overall = "degraded"
    else:
        checks["database"] = "not_configured"

    return {
        "status": overall,
        "checks": checks,
        "height": ledger.clock.now(),
    }
