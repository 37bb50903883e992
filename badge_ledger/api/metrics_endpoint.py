"""Prometheus scrape endpoint.

Ledger gauges (badge count, circulating points) are read from the store
at scrape time, so they reflect committed state even across restarts of
a SQL-backed deployment.
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from badge_ledger.api.dependencies import LedgerDep
from badge_ledger.core.metrics import BADGES_ISSUED, POINTS_CIRCULATING

router = APIRouter(tags=["observability"])


@router.get("/metrics", include_in_schema=False)
def metrics(ledger: LedgerDep) -> Response:
    BADGES_ISSUED.set(ledger.badges.badge_count())
    POINTS_CIRCULATING.set(ledger.points.totals().circulating)
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
