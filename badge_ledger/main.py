from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from badge_ledger.api.badges import router as badges_router
from badge_ledger.api.error_handlers import register_error_handlers
from badge_ledger.api.health import router as health_router
from badge_ledger.api.issuers import router as issuers_router
from badge_ledger.api.metrics_endpoint import router as metrics_router
from badge_ledger.api.points import router as points_router
from badge_ledger.api.rewards import router as rewards_router
from badge_ledger.api.verification import router as verification_router
from badge_ledger.core.config import SETTINGS
from badge_ledger.core.logging import setup_logging
from badge_ledger.db.engine import lifespan_db
from badge_ledger.middleware.metrics import MetricsMiddleware
from badge_ledger.middleware.request_context import RequestContextMiddleware

# Configure logging before anything else runs.
setup_logging(SETTINGS.log_level, json_format=SETTINGS.log_json)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    with lifespan_db():
        yield


app = FastAPI(
    title="badge-ledger",
    lifespan=lifespan,
    docs_url="/docs" if SETTINGS.is_dev else None,
    redoc_url="/redoc" if SETTINGS.is_dev else None,
)

# Middleware execution order: last-added runs first (outermost layer).
# RequestContext (outermost) → Metrics → route handler
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestContextMiddleware)

register_error_handlers(app)

app.include_router(metrics_router)
app.include_router(health_router)
app.include_router(issuers_router)
app.include_router(badges_router)
app.include_router(verification_router)
app.include_router(points_router)
app.include_router(rewards_router)

logger.info(
    "badge-ledger started  env=%s log_level=%s owner=%s store=%s",
    SETTINGS.app_env,
    SETTINGS.log_level,
    SETTINGS.ledger_owner,
    "sql" if SETTINGS.database_url else "memory",
)
