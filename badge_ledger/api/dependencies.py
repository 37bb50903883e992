from __future__ import annotations

import logging
import threading
from typing import Annotated

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from badge_ledger.core.clock import SystemClock
from badge_ledger.core.config import SETTINGS
from badge_ledger.db.engine import engine
from badge_ledger.models.context import CallContext
from badge_ledger.models.principal import Principal
from badge_ledger.repos.sql_store import SqlKeyValueStore
from badge_ledger.repos.store import InMemoryKeyValueStore, KeyValueStore
from badge_ledger.services import token_service
from badge_ledger.services.ledger import Ledger, ledger_from_settings

logger = logging.getLogger(__name__)

# Tokens are minted by the upstream identity provider.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/oauth/token")


def _build_store() -> KeyValueStore:
    if engine is None:
        return InMemoryKeyValueStore()
    return SqlKeyValueStore(engine)


# --- Module-level ledger singleton ---
_ledger: Ledger | None = None
_ledger_lock = threading.Lock()


def get_ledger() -> Ledger:
    """FastAPI dependency returning the process-wide ledger.

    Built lazily so the SQL schema exists (lifespan) before the owner
    record is seeded.  Tests override this dependency.
    """
    global _ledger
    if _ledger is None:
        # Sync dependencies run in a threadpool; build exactly once.
        with _ledger_lock:
            if _ledger is None:
                _ledger = ledger_from_settings(
                    SETTINGS, _build_store(), SystemClock()
                )
    return _ledger


def require_user(
    raw_token: Annotated[str, Depends(oauth2_scheme)],
) -> Principal:
    """Extract and validate the JWT bearer token. Returns a Principal."""
    try:
        principal = token_service.principal_from_token(raw_token)
    except jwt.ExpiredSignatureError:
        logger.warning("Expired token rejected")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expired",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None
    except jwt.InvalidTokenError as e:
        logger.warning("Invalid token rejected: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None

    logger.debug("Token validated for user=%s", principal.user_id)
    return principal


def call_context(
    principal: Annotated[Principal, Depends(require_user)],
    ledger: Annotated[Ledger, Depends(get_ledger)],
) -> CallContext:
    """Bind the authenticated caller to the current height."""
    return ledger.context(principal.user_id)


def public_height(ledger: Annotated[Ledger, Depends(get_ledger)]) -> int:
    """Current height for unauthenticated read endpoints."""
    return ledger.clock.now()


LedgerDep = Annotated[Ledger, Depends(get_ledger)]
ContextDep = Annotated[CallContext, Depends(call_context)]
