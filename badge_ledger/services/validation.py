"""Argument checks shared by the ledger services.

Each helper raises InvalidInputError and never touches storage, so they
can run before any repo is read.
"""

from __future__ import annotations

import logging
import re

from badge_ledger.core.errors import InvalidInputError

logger = logging.getLogger(__name__)

MAX_IDENTITY_LEN = 128
MAX_NAME_LEN = 64
MAX_TYPE_LEN = 50
MAX_TITLE_LEN = 100
MAX_DESCRIPTION_LEN = 500
MAX_URI_LEN = 256
MAX_REASON_LEN = 256
MAX_REQUEST_DATA_LEN = 256
HASH_HEX_LEN = 64  # 32 bytes

_HASH32_RE = re.compile(r"[0-9a-fA-F]{64}")


def _invalid(message: str) -> InvalidInputError:
    logger.warning("Rejected input: %s", message)
    return InvalidInputError(message)


def require_text(
    value: str, field: str, *, max_len: int, allow_empty: bool = False
) -> str:
    if not allow_empty and not value.strip():
        raise _invalid(f"{field} must be non-empty")
    if len(value) > max_len:
        raise _invalid(f"{field} must be at most {max_len} characters")
    return value


def require_identity(value: str, field: str) -> str:
    if not value or not value.strip():
        raise _invalid(f"{field} must be a non-empty identity")
    if len(value) > MAX_IDENTITY_LEN:
        raise _invalid(f"{field} must be at most {MAX_IDENTITY_LEN} characters")
    return value


def require_positive(value: int, field: str) -> int:
    # bool is an int subclass; True must not pass as an amount
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise _invalid(f"{field} must be a positive integer")
    return value


def require_hash32(value: str, field: str) -> str:
    """32 bytes, given as 64 hex characters.  Returned lower-cased."""
    if _HASH32_RE.fullmatch(value) is None:
        raise _invalid(f"{field} must be 32 bytes ({HASH_HEX_LEN} hex characters)")
    return value.lower()


def require_batch(items: list[int], field: str, *, max_size: int) -> list[int]:
    if not items:
        raise _invalid(f"{field} must be non-empty")
    if len(items) > max_size:
        raise _invalid(f"{field} must contain at most {max_size} items")
    return items
