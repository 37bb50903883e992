from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal

AppEnv = Literal["dev", "test", "prod"]
LogLevel = Literal["debug", "info", "warning", "error"]


def _getenv(name: str, default: str) -> str:
    return os.environ.get(name, default).strip()


def _getbool(name: str, default: str) -> bool:
    raw = _getenv(name, default).lower()
    if raw in ("1", "true", "yes", "on"):
        return True
    if raw in ("0", "false", "no", "off", ""):
        return False
    raise ValueError(f"{name} must be a boolean (got {raw!r})")


@dataclass(frozen=True)
class Settings:
    app_env: AppEnv
    log_level: LogLevel
    log_json: bool
    port: int
    database_url: str | None
    ledger_owner: str
    allow_revoke_expired: bool = False
    max_batch_size: int = 50

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"

    @property
    def is_test(self) -> bool:
        return self.app_env == "test"

    @property
    def is_prod(self) -> bool:
        return self.app_env == "prod"


def load_settings() -> Settings:
    app_env_raw = _getenv("APP_ENV", "dev").lower()
    log_level_raw = _getenv("LOG_LEVEL", "info").lower()
    port_raw = _getenv("PORT", "8000")
    batch_raw = _getenv("MAX_BATCH_SIZE", "50")

    if app_env_raw not in ("dev", "test", "prod"):
        raise ValueError(f"APP_ENV must be dev|test|prod (got {app_env_raw!r})")

    if log_level_raw not in ("debug", "info", "warning", "error"):
        raise ValueError(
            f"LOG_LEVEL must be debug|info|warning|error (got {log_level_raw!r})"
        )

    try:
        port = int(port_raw)
    except ValueError:
        raise ValueError(f"PORT must be an integer (got {port_raw!r})") from None

    try:
        max_batch_size = int(batch_raw)
    except ValueError:
        raise ValueError(
            f"MAX_BATCH_SIZE must be an integer (got {batch_raw!r})"
        ) from None
    if max_batch_size < 1:
        raise ValueError(f"MAX_BATCH_SIZE must be positive (got {max_batch_size})")

    ledger_owner = _getenv("LEDGER_OWNER", "ledger-owner")
    if not ledger_owner:
        raise ValueError("LEDGER_OWNER must be non-empty")

    database_url = _getenv("DATABASE_URL", "") or None

    return Settings(  # type: ignore[arg-type]
        app_env=app_env_raw,
        log_level=log_level_raw,
        log_json=_getbool("LOG_JSON", "false"),
        port=port,
        database_url=database_url,
        ledger_owner=ledger_owner,
        allow_revoke_expired=_getbool("ALLOW_REVOKE_EXPIRED", "false"),
        max_batch_size=max_batch_size,
    )


SETTINGS = load_settings()
