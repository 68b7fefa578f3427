"""Configuration helpers for backend runtime."""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class BackendSettings:
    server_salt: str
    database_url: str | None
    host: str
    port: int
    gm_token_hash: str | None
    log_level: str


def load_settings() -> BackendSettings:
    port_raw = os.getenv("ENCOUNTERBUDGET_PORT", "8000")
    return BackendSettings(
        server_salt=os.getenv("ENCOUNTERBUDGET_SERVER_SALT", "dev-salt"),
        database_url=os.getenv("ENCOUNTERBUDGET_DATABASE_URL"),
        host=os.getenv("ENCOUNTERBUDGET_HOST", "127.0.0.1"),
        port=int(port_raw),
        gm_token_hash=os.getenv("ENCOUNTERBUDGET_GM_TOKEN_HASH"),
        log_level=os.getenv("ENCOUNTERBUDGET_LOG_LEVEL", "INFO").upper(),
    )
