"""Run the API under uvicorn with environment-driven settings."""

from __future__ import annotations

import logging

from encounterbudget.backend.config import load_settings

logger = logging.getLogger(__name__)


def main() -> None:
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if not settings.gm_token_hash:
        logger.warning("ENCOUNTERBUDGET_GM_TOKEN_HASH is not set; GM-only endpoints will reject every request")

    import uvicorn

    uvicorn.run(
        "encounterbudget.backend.api:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
