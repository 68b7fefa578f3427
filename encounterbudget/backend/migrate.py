"""Apply SQL schema for the journal tables."""

from __future__ import annotations

import logging
from pathlib import Path

from encounterbudget.backend.config import load_settings

logger = logging.getLogger(__name__)


def main() -> None:
    settings = load_settings()
    logging.basicConfig(level=settings.log_level)
    if not settings.database_url:
        raise RuntimeError("ENCOUNTERBUDGET_DATABASE_URL is required for migration")

    import psycopg

    schema_path = Path(__file__).with_name("db_schema.sql")
    schema_sql = schema_path.read_text(encoding="utf-8")

    with psycopg.connect(settings.database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(schema_sql)
        conn.commit()
    logger.info("Applied journal schema from %s", schema_path.name)


if __name__ == "__main__":
    main()
