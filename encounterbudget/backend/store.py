"""Persistence interfaces and implementations for journal pages."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
import json
import logging
from typing import Any, Protocol
import uuid

from encounterbudget.backend.engine import InvalidSelection
from encounterbudget.backend.models import EncounterBudget, XpAward
from encounterbudget.backend.state import (
    SAVED_ENCOUNTERS_ENTRY,
    XP_LOG_ENTRY,
    build_award_block,
    build_encounter_block,
    build_initial_page,
    xp_log_page_name,
)

logger = logging.getLogger(__name__)


class JournalStore(Protocol):
    def append_block(self, entry_name: str, page_name: str, block: dict[str, Any]) -> dict[str, Any]:
        """Append a block to a page, creating the entry and page when missing."""

    def get_page(self, entry_name: str, page_name: str) -> dict[str, Any] | None:
        """Return the page record or None when the entry or page is unknown."""


def save_encounter(
    store: JournalStore,
    encounter_name: str,
    budget: EncounterBudget,
    when: datetime | None = None,
) -> dict[str, Any]:
    """Write a scored encounter to the "Saved Encounters" page of that name."""
    name = (encounter_name or "").strip()
    if not name:
        raise InvalidSelection("Enter an Encounter Name before saving.")
    moment = when or datetime.now().astimezone()
    page = store.append_block(SAVED_ENCOUNTERS_ENTRY, name, build_encounter_block(name, budget, moment))
    logger.info('Encounter saved to journal "%s" page "%s"', SAVED_ENCOUNTERS_ENTRY, name)
    return page


def log_award(store: JournalStore, award: XpAward, when: datetime | None = None) -> dict[str, Any]:
    """Append an award to today's "XP Log" page."""
    moment = when or datetime.now().astimezone()
    page_name = xp_log_page_name(moment)
    page = store.append_block(XP_LOG_ENTRY, page_name, build_award_block(award, moment))
    logger.info('XP logged to journal "%s" page "%s"', XP_LOG_ENTRY, page_name)
    return page


@dataclass
class InMemoryJournalStore:
    def __post_init__(self) -> None:
        self._entries: dict[str, dict[str, dict[str, Any]]] = {}

    def append_block(self, entry_name: str, page_name: str, block: dict[str, Any]) -> dict[str, Any]:
        pages = self._entries.setdefault(entry_name, {})
        page = pages.get(page_name)
        if page is None:
            page = build_initial_page(entry_name=entry_name, page_name=page_name)
        pages[page_name] = self._next_page_with_block(page=page, block=block)
        return pages[page_name]

    def get_page(self, entry_name: str, page_name: str) -> dict[str, Any] | None:
        return self._entries.get(entry_name, {}).get(page_name)

    def _next_page_with_block(self, page: dict[str, Any], block: dict[str, Any]) -> dict[str, Any]:
        next_page = dict(page)
        next_meta = dict(page["meta"])
        next_meta["updatedAt"] = datetime.now(timezone.utc).isoformat()
        next_page["meta"] = next_meta

        next_blocks = list(page.get("blocks", []))
        next_blocks.append(dict(block))
        next_page["blocks"] = next_blocks
        return next_page


@dataclass
class PostgresJournalStore:
    database_url: str

    def _connect(self) -> Any:
        import psycopg

        return psycopg.connect(self.database_url)

    def append_block(self, entry_name: str, page_name: str, block: dict[str, Any]) -> dict[str, Any]:
        now = datetime.now(timezone.utc)
        with self._connect() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO journal_entries (id, name, created_at)
                    VALUES (%s, %s, %s)
                    ON CONFLICT (name) DO NOTHING
                    """,
                    (str(uuid.uuid4()), entry_name, now),
                )
                cur.execute(
                    """
                    INSERT INTO journal_pages (id, entry_id, name, created_at, updated_at)
                    SELECT %s, e.id, %s, %s, %s FROM journal_entries e WHERE e.name = %s
                    ON CONFLICT (entry_id, name) DO UPDATE SET updated_at = EXCLUDED.updated_at
                    """,
                    (str(uuid.uuid4()), page_name, now, now, entry_name),
                )
                # Row lock serializes concurrent appends to the same page.
                cur.execute(
                    """
                    SELECT p.id
                    FROM journal_pages p
                    JOIN journal_entries e ON e.id = p.entry_id
                    WHERE e.name = %s AND p.name = %s
                    FOR UPDATE OF p
                    """,
                    (entry_name, page_name),
                )
                row = cur.fetchone()
                if row is None:
                    raise RuntimeError(f"Journal page {entry_name!r}/{page_name!r} missing after upsert")
                page_id = row[0]
                cur.execute(
                    """
                    INSERT INTO journal_blocks (id, page_id, position, created_at, block_json)
                    SELECT %s, %s, COALESCE(MAX(position) + 1, 0), %s, %s::jsonb
                    FROM journal_blocks
                    WHERE page_id = %s
                    """,
                    (str(uuid.uuid4()), page_id, now, json.dumps(block), page_id),
                )
            conn.commit()

        page = self.get_page(entry_name=entry_name, page_name=page_name)
        if page is None:
            raise RuntimeError(f"Journal page {entry_name!r}/{page_name!r} missing after write")
        return page

    def get_page(self, entry_name: str, page_name: str) -> dict[str, Any] | None:
        with self._connect() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT p.created_at, p.updated_at, b.block_json
                    FROM journal_pages p
                    JOIN journal_entries e ON e.id = p.entry_id
                    LEFT JOIN journal_blocks b ON b.page_id = p.id
                    WHERE e.name = %s AND p.name = %s
                    ORDER BY b.position
                    """,
                    (entry_name, page_name),
                )
                rows = cur.fetchall()

        if not rows:
            return None

        created_at, updated_at, _ = rows[0]
        blocks = [
            block_json if isinstance(block_json, dict) else json.loads(block_json)
            for _, _, block_json in rows
            if block_json is not None
        ]
        return {
            "entry": entry_name,
            "name": page_name,
            "blocks": blocks,
            "meta": {
                "createdAt": _iso(created_at),
                "updatedAt": _iso(updated_at),
            },
        }


def _iso(value: Any) -> str:
    return value.isoformat() if isinstance(value, datetime) else str(value)


def create_store(database_url: str | None) -> JournalStore:
    if database_url:
        return PostgresJournalStore(database_url=database_url)
    return InMemoryJournalStore()
