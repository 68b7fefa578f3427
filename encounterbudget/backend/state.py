"""Record builders for journal pages and the blocks appended to them."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from .models import EncounterBudget, XpAward

SAVED_ENCOUNTERS_ENTRY = "Saved Encounters"
XP_LOG_ENTRY = "XP Log"
XP_LOG_PAGE_FORMAT = "%b %d, %Y"


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def build_initial_page(entry_name: str, page_name: str) -> dict[str, Any]:
    now = _utc_now_iso()
    return {
        "entry": entry_name,
        "name": page_name,
        "blocks": [],
        "meta": {
            "createdAt": now,
            "updatedAt": now,
        },
    }


def xp_log_page_name(when: datetime) -> str:
    """One XP Log page per local date, e.g. ``Sep 27, 2025``."""
    return when.strftime(XP_LOG_PAGE_FORMAT)


def build_encounter_block(encounter_name: str, budget: EncounterBudget, when: datetime) -> dict[str, Any]:
    return {
        "kind": "encounter",
        "name": encounter_name,
        "savedAt": when.isoformat(),
        "time": when.strftime("%H:%M"),
        **budget.to_dict(),
    }


def build_award_block(award: XpAward, when: datetime) -> dict[str, Any]:
    return {
        "kind": "xp_award",
        "loggedAt": when.isoformat(),
        "time": when.strftime("%H:%M"),
        **award.to_dict(),
    }
