"""Backend package for the encounter budget calculator."""

from .config import BackendSettings, load_settings
from .engine import InvalidSelection, compute_encounter_budget, difficulty_label, scale_thresholds, xp_for_delta
from .security import generate_token, hash_token, verify_token
from .store import InMemoryJournalStore, JournalStore, PostgresJournalStore, create_store

__all__ = [
    "BackendSettings",
    "compute_encounter_budget",
    "create_store",
    "difficulty_label",
    "generate_token",
    "hash_token",
    "InMemoryJournalStore",
    "InvalidSelection",
    "JournalStore",
    "load_settings",
    "PostgresJournalStore",
    "scale_thresholds",
    "verify_token",
    "xp_for_delta",
]
