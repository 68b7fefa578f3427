"""Encounter budget scoring: party level, creature XP and difficulty."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from .models import Difficulty, EncounterBudget, FoeScoreRow, Participant, RosterEntry, Thresholds
from .roster import classify_roster

logger = logging.getLogger(__name__)

BASELINE_PARTY_SIZE = 4
THRESHOLD_STEP_PER_MEMBER = 10
BASE_THRESHOLDS = (40, 60, 80, 120, 160)

# Creature XP by level difference vs party level.
_XP_BY_DELTA = {-4: 10, -3: 15, -2: 20, -1: 30, 0: 40, 1: 60, 2: 80, 3: 120}
_XP_FLOOR_DELTA = -5
_XP_CEILING_DELTA = 4
_XP_CEILING = 160

EMPTY_SELECTION_MESSAGE = "Select your PCs and the enemies, then run the macro."
NO_PARTY_MESSAGE = "No valid PCs selected. Select at least one PC token."
NO_FOES_MESSAGE = "No valid enemies (NPCs/Hazards) selected."


class InvalidSelection(ValueError):
    """The selection has no party members or no foes to score."""


def aggregate_party_level(levels: Sequence[int]) -> tuple[int, int]:
    """Return ``(party_level, party_size)`` with the mean rounded half up."""
    size = len(levels)
    if size == 0:
        raise InvalidSelection(NO_PARTY_MESSAGE)
    total = sum(levels)
    # floor(mean + 0.5) without float error
    party_level = (2 * total + size) // (2 * size)
    return party_level, size


def xp_for_delta(level_delta: int) -> int:
    if level_delta <= _XP_FLOOR_DELTA:
        return 0
    if level_delta >= _XP_CEILING_DELTA:
        return _XP_CEILING
    return _XP_BY_DELTA[level_delta]


def scale_thresholds(party_size: int) -> Thresholds:
    shift = (party_size - BASELINE_PARTY_SIZE) * THRESHOLD_STEP_PER_MEMBER
    trivial, low, moderate, severe, extreme = (max(0, base + shift) for base in BASE_THRESHOLDS)
    return Thresholds(trivial=trivial, low=low, moderate=moderate, severe=severe, extreme=extreme)


def difficulty_label(total_xp: int, thresholds: Thresholds) -> Difficulty:
    for difficulty, upper_bound in thresholds.as_buckets():
        if total_xp <= upper_bound:
            return difficulty
    return Difficulty.EXTREME


def score_foes(foes: Iterable[Participant], party_level: int) -> list[FoeScoreRow]:
    rows: list[FoeScoreRow] = []
    for foe in foes:
        delta = foe.level - party_level
        rows.append(
            FoeScoreRow(
                name=foe.name,
                actor_type=foe.actor_type,
                level=foe.level,
                level_delta=delta,
                xp=xp_for_delta(delta),
            )
        )
    return rows


def compute_encounter_budget(entries: Sequence[RosterEntry]) -> EncounterBudget:
    """Score a selection of tokens as one encounter.

    Raises ``InvalidSelection`` with a user-facing message when the selection
    is empty, holds no valid party member, or holds no valid foe.
    """
    if not entries:
        logger.warning("Encounter scoring requested with an empty selection")
        raise InvalidSelection(EMPTY_SELECTION_MESSAGE)

    partition = classify_roster(entries)
    if not partition.party:
        logger.warning("No party members among %d selected entries", len(entries))
        raise InvalidSelection(NO_PARTY_MESSAGE)

    party_level, party_size = aggregate_party_level([member.level for member in partition.party])

    rows = score_foes(partition.foes, party_level)
    if not rows:
        logger.warning("No foes among %d selected entries", len(entries))
        raise InvalidSelection(NO_FOES_MESSAGE)

    total_xp = sum(row.xp for row in rows)
    thresholds = scale_thresholds(party_size)
    difficulty = difficulty_label(total_xp, thresholds)
    logger.debug(
        "Scored encounter: party level %d, size %d, %d foes, %d XP (%s)",
        party_level,
        party_size,
        len(rows),
        total_xp,
        difficulty.value,
    )
    return EncounterBudget(
        party_level=party_level,
        party_size=party_size,
        total_xp=total_xp,
        thresholds=thresholds,
        difficulty=difficulty,
        rows=tuple(rows),
    )
