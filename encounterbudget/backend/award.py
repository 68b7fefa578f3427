"""XP award helpers built on top of the encounter budget."""

from __future__ import annotations

import logging
import math
from typing import Any, Iterable, Sequence

from .models import EncounterBudget, PartyMember, XpAward, XpChange

logger = logging.getLogger(__name__)

MAX_CUSTOM_XP = 99999
AWARD_MODES = ("auto", "custom")


class InvalidAward(ValueError):
    """The requested award amount or mode cannot be applied."""


def award_per_member(budget: EncounterBudget) -> int:
    """RAW award: every party member receives the full encounter total."""
    return budget.total_xp


def resolve_award_amount(budget: EncounterBudget, mode: str = "auto", custom_xp: Any = None) -> int:
    if mode == "auto":
        return award_per_member(budget)
    if mode != "custom":
        raise InvalidAward(f"Unknown award mode: {mode!r}")

    if isinstance(custom_xp, bool):
        raise InvalidAward("Enter a valid Custom XP amount.")
    try:
        value = float(custom_xp)
    except (TypeError, ValueError) as exc:
        raise InvalidAward("Enter a valid Custom XP amount.") from exc
    if not math.isfinite(value) or value < 0 or value > MAX_CUSTOM_XP:
        raise InvalidAward("Enter a valid Custom XP amount.")
    return math.trunc(value)


def select_recipients(
    party_members: Sequence[PartyMember],
    selected_pcs: Iterable[PartyMember],
) -> list[PartyMember]:
    """Prefer the party sheet; fall back to the selected PCs, deduplicated by id."""
    if party_members:
        return list(party_members)

    logger.warning("No actors on the party sheet; awarding to selected PCs instead")
    seen: set[str] = set()
    recipients: list[PartyMember] = []
    for member in selected_pcs:
        if member.actor_id in seen:
            continue
        seen.add(member.actor_id)
        recipients.append(member)
    return recipients


def apply_award(recipients: Iterable[PartyMember], amount: int) -> list[XpChange]:
    return [
        XpChange(
            actor_id=member.actor_id,
            name=member.name,
            previous_xp=member.xp,
            next_xp=member.xp + amount,
        )
        for member in recipients
    ]


def describe_award(budget: EncounterBudget, note: str) -> str:
    if note:
        return note
    return f"Difficulty (for party size): {budget.difficulty.value}."


def build_award(
    budget: EncounterBudget,
    recipients: Iterable[PartyMember],
    mode: str = "auto",
    custom_xp: Any = None,
    note: str = "",
) -> XpAward:
    amount = resolve_award_amount(budget, mode=mode, custom_xp=custom_xp)
    note = (note or "").strip()
    changes = apply_award(recipients, amount)
    logger.info("Awarding %d XP to %d party members", amount, len(changes))
    return XpAward(
        budget=budget,
        amount=amount,
        note=note,
        description=describe_award(budget, note),
        changes=tuple(changes),
    )
