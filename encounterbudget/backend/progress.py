"""Party XP progress toward the next level."""

from __future__ import annotations

from typing import Sequence

from .engine import InvalidSelection
from .models import PartyMember, PartyProgress

XP_PER_LEVEL = 1000


def party_progress(members: Sequence[PartyMember]) -> list[PartyProgress]:
    if not members:
        raise InvalidSelection("The party has no members.")
    return [
        PartyProgress(
            name=member.name,
            level=member.level,
            xp=member.xp,
            xp_to_next_level=max(0, XP_PER_LEVEL - member.xp),
            next_level=member.level + 1,
        )
        for member in members
    ]
