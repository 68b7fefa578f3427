"""Partition a token selection into party members and foes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .models import Participant, Role, RosterEntry

PARTY_TYPES = frozenset({"character"})
FOE_TYPES = frozenset({"npc", "hazard"})
COMPANION_TYPES = frozenset({"familiar"})
COMPANION_TRAIT = "minion"


@dataclass(frozen=True)
class RosterPartition:
    party: tuple[Participant, ...] = ()
    foes: tuple[Participant, ...] = ()
    ignored: tuple[Participant, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.party or self.foes or self.ignored)


def is_ignored_companion(entry: RosterEntry) -> bool:
    """Familiars and anything with the minion trait (companions, summons)."""
    return entry.actor_type in COMPANION_TYPES or COMPANION_TRAIT in entry.traits


def classify(entry: RosterEntry) -> Participant:
    if is_ignored_companion(entry):
        role = Role.IGNORED
    elif entry.actor_type in PARTY_TYPES:
        role = Role.PARTY
    elif entry.actor_type in FOE_TYPES:
        role = Role.FOE
    else:
        role = Role.IGNORED
    return Participant(
        name=entry.name,
        level=entry.level,
        role=role,
        traits=entry.traits,
        actor_id=entry.actor_id,
        actor_type=entry.actor_type,
    )


def classify_roster(entries: Iterable[RosterEntry]) -> RosterPartition:
    party: list[Participant] = []
    foes: list[Participant] = []
    ignored: list[Participant] = []
    for entry in entries:
        participant = classify(entry)
        if participant.role is Role.PARTY:
            party.append(participant)
        elif participant.role is Role.FOE:
            foes.append(participant)
        else:
            ignored.append(participant)
    return RosterPartition(party=tuple(party), foes=tuple(foes), ignored=tuple(ignored))
