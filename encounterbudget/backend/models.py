"""Value objects for rosters, encounter budgets and XP awards."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

UNNAMED = "(Unnamed)"


class Role(str, Enum):
    PARTY = "party"
    FOE = "foe"
    IGNORED = "ignored"


class Difficulty(str, Enum):
    TRIVIAL = "Trivial"
    LOW = "Low"
    MODERATE = "Moderate"
    SEVERE = "Severe"
    EXTREME = "Extreme"

    @property
    def rank(self) -> int:
        return list(Difficulty).index(self)


def _coerce_level(raw: Any) -> int:
    if isinstance(raw, bool):
        return 0
    try:
        return int(raw)
    except (TypeError, ValueError):
        return 0


def _child(node: Any, key: str) -> Mapping[str, Any]:
    if not isinstance(node, Mapping):
        return {}
    child = node.get(key)
    return child if isinstance(child, Mapping) else {}


def _value_or(node: Any, default: int) -> Any:
    if not isinstance(node, Mapping):
        return default
    value = node.get("value")
    return default if value is None else value


def _read_traits(system: Mapping[str, Any]) -> frozenset[str]:
    traits = _child(system, "traits")
    nested = traits.get("traits")
    if isinstance(nested, Mapping) and "value" in nested:
        values = nested.get("value")
    else:
        values = traits.get("value")
    if not isinstance(values, (list, tuple, set, frozenset)):
        return frozenset()
    return frozenset(str(value) for value in values)


@dataclass(frozen=True)
class RosterEntry:
    """A selected token/actor reduced to the fields the scorer needs."""

    actor_id: str
    name: str
    level: int
    actor_type: str
    traits: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_actor(cls, actor: Mapping[str, Any], token_name: str | None = None) -> "RosterEntry":
        """Build an entry from a host actor document.

        Level is read from ``system.details.level.value`` and defaults to 0.
        Traits come from ``system.traits.traits.value`` with a fallback to
        ``system.traits.value``.
        """
        system = _child(actor, "system")
        details = _child(system, "details")
        level = details.get("level")
        raw_level = level.get("value") if isinstance(level, Mapping) else level
        return cls(
            actor_id=str(actor.get("id") or actor.get("_id") or ""),
            name=token_name or actor.get("name") or UNNAMED,
            level=_coerce_level(raw_level),
            actor_type=str(actor.get("type") or "npc"),
            traits=_read_traits(system),
        )


@dataclass(frozen=True)
class Participant:
    name: str
    level: int
    role: Role
    traits: frozenset[str] = field(default_factory=frozenset)
    actor_id: str = ""
    actor_type: str = "npc"


@dataclass(frozen=True)
class FoeScoreRow:
    name: str
    actor_type: str
    level: int
    level_delta: int
    xp: int


@dataclass(frozen=True)
class Thresholds:
    trivial: int
    low: int
    moderate: int
    severe: int
    extreme: int

    def as_buckets(self) -> list[tuple[Difficulty, int]]:
        return [
            (Difficulty.TRIVIAL, self.trivial),
            (Difficulty.LOW, self.low),
            (Difficulty.MODERATE, self.moderate),
            (Difficulty.SEVERE, self.severe),
            (Difficulty.EXTREME, self.extreme),
        ]

    def to_dict(self) -> dict[str, int]:
        return {bucket.name.lower(): value for bucket, value in self.as_buckets()}


@dataclass(frozen=True)
class EncounterBudget:
    party_level: int
    party_size: int
    total_xp: int
    thresholds: Thresholds
    difficulty: Difficulty
    rows: tuple[FoeScoreRow, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "partyLevel": self.party_level,
            "partySize": self.party_size,
            "totalXP": self.total_xp,
            "thresholds": self.thresholds.to_dict(),
            "difficulty": self.difficulty.value,
            "rows": [
                {
                    "name": row.name,
                    "type": row.actor_type,
                    "level": row.level,
                    "levelDelta": row.level_delta,
                    "xp": row.xp,
                }
                for row in self.rows
            ],
        }


@dataclass(frozen=True)
class PartyMember:
    actor_id: str
    name: str
    level: int
    xp: int

    @classmethod
    def from_actor(cls, actor: Mapping[str, Any]) -> "PartyMember":
        details = _child(_child(actor, "system"), "details")
        level = details.get("level")
        xp = details.get("xp")
        return cls(
            actor_id=str(actor.get("id") or actor.get("_id") or ""),
            name=actor.get("name") or UNNAMED,
            level=_coerce_level(_value_or(level, 1)),
            xp=_coerce_level(_value_or(xp, 0)),
        )


@dataclass(frozen=True)
class XpChange:
    actor_id: str
    name: str
    previous_xp: int
    next_xp: int


@dataclass(frozen=True)
class XpAward:
    budget: EncounterBudget
    amount: int
    note: str
    description: str
    changes: tuple[XpChange, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "budget": self.budget.to_dict(),
            "amount": self.amount,
            "note": self.note,
            "description": self.description,
            "changes": [
                {
                    "actorId": change.actor_id,
                    "name": change.name,
                    "previousXP": change.previous_xp,
                    "nextXP": change.next_xp,
                }
                for change in self.changes
            ],
        }


@dataclass(frozen=True)
class PartyProgress:
    name: str
    level: int
    xp: int
    xp_to_next_level: int
    next_level: int
