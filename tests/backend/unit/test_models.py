import pytest

from encounterbudget.backend.models import Difficulty, PartyMember, RosterEntry


def test_roster_entry_reads_pf2e_actor_fields() -> None:
    actor = {
        "id": "a1",
        "name": "Goblin Warrior",
        "type": "npc",
        "system": {
            "details": {"level": {"value": 2}},
            "traits": {"value": ["goblin", "humanoid"]},
        },
    }

    entry = RosterEntry.from_actor(actor, token_name="Goblin #2")

    assert entry.actor_id == "a1"
    assert entry.name == "Goblin #2"
    assert entry.level == 2
    assert entry.actor_type == "npc"
    assert entry.traits == frozenset({"goblin", "humanoid"})


def test_roster_entry_prefers_nested_trait_list() -> None:
    actor = {
        "type": "character",
        "system": {"traits": {"traits": {"value": ["minion"]}, "value": ["ignored"]}},
    }

    entry = RosterEntry.from_actor(actor)

    assert entry.traits == frozenset({"minion"})


def test_roster_entry_defaults_missing_fields() -> None:
    entry = RosterEntry.from_actor({})

    assert entry.level == 0
    assert entry.name == "(Unnamed)"
    assert entry.actor_type == "npc"
    assert entry.traits == frozenset()


def test_roster_entry_treats_non_numeric_level_as_zero() -> None:
    entry = RosterEntry.from_actor({"system": {"details": {"level": {"value": "high"}}}})

    assert entry.level == 0


def test_party_member_defaults_level_one_and_zero_xp() -> None:
    member = PartyMember.from_actor({"id": "pc", "name": "Kyra", "system": {"details": {}}})

    assert member.level == 1
    assert member.xp == 0


def test_difficulty_rank_is_ordered() -> None:
    assert [difficulty.rank for difficulty in Difficulty] == [0, 1, 2, 3, 4]


@pytest.mark.parametrize(
    "actor",
    [
        {"type": "npc", "system": ["x"]},
        {"type": "npc", "system": {"details": "x"}},
        {"type": "npc", "system": {"details": {"level": ["x"]}}},
        {"type": "npc", "system": {"details": {"level": "x"}, "traits": "minion"}},
    ],
)
def test_roster_entry_falls_back_on_malformed_nodes(actor: dict) -> None:
    entry = RosterEntry.from_actor(actor)

    assert entry.level == 0
    assert entry.actor_type == "npc"
    assert entry.traits == frozenset()


def test_roster_entry_accepts_bare_integer_level() -> None:
    entry = RosterEntry.from_actor({"system": {"details": {"level": 3}}})

    assert entry.level == 3


@pytest.mark.parametrize(
    "actor",
    [
        {"name": "Kyra", "system": "x"},
        {"name": "Kyra", "system": {"details": ["x"]}},
        {"name": "Kyra", "system": {"details": {"level": "x", "xp": ["x"]}}},
    ],
)
def test_party_member_falls_back_on_malformed_nodes(actor: dict) -> None:
    member = PartyMember.from_actor(actor)

    assert member.level == 1
    assert member.xp == 0
