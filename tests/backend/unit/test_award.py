import logging

import pytest

from encounterbudget.backend.award import (
    InvalidAward,
    apply_award,
    award_per_member,
    build_award,
    resolve_award_amount,
    select_recipients,
)
from encounterbudget.backend.engine import scale_thresholds
from encounterbudget.backend.models import Difficulty, EncounterBudget, PartyMember


def _budget(total_xp: int = 100) -> EncounterBudget:
    return EncounterBudget(
        party_level=4,
        party_size=4,
        total_xp=total_xp,
        thresholds=scale_thresholds(4),
        difficulty=Difficulty.SEVERE,
    )


def _member(actor_id: str, xp: int = 0) -> PartyMember:
    return PartyMember(actor_id=actor_id, name=actor_id.title(), level=4, xp=xp)


def test_award_per_member_is_full_total_regardless_of_party_size() -> None:
    assert award_per_member(_budget(100)) == 100


def test_resolve_award_amount_truncates_custom_value() -> None:
    assert resolve_award_amount(_budget(), mode="custom", custom_xp=42.9) == 42
    assert resolve_award_amount(_budget(), mode="custom", custom_xp="15") == 15
    assert resolve_award_amount(_budget(), mode="auto", custom_xp=999) == 100


@pytest.mark.parametrize("custom_xp", [None, -1, 100000, float("inf"), float("nan"), "lots", True])
def test_resolve_award_amount_rejects_invalid_custom_value(custom_xp: object) -> None:
    with pytest.raises(InvalidAward, match="Custom XP"):
        resolve_award_amount(_budget(), mode="custom", custom_xp=custom_xp)


def test_resolve_award_amount_rejects_unknown_mode() -> None:
    with pytest.raises(InvalidAward):
        resolve_award_amount(_budget(), mode="split")


def test_select_recipients_prefers_party_sheet() -> None:
    sheet = [_member("kyra")]

    assert select_recipients(sheet, [_member("amiri")]) == sheet


def test_select_recipients_falls_back_to_unique_selected_pcs(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        recipients = select_recipients([], [_member("kyra"), _member("kyra"), _member("amiri")])

    assert [member.actor_id for member in recipients] == ["kyra", "amiri"]
    assert "awarding to selected PCs" in caplog.text


def test_apply_award_adds_amount_to_each_member() -> None:
    changes = apply_award([_member("kyra", xp=900), _member("amiri", xp=0)], 120)

    assert [(change.previous_xp, change.next_xp) for change in changes] == [(900, 1020), (0, 120)]


def test_build_award_uses_note_or_difficulty_description() -> None:
    with_note = build_award(_budget(), [_member("kyra")], note="  Defeated the ogres  ")
    without_note = build_award(_budget(), [_member("kyra")])

    assert with_note.note == "Defeated the ogres"
    assert with_note.description == "Defeated the ogres"
    assert without_note.description == "Difficulty (for party size): Severe."
    assert without_note.amount == 100
    assert without_note.to_dict()["changes"][0]["nextXP"] == 100
