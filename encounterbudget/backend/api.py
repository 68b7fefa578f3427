"""FastAPI endpoints for encounter scoring, XP awards and journal access."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

from .award import InvalidAward, build_award, select_recipients
from .config import BackendSettings, load_settings
from .engine import EMPTY_SELECTION_MESSAGE, NO_PARTY_MESSAGE, InvalidSelection, compute_encounter_budget
from .models import EncounterBudget, PartyMember, Role, RosterEntry
from .progress import party_progress
from .roster import classify
from .security import verify_token
from .store import JournalStore, create_store, log_award, save_encounter

logger = logging.getLogger(__name__)


class SelectedToken(BaseModel):
    name: str | None = None
    actor: dict[str, Any] | None = None


class DifficultyRequest(BaseModel):
    tokens: list[SelectedToken] = Field(default_factory=list)


class SaveEncounterRequest(BaseModel):
    token: str = Field(min_length=1)
    encounter_name: str = Field(max_length=200)
    tokens: list[SelectedToken] = Field(default_factory=list)


class AwardRequest(BaseModel):
    token: str = Field(min_length=1)
    tokens: list[SelectedToken] = Field(default_factory=list)
    mode: str = "auto"
    custom_xp: float | None = None
    note: str = Field(default="", max_length=1000)
    party_members: list[dict[str, Any]] = Field(default_factory=list)


class ProgressRequest(BaseModel):
    token: str = Field(min_length=1)
    party_members: list[dict[str, Any]] = Field(default_factory=list)


class BudgetResponse(BaseModel):
    budget: dict[str, Any]


class PageResponse(BaseModel):
    page: dict[str, Any]


class AwardResponse(BaseModel):
    award: dict[str, Any]
    page: dict[str, Any]


class ProgressResponse(BaseModel):
    members: list[dict[str, Any]]


def _roster_entries(tokens: list[SelectedToken]) -> list[RosterEntry]:
    return [RosterEntry.from_actor(token.actor, token_name=token.name) for token in tokens if token.actor]


def _score_selection(tokens: list[SelectedToken]) -> EncounterBudget:
    if not tokens:
        raise InvalidSelection(EMPTY_SELECTION_MESSAGE)
    entries = _roster_entries(tokens)
    if not entries:
        raise InvalidSelection(NO_PARTY_MESSAGE)
    return compute_encounter_budget(entries)


def _selected_pcs(tokens: list[SelectedToken]) -> list[PartyMember]:
    return [
        PartyMember.from_actor(token.actor)
        for token in tokens
        if token.actor and classify(RosterEntry.from_actor(token.actor)).role is Role.PARTY
    ]


def create_app(store: JournalStore | None = None, settings: BackendSettings | None = None) -> FastAPI:
    app = FastAPI(title="Encounter Budget API", version="0.1.0")
    local_settings = settings if settings is not None else load_settings()
    journal_store = store if store is not None else create_store(local_settings.database_url)

    def get_store() -> JournalStore:
        return journal_store

    def require_gm(raw_token: str) -> None:
        if not verify_token(raw_token, local_settings.gm_token_hash, local_settings.server_salt):
            logger.warning("Rejected request with an invalid GM token")
            raise HTTPException(status_code=403, detail="Only the GM can do that.")

    @app.post("/api/encounters/difficulty", response_model=BudgetResponse)
    def calculate_difficulty(payload: DifficultyRequest) -> BudgetResponse:
        try:
            budget = _score_selection(payload.tokens)
        except InvalidSelection as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return BudgetResponse(budget=budget.to_dict())

    @app.post("/api/encounters/save", response_model=PageResponse)
    def save_encounter_to_journal(
        payload: SaveEncounterRequest,
        local_store: JournalStore = Depends(get_store),
    ) -> PageResponse:
        require_gm(payload.token)
        try:
            budget = _score_selection(payload.tokens)
            page = save_encounter(local_store, payload.encounter_name, budget)
        except InvalidSelection as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return PageResponse(page=page)

    @app.post("/api/xp/award", response_model=AwardResponse)
    def award_xp(
        payload: AwardRequest,
        local_store: JournalStore = Depends(get_store),
    ) -> AwardResponse:
        require_gm(payload.token)
        try:
            budget = _score_selection(payload.tokens)
            recipients = select_recipients(
                [PartyMember.from_actor(actor) for actor in payload.party_members],
                _selected_pcs(payload.tokens),
            )
            award = build_award(
                budget,
                recipients,
                mode=payload.mode,
                custom_xp=payload.custom_xp,
                note=payload.note,
            )
        except (InvalidSelection, InvalidAward) as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        page = log_award(local_store, award)
        return AwardResponse(award=award.to_dict(), page=page)

    @app.post("/api/party/progress", response_model=ProgressResponse)
    def show_party_progress(payload: ProgressRequest) -> ProgressResponse:
        require_gm(payload.token)
        try:
            progress = party_progress([PartyMember.from_actor(actor) for actor in payload.party_members])
        except InvalidSelection as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return ProgressResponse(
            members=[
                {
                    "name": entry.name,
                    "level": entry.level,
                    "xp": entry.xp,
                    "xpToNextLevel": entry.xp_to_next_level,
                    "nextLevel": entry.next_level,
                }
                for entry in progress
            ]
        )

    @app.get("/api/journal/{entry_name}/pages/{page_name:path}", response_model=PageResponse)
    def get_journal_page(
        entry_name: str,
        page_name: str,
        token: str = Query(min_length=1),
        local_store: JournalStore = Depends(get_store),
    ) -> PageResponse:
        require_gm(token)
        page = local_store.get_page(entry_name=entry_name, page_name=page_name)
        if page is None:
            raise HTTPException(status_code=404, detail="Journal page not found")
        return PageResponse(page=page)

    return app


app = create_app()
