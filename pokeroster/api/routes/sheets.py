"""
pokeroster.api.routes.sheets — Trainer character sheet (ficha)
===============================================================
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy import Engine

from pokeroster.api.deps import get_current_actor, get_engine
from pokeroster.services import sheet_service
from pokeroster.services.access_policy import Actor

router = APIRouter(prefix="/ficha", tags=["sheets"])


class TrainerSheetBody(BaseModel):
    """Whole-sheet payload.  Omitted fields are cleared on save."""

    name: str | None = None
    weight: str | None = None
    age: str | None = None
    height: str | None = None
    city: str | None = None
    region: str | None = None
    xp: str | None = None
    hp: str | None = None
    level: str | None = None
    advantages: list[Any] = Field(default_factory=list)
    attributes: dict[str, Any] = Field(default_factory=dict)
    skills: dict[str, Any] = Field(default_factory=dict)


def _save(engine: Engine, actor: Actor, user_id: int, body: TrainerSheetBody) -> dict:
    sheet = sheet_service.save_sheet(engine, actor, user_id, **body.model_dump())
    return {"message": "Sheet saved successfully!", "sheet": sheet}


@router.get("")
def get_own_sheet(
    actor: Actor = Depends(get_current_actor),
    engine: Engine = Depends(get_engine),
):
    return sheet_service.get_sheet(engine, actor, actor.account_id)


@router.put("")
def save_own_sheet(
    body: TrainerSheetBody,
    actor: Actor = Depends(get_current_actor),
    engine: Engine = Depends(get_engine),
):
    return _save(engine, actor, actor.account_id, body)


@router.get("/{user_id}")
def get_sheet(
    user_id: int,
    actor: Actor = Depends(get_current_actor),
    engine: Engine = Depends(get_engine),
):
    return sheet_service.get_sheet(engine, actor, user_id)


@router.put("/{user_id}")
def save_sheet(
    user_id: int,
    body: TrainerSheetBody,
    actor: Actor = Depends(get_current_actor),
    engine: Engine = Depends(get_engine),
):
    return _save(engine, actor, user_id, body)
