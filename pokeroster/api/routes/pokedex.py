"""
pokeroster.api.routes.pokedex — Discovered species
===================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import Engine

from pokeroster.api.deps import get_current_actor, get_engine
from pokeroster.services import pokedex_service
from pokeroster.services.access_policy import Actor

router = APIRouter(prefix="/pokedex", tags=["pokedex"])


class PokedexAdd(BaseModel):
    id: int | None = None
    name: str | None = None
    type: str | None = None
    image_url: str | None = None


@router.get("")
def list_pokedex(
    actor: Actor = Depends(get_current_actor),
    engine: Engine = Depends(get_engine),
):
    return [e.to_dict() for e in pokedex_service.list_entries(engine, actor, actor.account_id)]


@router.post("")
def add_to_pokedex(
    body: PokedexAdd,
    actor: Actor = Depends(get_current_actor),
    engine: Engine = Depends(get_engine),
):
    """201 when added, 200 when the species was already registered."""
    added = pokedex_service.add_entry(
        engine,
        actor,
        actor.account_id,
        species_id=body.id,
        name=body.name,
        type=body.type,
        image_url=body.image_url,
    )
    if added:
        return JSONResponse(
            status_code=201,
            content={"message": f"{body.name} added to the Pokédex!", "added": True},
        )
    return {"message": f"{body.name} was already in your Pokédex.", "added": False}
