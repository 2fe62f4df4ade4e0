"""
pokeroster.api.routes.pokemons — Team, box and creature sheet endpoints
========================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Form, UploadFile
from pydantic import AliasChoices, BaseModel, Field
from sqlalchemy import Engine

from pokeroster.api.deps import get_config, get_current_actor, get_engine
from pokeroster.api.uploads import linked_image_url, store_avatar
from pokeroster.config import RosterConfig
from pokeroster.database.engine import run_db
from pokeroster.services import pokemon_service, upload_service
from pokeroster.services.access_policy import Actor

router = APIRouter(tags=["pokemons"])


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------
class PokemonStatsUpdate(BaseModel):
    level: int | None = Field(None, ge=0)
    xp: int | None = Field(None, ge=0)
    max_hp: int | None = None
    current_hp: int | None = None
    special: int | None = Field(None, validation_alias=AliasChoices("special", "especial"))
    special_total: int | None = Field(
        None, validation_alias=AliasChoices("special_total", "especial_total")
    )
    vigor: int | None = None
    vigor_total: int | None = None


class PokemonSheetUpdate(BaseModel):
    nature: str | None = None
    ability: str | None = None
    notes: str | None = None


# ---------------------------------------------------------------------------
# Team & box listings
# ---------------------------------------------------------------------------
@router.get("/trainer/{trainer_id}/pokemons")
def list_team(
    trainer_id: int,
    actor: Actor = Depends(get_current_actor),
    engine: Engine = Depends(get_engine),
):
    return [p.to_dict() for p in pokemon_service.list_team(engine, actor, trainer_id)]


@router.get("/deposito")
def list_own_box(
    actor: Actor = Depends(get_current_actor),
    engine: Engine = Depends(get_engine),
):
    return [p.to_dict() for p in pokemon_service.list_box(engine, actor, actor.account_id)]


@router.get("/deposito/{trainer_id}")
def list_box(
    trainer_id: int,
    actor: Actor = Depends(get_current_actor),
    engine: Engine = Depends(get_engine),
):
    return [p.to_dict() for p in pokemon_service.list_box(engine, actor, trainer_id)]


# ---------------------------------------------------------------------------
# Create / update / delete
# ---------------------------------------------------------------------------
@router.post("/pokemons", status_code=201)
async def create_pokemon(
    trainer_id: int | None = Form(None),
    name: str | None = Form(None),
    type: str | None = Form(None),
    level: int | None = Form(None),
    xp: int | None = Form(None),
    max_hp: int | None = Form(None),
    current_hp: int | None = Form(None),
    special: int | None = Form(None),
    special_total: int | None = Form(None),
    vigor: int | None = Form(None),
    vigor_total: int | None = Form(None),
    # original form names for special / special_total
    especial: int | None = Form(None),
    especial_total: int | None = Form(None),
    image_url: str | None = Form(None),
    imageFile: UploadFile | None = None,  # noqa: N803 — form field name
    actor: Actor = Depends(get_current_actor),
    engine: Engine = Depends(get_engine),
    cfg: RosterConfig = Depends(get_config),
):
    """Add a Pokémon to a trainer's team (max six on the team)."""
    external = linked_image_url(image_url)
    uploaded = await store_avatar(imageFile)
    try:
        pokemon = await run_db(
            pokemon_service.create_pokemon,
            engine,
            actor,
            cfg=cfg,
            trainer_id=trainer_id,
            name=name,
            type=type,
            image_url=uploaded or external,
            level=level,
            xp=xp,
            max_hp=max_hp,
            current_hp=current_hp,
            special=special if special is not None else especial,
            special_total=special_total if special_total is not None else especial_total,
            vigor=vigor,
            vigor_total=vigor_total,
        )
    except Exception:
        upload_service.delete_upload(uploaded)
        raise
    return {"message": "Pokémon registered successfully!", "pokemon": pokemon.to_dict()}


@router.put("/pokemon-stats/{pokemon_id}")
def update_stats(
    pokemon_id: int,
    body: PokemonStatsUpdate,
    actor: Actor = Depends(get_current_actor),
    engine: Engine = Depends(get_engine),
):
    pokemon = pokemon_service.update_stats(
        engine, actor, pokemon_id, body.model_dump(exclude_none=True)
    )
    return {"message": "Pokémon stats updated!", "pokemon": pokemon.to_dict()}


@router.delete("/pokemon/{pokemon_id}")
def delete_pokemon(
    pokemon_id: int,
    actor: Actor = Depends(get_current_actor),
    engine: Engine = Depends(get_engine),
    cfg: RosterConfig = Depends(get_config),
):
    pokemon_service.delete_pokemon(engine, actor, pokemon_id, cfg=cfg)
    return {"message": "Pokémon deleted successfully!"}


# ---------------------------------------------------------------------------
# Placement
# ---------------------------------------------------------------------------
@router.put("/pokemon/{pokemon_id}/deposit")
def deposit_pokemon(
    pokemon_id: int,
    actor: Actor = Depends(get_current_actor),
    engine: Engine = Depends(get_engine),
):
    pokemon = pokemon_service.deposit(engine, actor, pokemon_id)
    return {"message": f"{pokemon.name} was sent to the box.", "pokemon": pokemon.to_dict()}


@router.put("/pokemon/{pokemon_id}/withdraw")
def withdraw_pokemon(
    pokemon_id: int,
    actor: Actor = Depends(get_current_actor),
    engine: Engine = Depends(get_engine),
    cfg: RosterConfig = Depends(get_config),
):
    pokemon = pokemon_service.withdraw(engine, actor, pokemon_id, cfg=cfg)
    return {"message": f"{pokemon.name} joined the team.", "pokemon": pokemon.to_dict()}


# ---------------------------------------------------------------------------
# Creature sheet
# ---------------------------------------------------------------------------
@router.get("/pokemon/{pokemon_id}/ficha")
def get_pokemon_sheet(
    pokemon_id: int,
    actor: Actor = Depends(get_current_actor),
    engine: Engine = Depends(get_engine),
):
    return pokemon_service.get_pokemon_sheet(engine, actor, pokemon_id).to_dict()


@router.put("/pokemon/{pokemon_id}/ficha")
def save_pokemon_sheet(
    pokemon_id: int,
    body: PokemonSheetUpdate,
    actor: Actor = Depends(get_current_actor),
    engine: Engine = Depends(get_engine),
):
    sheet = pokemon_service.save_pokemon_sheet(
        engine, actor, pokemon_id, **body.model_dump()
    )
    return {"message": "Pokémon sheet saved!", "sheet": sheet.to_dict()}
