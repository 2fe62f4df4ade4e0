"""
pokeroster.services.pokemon_service — Team, Box & Creature Sheets
==================================================================

Placement is a two-state machine::

    TEAM (U) --deposit--> BOX (D)        no precondition
    BOX  (D) --withdraw--> TEAM (U)      guarded by the team cap

A trainer may hold at most ``cfg.max_team_size`` Pokémon on the team; the
box is unbounded.  The cap is checked inside the same transaction as the
insert/withdraw, after locking the owner's account row, so two concurrent
requests cannot both take the last slot.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import Engine, delete, func, select
from sqlalchemy.orm import Session

from pokeroster.config import RosterConfig
from pokeroster.constants import POKEMON_STAT_FIELDS
from pokeroster.database.engine import get_session, lock_owner
from pokeroster.database.models import (
    AuditAction,
    Pokemon,
    PokemonSheet,
    PokemonStatus,
)
from pokeroster.errors import NotFoundError, TeamFullError, ValidationError
from pokeroster.services import audit_service, upload_service
from pokeroster.services.access_policy import Actor, require_access
from pokeroster.services.trainer_service import placeholder_images

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _team_count(session: Session, trainer_id: int) -> int:
    return session.scalar(
        select(func.count())
        .select_from(Pokemon)
        .where(
            Pokemon.trainer_id == trainer_id,
            Pokemon.status == PokemonStatus.TEAM.value,
        )
    ) or 0


def _ensure_team_slot(session: Session, trainer_id: int, cfg: RosterConfig) -> None:
    if _team_count(session, trainer_id) >= cfg.max_team_size:
        raise TeamFullError(f"Team limit of {cfg.max_team_size} Pokémon reached!")


def _get_owned(session: Session, actor: Actor, pokemon_id: int, message: str) -> Pokemon:
    pokemon = session.get(Pokemon, pokemon_id)
    if pokemon is None:
        raise NotFoundError("Pokémon not found.")
    require_access(actor, pokemon.trainer_id, message)
    return pokemon


def _list_by_status(
    engine: Engine, trainer_id: int, status: PokemonStatus, order_by: Any
) -> list[Pokemon]:
    with get_session(engine) as session:
        return list(session.scalars(
            select(Pokemon)
            .where(Pokemon.trainer_id == trainer_id, Pokemon.status == status.value)
            .order_by(order_by)
        ).all())


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

def list_team(engine: Engine, actor: Actor, trainer_id: int) -> list[Pokemon]:
    require_access(actor, trainer_id, "Not authorized to view this trainer's Pokémon.")
    return _list_by_status(engine, trainer_id, PokemonStatus.TEAM, Pokemon.id.asc())


def list_box(engine: Engine, actor: Actor, trainer_id: int) -> list[Pokemon]:
    require_access(actor, trainer_id, "Not authorized to view this trainer's box.")
    return _list_by_status(engine, trainer_id, PokemonStatus.BOX, Pokemon.name.asc())


# ---------------------------------------------------------------------------
# Create / update / delete
# ---------------------------------------------------------------------------

def create_pokemon(
    engine: Engine,
    actor: Actor,
    *,
    cfg: RosterConfig,
    trainer_id: int | None,
    name: str | None,
    type: str | None,
    image_url: str | None = None,
    **stats: int | None,
) -> Pokemon:
    """Add a Pokémon to a trainer's team.

    Raises
    ------
    ValidationError
        If name, type or trainer_id is missing, or an unknown stat is given.
    PermissionDenied
        If the actor may not manage this trainer.
    NotFoundError
        If the trainer doesn't exist.
    TeamFullError
        If the team is already at the cap.
    """
    name = (name or "").strip()
    type = (type or "").strip()
    if not name or not type or not trainer_id:
        raise ValidationError("Name, type and trainer ID are required.")
    unknown = set(stats) - set(POKEMON_STAT_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown stat fields: {', '.join(sorted(unknown))}")

    require_access(
        actor, trainer_id, "You do not have permission to add Pokémon to this trainer."
    )

    with get_session(engine) as session:
        if lock_owner(session, trainer_id) is None:
            raise NotFoundError("Trainer not found.")
        _ensure_team_slot(session, trainer_id, cfg)

        pokemon = Pokemon(
            name=name,
            type=type,
            image_url=image_url or cfg.default_pokemon_image,
            trainer_id=trainer_id,
            status=PokemonStatus.TEAM.value,
            **{k: v for k, v in stats.items() if v is not None},
        )
        session.add(pokemon)
        session.flush()
        session.refresh(pokemon)

    audit_service.record_action(
        engine,
        actor.account_id,
        AuditAction.POKEMON_ADDED,
        f"Added '{name}' to the team of trainer ID {trainer_id}.",
    )
    return pokemon


def update_stats(
    engine: Engine, actor: Actor, pokemon_id: int, stats: dict[str, int | None]
) -> Pokemon:
    """Merge the supplied stat values over the stored ones."""
    with get_session(engine) as session:
        pokemon = _get_owned(
            session, actor, pokemon_id, "You do not have permission to edit this Pokémon."
        )
        changes = []
        for key in POKEMON_STAT_FIELDS:
            value = stats.get(key)
            if value is not None and value != getattr(pokemon, key):
                changes.append(f"{key}: {getattr(pokemon, key)} -> {value}")
                setattr(pokemon, key, value)

    detail = f"Stats of '{pokemon.name}' (ID: {pokemon_id}) updated."
    if changes:
        detail += f" {', '.join(changes)}"
    audit_service.record_action(
        engine, actor.account_id, AuditAction.POKEMON_STATS_UPDATED, detail,
    )
    return pokemon


def delete_pokemon(engine: Engine, actor: Actor, pokemon_id: int, *, cfg: RosterConfig) -> None:
    """Delete a Pokémon, its sheet, then its avatar file."""
    with get_session(engine) as session:
        pokemon = _get_owned(
            session, actor, pokemon_id, "You do not have permission to delete this Pokémon."
        )
        name, trainer_id, image_url = pokemon.name, pokemon.trainer_id, pokemon.image_url
        session.execute(delete(PokemonSheet).where(PokemonSheet.pokemon_id == pokemon_id))
        session.execute(delete(Pokemon).where(Pokemon.id == pokemon_id))

    upload_service.delete_upload(image_url, keep=placeholder_images(cfg))
    audit_service.record_action(
        engine,
        actor.account_id,
        AuditAction.POKEMON_DELETED,
        f"Deleted '{name}' (ID: {pokemon_id}) of trainer ID {trainer_id}.",
    )


# ---------------------------------------------------------------------------
# Placement
# ---------------------------------------------------------------------------

def deposit(engine: Engine, actor: Actor, pokemon_id: int) -> Pokemon:
    """Move a Pokémon from the team to the box.

    Depositing a Pokémon that is already boxed changes nothing and is not
    audited.
    """
    with get_session(engine) as session:
        pokemon = _get_owned(
            session, actor, pokemon_id, "You do not have permission to move this Pokémon."
        )
        lock_owner(session, pokemon.trainer_id)
        session.refresh(pokemon)
        if pokemon.status == PokemonStatus.BOX.value:
            return pokemon
        pokemon.status = PokemonStatus.BOX.value

    audit_service.record_action(
        engine,
        actor.account_id,
        AuditAction.POKEMON_DEPOSITED,
        f"Deposited '{pokemon.name}' (ID: {pokemon_id}) in the box.",
    )
    return pokemon


def withdraw(engine: Engine, actor: Actor, pokemon_id: int, *, cfg: RosterConfig) -> Pokemon:
    """Move a Pokémon from the box back to the team, if a slot is free.

    Withdrawing a Pokémon that is already on the team is a no-op.
    """
    with get_session(engine) as session:
        pokemon = _get_owned(
            session, actor, pokemon_id, "You do not have permission to move this Pokémon."
        )
        lock_owner(session, pokemon.trainer_id)
        session.refresh(pokemon)
        if pokemon.status == PokemonStatus.TEAM.value:
            return pokemon
        _ensure_team_slot(session, pokemon.trainer_id, cfg)
        pokemon.status = PokemonStatus.TEAM.value

    audit_service.record_action(
        engine,
        actor.account_id,
        AuditAction.POKEMON_WITHDRAWN,
        f"Withdrew '{pokemon.name}' (ID: {pokemon_id}) from the box.",
    )
    return pokemon


# ---------------------------------------------------------------------------
# Creature sheet
# ---------------------------------------------------------------------------

def get_pokemon_sheet(engine: Engine, actor: Actor, pokemon_id: int) -> PokemonSheet:
    with get_session(engine) as session:
        _get_owned(session, actor, pokemon_id, "You do not have permission to view this sheet.")
        sheet = session.scalar(
            select(PokemonSheet).where(PokemonSheet.pokemon_id == pokemon_id)
        )
    if sheet is None:
        raise NotFoundError("Sheet not found.")
    return sheet


def save_pokemon_sheet(
    engine: Engine,
    actor: Actor,
    pokemon_id: int,
    *,
    nature: str | None = None,
    ability: str | None = None,
    notes: str | None = None,
) -> PokemonSheet:
    """Insert or fully replace the sheet of a Pokémon."""
    with get_session(engine) as session:
        pokemon = _get_owned(
            session, actor, pokemon_id, "You do not have permission to edit this sheet."
        )
        sheet = session.scalar(
            select(PokemonSheet).where(PokemonSheet.pokemon_id == pokemon_id)
        )
        if sheet is None:
            sheet = PokemonSheet(pokemon_id=pokemon_id)
            session.add(sheet)
        sheet.nature = nature
        sheet.ability = ability
        sheet.notes = notes
        name = pokemon.name

    audit_service.record_action(
        engine,
        actor.account_id,
        AuditAction.POKEMON_SHEET_SAVED,
        f"Saved the sheet of '{name}' (ID: {pokemon_id}).",
    )
    return sheet
