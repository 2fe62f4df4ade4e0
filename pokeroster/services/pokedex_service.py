"""
pokeroster.services.pokedex_service — Discovered Species
=========================================================

Entries are keyed by ``(species id, owner)``.  Adding an entry that is
already present is a no-op, reported to the caller as ``False``.
"""

from __future__ import annotations

from sqlalchemy import Engine, select
from sqlalchemy.exc import IntegrityError

from pokeroster.database.engine import get_session
from pokeroster.database.models import AuditAction, PokedexEntry
from pokeroster.errors import ValidationError
from pokeroster.services import audit_service
from pokeroster.services.access_policy import Actor, require_access


def list_entries(engine: Engine, actor: Actor, user_id: int) -> list[PokedexEntry]:
    require_access(actor, user_id, "You do not have permission to view this Pokédex.")
    with get_session(engine) as session:
        return list(session.scalars(
            select(PokedexEntry)
            .where(PokedexEntry.user_id == user_id)
            .order_by(PokedexEntry.id.asc())
        ).all())


def add_entry(
    engine: Engine,
    actor: Actor,
    user_id: int,
    *,
    species_id: int | None,
    name: str | None,
    type: str | None,
    image_url: str | None = None,
) -> bool:
    """Insert-or-ignore.  Returns ``True`` if a new entry was added."""
    if not species_id or not name or not type:
        raise ValidationError("Incomplete data to add to the Pokédex.")
    require_access(actor, user_id, "You do not have permission to edit this Pokédex.")

    try:
        with get_session(engine) as session:
            if session.get(PokedexEntry, (species_id, user_id)) is not None:
                return False
            session.add(PokedexEntry(
                id=species_id,
                user_id=user_id,
                name=name,
                type=type,
                image_url=image_url,
            ))
    except IntegrityError:
        # Lost a race with an identical insert
        return False

    audit_service.record_action(
        engine, actor.account_id, AuditAction.POKEDEX_ADDED, f"Added '{name}' to the Pokédex.",
    )
    return True
