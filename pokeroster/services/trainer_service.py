"""
pokeroster.services.trainer_service — Account Reads, Edits & Deletion
======================================================================

Profile edits are partial: only supplied fields change, and a request
that changes nothing is rejected.  Deleting an account removes, in one
transaction and in dependency order: Pokémon sheets → Pokémon → trainer
sheet → Pokédex → backpack → the account row.  Avatar files go last,
after commit.
"""

from __future__ import annotations

import logging

from sqlalchemy import Engine, delete, select
from sqlalchemy.exc import IntegrityError

from pokeroster.config import RosterConfig
from pokeroster.constants import DEFAULT_MASTER_IMAGE
from pokeroster.database.engine import get_session, lock_owner
from pokeroster.database.models import (
    AuditAction,
    BackpackItem,
    PokedexEntry,
    Pokemon,
    PokemonSheet,
    Role,
    TrainerSheet,
    User,
)
from pokeroster.errors import ConflictError, NotFoundError, ValidationError
from pokeroster.services import audit_service, upload_service
from pokeroster.services.access_policy import Actor, require_access, require_master
from pokeroster.services.auth_service import hash_password

logger = logging.getLogger(__name__)


def placeholder_images(cfg: RosterConfig) -> frozenset[str]:
    """Shared avatars that must never be unlinked."""
    return frozenset({
        cfg.default_trainer_image,
        cfg.default_pokemon_image,
        DEFAULT_MASTER_IMAGE,
    })


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

def list_trainers(engine: Engine, actor: Actor) -> list[dict]:
    """All trainer accounts, by username.  Masters only."""
    require_master(actor, "Access denied. Masters only.")
    with get_session(engine) as session:
        rows = session.scalars(
            select(User)
            .where(User.role == Role.TRAINER.value)
            .order_by(User.username.asc())
        ).all()
        return [
            {"id": u.id, "username": u.username, "image_url": u.image_url}
            for u in rows
        ]


def get_trainer(engine: Engine, actor: Actor, user_id: int) -> User:
    require_access(actor, user_id, "You do not have permission to view this profile.")
    with get_session(engine) as session:
        user = session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found.")
    return user


# ---------------------------------------------------------------------------
# Edits
# ---------------------------------------------------------------------------

def update_trainer(
    engine: Engine,
    actor: Actor,
    user_id: int,
    *,
    cfg: RosterConfig,
    username: str | None = None,
    password: str | None = None,
    image_url: str | None = None,
) -> User:
    """Apply a partial profile edit.

    Raises
    ------
    PermissionDenied
        If the actor is neither a master nor the account owner.
    NotFoundError
        If the account doesn't exist.
    ValidationError
        If no supplied field would change anything.
    ConflictError
        If the new username is already taken.
    """
    require_access(actor, user_id, "You do not have permission to edit this profile.")

    changes: list[str] = []
    try:
        with get_session(engine) as session:
            user = lock_owner(session, user_id)
            if user is None:
                raise NotFoundError("User not found.")
            old_username = user.username
            old_image = user.image_url

            username = (username or "").strip()
            if username and username != user.username:
                taken = session.scalar(
                    select(User.id).where(User.username == username, User.id != user_id)
                )
                if taken is not None:
                    raise ConflictError("This username is already taken.")
                changes.append(f"Name: '{user.username}' -> '{username}'")
                user.username = username
            if password:
                user.password = hash_password(password)
                changes.append("Password changed.")
            if image_url:
                user.image_url = image_url
                changes.append("Image changed.")

            if not changes:
                raise ValidationError("No data provided for update.")
    except IntegrityError as exc:
        raise ConflictError("This username is already taken.") from exc

    if image_url and old_image != image_url:
        upload_service.delete_upload(old_image, keep=placeholder_images(cfg))

    audit_service.record_action(
        engine,
        actor.account_id,
        AuditAction.TRAINER_UPDATED,
        f"Updated profile of '{old_username}' (ID: {user_id}). Details: {'; '.join(changes)}",
    )
    return user


# ---------------------------------------------------------------------------
# Deletion
# ---------------------------------------------------------------------------

def delete_trainer(engine: Engine, actor: Actor, user_id: int, *, cfg: RosterConfig) -> None:
    """Delete an account and everything it owns.  Masters only."""
    require_master(actor, "Access denied. Only masters can delete users.")

    with get_session(engine) as session:
        user = lock_owner(session, user_id)
        if user is None:
            raise NotFoundError("User not found.")
        username = user.username
        images = [user.image_url]
        images.extend(session.scalars(
            select(Pokemon.image_url).where(Pokemon.trainer_id == user_id)
        ).all())

        pokemon_ids = select(Pokemon.id).where(Pokemon.trainer_id == user_id)
        session.execute(delete(PokemonSheet).where(PokemonSheet.pokemon_id.in_(pokemon_ids)))
        session.execute(delete(Pokemon).where(Pokemon.trainer_id == user_id))
        session.execute(delete(TrainerSheet).where(TrainerSheet.user_id == user_id))
        session.execute(delete(PokedexEntry).where(PokedexEntry.user_id == user_id))
        session.execute(delete(BackpackItem).where(BackpackItem.user_id == user_id))
        session.execute(delete(User).where(User.id == user_id))

    keep = placeholder_images(cfg)
    for url in images:
        upload_service.delete_upload(url, keep=keep)

    logger.info("Deleted account %s (%r) and all owned data", user_id, username)
    audit_service.record_action(
        engine,
        actor.account_id,
        AuditAction.TRAINER_DELETED,
        f"Trainer '{username}' (ID: {user_id}) was deleted.",
    )
