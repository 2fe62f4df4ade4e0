"""
pokeroster.database.models — SQLAlchemy 2.0 Data Models
========================================================

Tables:
- users            — Accounts (master or trainer), unique handle, bcrypt hash
- pokemons         — Creatures owned by a trainer, on the team or in the box
- trainer_sheets   — One optional character sheet per account
- pokemon_sheets   — One optional sheet per creature
- pokedex          — Discovered species per account, keyed (species, owner)
- mochila_itens    — Backpack stacks, unique per (owner, item name)
- audit_logs       — Append-only audit trail with actor handle snapshot

Every owned table references its owner with ``ON DELETE CASCADE``; the
services still delete children explicitly, in dependency order, so the
behaviour does not depend on the backend enforcing foreign keys.
"""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------
class Base(DeclarativeBase):
    """Shared base for all Poké Roster ORM models."""


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class Role(enum.StrEnum):
    """Account role.  Stored as the single-letter tag used since day one."""
    MASTER = "M"
    TRAINER = "T"


class PokemonStatus(enum.StrEnum):
    """Placement of a creature: on the active team or stored in the box."""
    TEAM = "U"
    BOX = "D"


class AuditAction(enum.StrEnum):
    """Closed vocabulary of mutations recorded in audit_logs."""
    LOGIN = "LOGIN"
    TRAINER_REGISTERED = "TRAINER_REGISTERED"
    TRAINER_UPDATED = "TRAINER_UPDATED"
    TRAINER_DELETED = "TRAINER_DELETED"
    POKEMON_ADDED = "POKEMON_ADDED"
    POKEMON_STATS_UPDATED = "POKEMON_STATS_UPDATED"
    POKEMON_DELETED = "POKEMON_DELETED"
    POKEMON_DEPOSITED = "POKEMON_DEPOSITED"
    POKEMON_WITHDRAWN = "POKEMON_WITHDRAWN"
    POKEMON_SHEET_SAVED = "POKEMON_SHEET_SAVED"
    SHEET_SAVED = "SHEET_SAVED"
    POKEDEX_ADDED = "POKEDEX_ADDED"
    ITEM_ADDED = "ITEM_ADDED"
    ITEM_QUANTITY_CHANGED = "ITEM_QUANTITY_CHANGED"
    ITEM_REMOVED = "ITEM_REMOVED"


# ---------------------------------------------------------------------------
# Users — masters and trainers
# ---------------------------------------------------------------------------
class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    password: Mapped[str] = mapped_column(String(255), nullable=False)  # bcrypt hash
    role: Mapped[str] = mapped_column("tipo_usuario", String(1), nullable=False)
    image_url: Mapped[str | None] = mapped_column(String(500), default=None)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "role": self.role,
            "tipo_usuario": self.role,
            "image_url": self.image_url,
        }

    def __repr__(self) -> str:
        return f"<User id={self.id} name={self.username!r} role={self.role}>"


# ---------------------------------------------------------------------------
# Pokemons — team (status U) or box (status D)
# ---------------------------------------------------------------------------
class Pokemon(Base):
    __tablename__ = "pokemons"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    xp: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_hp: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    current_hp: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    special: Mapped[int] = mapped_column("especial", Integer, nullable=False, default=10)
    special_total: Mapped[int] = mapped_column(
        "especial_total", Integer, nullable=False, default=10
    )
    vigor: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    vigor_total: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    image_url: Mapped[str | None] = mapped_column(String(500), default=None)
    trainer_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    status: Mapped[str] = mapped_column(
        String(1), nullable=False, default=PokemonStatus.TEAM.value
    )

    __table_args__ = (
        Index("ix_pokemons_trainer_status", "trainer_id", "status"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "level": self.level,
            "xp": self.xp,
            "max_hp": self.max_hp,
            "current_hp": self.current_hp,
            "special": self.special,
            "special_total": self.special_total,
            "especial": self.special,
            "especial_total": self.special_total,
            "vigor": self.vigor,
            "vigor_total": self.vigor_total,
            "image_url": self.image_url,
            "trainer_id": self.trainer_id,
            "status": self.status,
        }

    def __repr__(self) -> str:
        return f"<Pokemon id={self.id} name={self.name!r} status={self.status}>"


# ---------------------------------------------------------------------------
# TrainerSheet — one optional character sheet per account
# ---------------------------------------------------------------------------
class TrainerSheet(Base):
    """Role-play character sheet.

    Scalar fields are free text (the table keeps whatever the player typed).
    The three collections are stored as JSON-encoded text and replaced as a
    whole on every save.
    """
    __tablename__ = "trainer_sheets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    name: Mapped[str | None] = mapped_column("nome", Text, default=None)
    weight: Mapped[str | None] = mapped_column("peso", Text, default=None)
    age: Mapped[str | None] = mapped_column("idade", Text, default=None)
    height: Mapped[str | None] = mapped_column("altura", Text, default=None)
    city: Mapped[str | None] = mapped_column("cidade", Text, default=None)
    region: Mapped[str | None] = mapped_column("regiao", Text, default=None)
    xp: Mapped[str | None] = mapped_column(Text, default=None)
    hp: Mapped[str | None] = mapped_column(Text, default=None)
    level: Mapped[str | None] = mapped_column(Text, default=None)
    advantages_json: Mapped[str | None] = mapped_column("vantagens_json", Text, default=None)
    attributes_json: Mapped[str | None] = mapped_column("atributos_json", Text, default=None)
    skills_json: Mapped[str | None] = mapped_column("pericias_json", Text, default=None)

    def __repr__(self) -> str:
        return f"<TrainerSheet user={self.user_id} name={self.name!r}>"


# ---------------------------------------------------------------------------
# PokemonSheet — one optional sheet per creature
# ---------------------------------------------------------------------------
class PokemonSheet(Base):
    __tablename__ = "pokemon_sheets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    pokemon_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("pokemons.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    nature: Mapped[str | None] = mapped_column(String(50), default=None)
    ability: Mapped[str | None] = mapped_column(String(100), default=None)
    notes: Mapped[str | None] = mapped_column(Text, default=None)

    def to_dict(self) -> dict:
        return {
            "pokemon_id": self.pokemon_id,
            "nature": self.nature,
            "ability": self.ability,
            "notes": self.notes,
        }

    def __repr__(self) -> str:
        return f"<PokemonSheet pokemon={self.pokemon_id}>"


# ---------------------------------------------------------------------------
# PokedexEntry — composite identity (species id, owner)
# ---------------------------------------------------------------------------
class PokedexEntry(Base):
    __tablename__ = "pokedex"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    image_url: Mapped[str | None] = mapped_column(String(500), default=None)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "type": self.type,
            "image_url": self.image_url,
        }

    def __repr__(self) -> str:
        return f"<PokedexEntry species={self.id} user={self.user_id}>"


# ---------------------------------------------------------------------------
# BackpackItem — named stacks, unique per owner
# ---------------------------------------------------------------------------
class BackpackItem(Base):
    __tablename__ = "mochila_itens"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    item_name: Mapped[str] = mapped_column("item_nome", String(200), nullable=False)
    quantity: Mapped[int] = mapped_column("quantidade", Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "item_nome", name="uq_mochila_itens_user_item"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "item_name": self.item_name,
            "quantity": self.quantity,
            "item_nome": self.item_name,
            "quantidade": self.quantity,
        }

    def __repr__(self) -> str:
        return f"<BackpackItem id={self.id} item={self.item_name!r} qty={self.quantity}>"


# ---------------------------------------------------------------------------
# AuditLog — append-only audit trail
# ---------------------------------------------------------------------------
class AuditLog(Base):
    """One row per state-changing action.

    ``username`` is a snapshot taken at write time so entries stay readable
    after the actor is renamed or deleted.  ``user_id`` carries no foreign
    key for the same reason.
    """
    __tablename__ = "audit_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    user_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    username: Mapped[str | None] = mapped_column(String(100), nullable=True)
    action: Mapped[str] = mapped_column(String(50), nullable=False)
    details: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("ix_audit_logs_timestamp", "timestamp"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "user_id": self.user_id,
            "username": self.username,
            "action": self.action,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"<AuditLog id={self.id} actor={self.user_id} action={self.action}>"
