"""Initial roster schema

Revision ID: 5c1e7a9d2b40
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "5c1e7a9d2b40"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create accounts, creatures, sheets, dex, backpack and audit tables."""
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(100), nullable=False, unique=True),
        sa.Column("password", sa.String(255), nullable=False),
        sa.Column("tipo_usuario", sa.String(1), nullable=False),
        sa.Column("image_url", sa.String(500), nullable=True),
    )

    op.create_table(
        "pokemons",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("level", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("xp", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("max_hp", sa.Integer(), nullable=False, server_default="10"),
        sa.Column("current_hp", sa.Integer(), nullable=False, server_default="10"),
        sa.Column("especial", sa.Integer(), nullable=False, server_default="10"),
        sa.Column("especial_total", sa.Integer(), nullable=False, server_default="10"),
        sa.Column("vigor", sa.Integer(), nullable=False, server_default="10"),
        sa.Column("vigor_total", sa.Integer(), nullable=False, server_default="10"),
        sa.Column("image_url", sa.String(500), nullable=True),
        sa.Column(
            "trainer_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("status", sa.String(1), nullable=False, server_default="U"),
    )
    op.create_index("ix_pokemons_trainer_status", "pokemons", ["trainer_id", "status"])

    op.create_table(
        "trainer_sheets",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        *[
            sa.Column(name, sa.Text(), nullable=True)
            for name in (
                "nome", "peso", "idade", "altura", "cidade", "regiao",
                "xp", "hp", "level",
                "vantagens_json", "atributos_json", "pericias_json",
            )
        ],
    )

    op.create_table(
        "pokemon_sheets",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "pokemon_id",
            sa.Integer(),
            sa.ForeignKey("pokemons.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("nature", sa.String(50), nullable=True),
        sa.Column("ability", sa.String(100), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
    )

    op.create_table(
        "pokedex",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("image_url", sa.String(500), nullable=True),
    )

    op.create_table(
        "mochila_itens",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("item_nome", sa.String(200), nullable=False),
        sa.Column("quantidade", sa.Integer(), nullable=False),
        sa.UniqueConstraint("user_id", "item_nome", name="uq_mochila_itens_user_item"),
    )

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "timestamp",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("username", sa.String(100), nullable=True),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("details", sa.Text(), nullable=True),
    )
    op.create_index("ix_audit_logs_timestamp", "audit_logs", ["timestamp"])


def downgrade() -> None:
    """Drop every roster table, children first."""
    op.drop_index("ix_audit_logs_timestamp", table_name="audit_logs")
    op.drop_table("audit_logs")
    op.drop_table("mochila_itens")
    op.drop_table("pokedex")
    op.drop_table("pokemon_sheets")
    op.drop_table("trainer_sheets")
    op.drop_index("ix_pokemons_trainer_status", table_name="pokemons")
    op.drop_table("pokemons")
    op.drop_table("users")
