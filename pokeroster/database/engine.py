"""
pokeroster.database.engine — Database Connection & Async Helper
================================================================

FastAPI runs ``async`` handlers on an event loop, while SQLAlchemy +
psycopg2 is **synchronous**.  Async handlers hand their DB work to a
background thread through :func:`run_db` so the loop never blocks; plain
``def`` handlers already run in FastAPI's thread pool and call services
directly.

The engine is never a module-level global: it is built once by
:func:`pokeroster.api.deps.get_engine` and passed explicitly into every
service function, so tests can inject an isolated in-memory engine.

Usage::

    from pokeroster.database.engine import create_db_engine, init_db, run_db

    engine = create_db_engine()          # reads DATABASE_URL from .env
    init_db(engine, cfg)                 # CREATE TABLE IF NOT EXISTS + seed

    # Inside an async route:
    pokemon = await run_db(pokemon_service.create_pokemon, engine, actor, ...)
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable
from contextlib import contextmanager
from typing import TYPE_CHECKING, ParamSpec, TypeVar

from sqlalchemy import Engine, create_engine, select
from sqlalchemy.orm import Session

from pokeroster.database.models import Base, User

if TYPE_CHECKING:
    from pokeroster.config import RosterConfig

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


# ---------------------------------------------------------------------------
# Engine creation
# ---------------------------------------------------------------------------
def create_db_engine(url: str | None = None) -> Engine:
    """Build a SQLAlchemy :class:`Engine` from the ``DATABASE_URL`` env var.

    PostgreSQL pools are sized for a small gaming table:
    * ``pool_size=5`` — five persistent connections.
    * ``max_overflow=10`` — up to 10 extra connections under load.
    * ``pool_timeout=10`` — fail after 10 s if no connection is available.
    * ``pool_recycle=3600`` — recycle connections after 1 hour.

    SQLite URLs (local development) skip the pool tuning.

    Raises
    ------
    RuntimeError
        If no URL is given and ``DATABASE_URL`` is not set.
    """
    url = url or os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError(
            "DATABASE_URL is not set.  "
            "Copy .env.example → .env and set a valid PostgreSQL URL."
        )

    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False},
        )
    else:
        engine = create_engine(
            url,
            echo=False,        # Set True for SQL debugging
            pool_size=5,
            max_overflow=10,
            pool_pre_ping=True,   # Reconnect stale connections automatically
            pool_timeout=10,
            pool_recycle=3600,
        )
    logger.info("Database engine created → %s", engine.url.host or engine.url.database)
    return engine


# ---------------------------------------------------------------------------
# Schema initialization
# ---------------------------------------------------------------------------
def init_db(engine: Engine, cfg: RosterConfig) -> None:
    """Create all tables and make sure a master account exists.

    Safe to call on every startup — ``CREATE TABLE IF NOT EXISTS`` under
    the hood, and the seeder only inserts when no master is present.

    .. note::

        In production the schema is managed by Alembic (``alembic upgrade
        head``).  ``create_all`` is retained as a safety net for dev/test
        environments where Alembic may not have run.
    """
    Base.metadata.create_all(engine)
    logger.info("Database tables verified / created.")

    from pokeroster.database.seed import seed_master_account

    seed_master_account(engine, cfg)


# ---------------------------------------------------------------------------
# Session helper
# ---------------------------------------------------------------------------
@contextmanager
def get_session(engine: Engine):
    """Yield a :class:`Session` that auto-commits on success and rolls back
    on exception.

    Objects stay readable after the block (``expire_on_commit=False``), so
    services can return ORM rows to their callers.

    Usage::

        with get_session(engine) as session:
            session.add(User(username="ash", ...))
            # commit happens automatically on block exit
    """
    session = Session(engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def lock_owner(session: Session, user_id: int) -> User | None:
    """Lock the owning account row for the rest of the transaction.

    Every read-modify-write on an owner's rows (team cap check, backpack
    increment, cascades) starts here so concurrent writers for the same
    owner serialize.  ``FOR UPDATE`` is ignored by SQLite.
    """
    return session.scalar(
        select(User).where(User.id == user_id).with_for_update()
    )


# ---------------------------------------------------------------------------
# Async bridge
# ---------------------------------------------------------------------------
async def run_db(func: Callable[P, T], *args: P.args, **kwargs: P.kwargs) -> T:
    """Run a **synchronous** database function on a background thread.

    Under the hood it calls :func:`asyncio.to_thread`, which schedules
    *func* on the default ``ThreadPoolExecutor`` so the event loop is
    never blocked.
    """
    return await asyncio.to_thread(func, *args, **kwargs)
