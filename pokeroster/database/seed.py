"""
pokeroster.database.seed — Master Account Bootstrap
=====================================================

Creates the first master account on startup so a fresh deployment can
log in and manage trainers.

Idempotent — does nothing when any master already exists.  The password
comes from ``MASTER_PASSWORD``; when unset a random one is generated and
logged once so the operator can sign in and change it.
"""

from __future__ import annotations

import logging
import os
import secrets

from sqlalchemy import Engine, select
from sqlalchemy.orm import Session

from pokeroster.config import RosterConfig
from pokeroster.constants import DEFAULT_MASTER_IMAGE
from pokeroster.database.models import Role, User
from pokeroster.services.auth_service import hash_password

logger = logging.getLogger(__name__)


def seed_master_account(engine: Engine, cfg: RosterConfig) -> User | None:
    """Insert the master account if no master exists yet.

    Returns the new :class:`User`, or ``None`` when nothing was seeded.
    """
    session = Session(engine, expire_on_commit=False)
    try:
        existing = session.scalar(
            select(User.id).where(User.role == Role.MASTER.value).limit(1)
        )
        if existing is not None:
            return None

        password = os.getenv("MASTER_PASSWORD", "")
        generated = not password
        if generated:
            password = secrets.token_urlsafe(12)

        master = User(
            username=cfg.master_username,
            password=hash_password(password),
            role=Role.MASTER.value,
            image_url=DEFAULT_MASTER_IMAGE,
        )
        session.add(master)
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()

    if generated:
        logger.warning(
            "MASTER_PASSWORD not set — master %r created with generated password %s",
            cfg.master_username, password,
        )
    else:
        logger.info("Master account %r created.", cfg.master_username)
    return master
