"""
pokeroster.services.audit_service — Audit Trail Writer & Reader
================================================================

Every mutating service call ends with :func:`record_action`.  The write:
  1. Opens its own session (never the caller's transaction)
  2. Resolves the actor's current username as a snapshot ("System" when
     the actor is ``None`` or no longer exists)
  3. Inserts one append-only ``audit_logs`` row and commits

A failed audit write is logged and swallowed: it must never fail or roll
back the business operation that has already committed.
"""

from __future__ import annotations

import logging

from sqlalchemy import Engine, select
from sqlalchemy.orm import Session

from pokeroster.constants import AUDIT_LOG_LIMIT, SYSTEM_ACTOR
from pokeroster.database.models import AuditAction, AuditLog, User

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

def _resolve_username(session: Session, actor_id: int | None) -> str:
    if actor_id is None:
        return SYSTEM_ACTOR
    username = session.scalar(select(User.username).where(User.id == actor_id))
    return username or SYSTEM_ACTOR


def record_action(
    engine: Engine,
    actor_id: int | None,
    action: AuditAction,
    details: str,
) -> bool:
    """Append one audit entry.  Returns ``False`` if the write failed."""
    try:
        with Session(engine) as session:
            session.add(AuditLog(
                user_id=actor_id,
                username=_resolve_username(session, actor_id),
                action=action.value,
                details=details,
            ))
            session.commit()
    except Exception:
        logger.exception(
            "Failed to record audit action %s for actor %s", action.value, actor_id,
        )
        return False
    return True


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

def list_recent(engine: Engine, limit: int = AUDIT_LOG_LIMIT) -> list[AuditLog]:
    """Most recent *limit* entries, newest first."""
    with Session(engine) as session:
        rows = session.scalars(
            select(AuditLog)
            .order_by(AuditLog.timestamp.desc(), AuditLog.id.desc())
            .limit(limit)
        ).all()
        for r in rows:
            session.expunge(r)
        return list(rows)
