"""
pokeroster.api.routes.audit — Audit trail (masters only)
=========================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy import Engine

from pokeroster.api.deps import get_config, get_engine, require_master
from pokeroster.config import RosterConfig
from pokeroster.services import audit_service
from pokeroster.services.access_policy import Actor

router = APIRouter(tags=["audit"])


@router.get("/auditoria")
def list_audit_log(
    limit: int | None = Query(None, ge=1),
    actor: Actor = Depends(require_master),
    engine: Engine = Depends(get_engine),
    cfg: RosterConfig = Depends(get_config),
):
    """Most recent entries first, never more than ``audit_log_limit``."""
    cap = cfg.audit_log_limit
    rows = audit_service.list_recent(engine, min(limit or cap, cap))
    return [r.to_dict() for r in rows]
