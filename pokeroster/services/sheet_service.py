"""
pokeroster.services.sheet_service — Trainer Character Sheets
=============================================================

One optional sheet per account.  Saving replaces the whole row (no
field-level merge): anything not sent is cleared.  Advantages, attributes
and skills are stored as JSON text and decoded on read.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from sqlalchemy import Engine, select

from pokeroster.database.engine import get_session, lock_owner
from pokeroster.database.models import AuditAction, TrainerSheet
from pokeroster.errors import NotFoundError
from pokeroster.services import audit_service
from pokeroster.services.access_policy import Actor, require_access

logger = logging.getLogger(__name__)

SCALAR_FIELDS: tuple[str, ...] = (
    "name",
    "weight",
    "age",
    "height",
    "city",
    "region",
    "xp",
    "hp",
    "level",
)


def _decode(raw: str | None, default: Any) -> Any:
    if raw is None:
        return default
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        logger.warning("Discarding undecodable sheet JSON: %.60r", raw)
        return default


def sheet_to_dict(sheet: TrainerSheet) -> dict:
    data: dict[str, Any] = {"user_id": sheet.user_id}
    for field in SCALAR_FIELDS:
        data[field] = getattr(sheet, field)
    data["advantages"] = _decode(sheet.advantages_json, [])
    data["attributes"] = _decode(sheet.attributes_json, {})
    data["skills"] = _decode(sheet.skills_json, {})
    return data


def get_sheet(engine: Engine, actor: Actor, user_id: int) -> dict:
    require_access(actor, user_id, "You do not have permission to view this sheet.")
    with get_session(engine) as session:
        sheet = session.scalar(select(TrainerSheet).where(TrainerSheet.user_id == user_id))
    if sheet is None:
        raise NotFoundError("Sheet not found.")
    return sheet_to_dict(sheet)


def save_sheet(
    engine: Engine,
    actor: Actor,
    user_id: int,
    *,
    advantages: list | None = None,
    attributes: dict | None = None,
    skills: dict | None = None,
    **scalars: str | None,
) -> dict:
    """Insert or fully replace the sheet of *user_id*."""
    require_access(actor, user_id, "You do not have permission to edit this sheet.")

    with get_session(engine) as session:
        if lock_owner(session, user_id) is None:
            raise NotFoundError("User not found.")
        sheet = session.scalar(select(TrainerSheet).where(TrainerSheet.user_id == user_id))
        if sheet is None:
            sheet = TrainerSheet(user_id=user_id)
            session.add(sheet)
        for field in SCALAR_FIELDS:
            setattr(sheet, field, scalars.get(field))
        sheet.advantages_json = json.dumps(advantages if advantages is not None else [])
        sheet.attributes_json = json.dumps(attributes if attributes is not None else {})
        sheet.skills_json = json.dumps(skills if skills is not None else {})

    audit_service.record_action(
        engine,
        actor.account_id,
        AuditAction.SHEET_SAVED,
        f"Saved the character sheet of user ID {user_id}.",
    )
    return sheet_to_dict(sheet)
