"""
pokeroster.services.backpack_service — Backpack (mochila) Items
================================================================

Items are named stacks unique per ``(owner, item name)``:
  * adding an existing name increments its quantity
  * setting a quantity of 0 deletes the row

Items belonging to someone else are reported as not found, never as
forbidden, so item ids don't leak across accounts.
"""

from __future__ import annotations

import logging

from sqlalchemy import Engine, select
from sqlalchemy.orm import Session

from pokeroster.database.engine import get_session, lock_owner
from pokeroster.database.models import AuditAction, BackpackItem
from pokeroster.errors import NotFoundError, ValidationError
from pokeroster.services import audit_service
from pokeroster.services.access_policy import Actor, require_access

logger = logging.getLogger(__name__)


def _parse_quantity(raw: int | str | None, *, allow_zero: bool) -> int:
    try:
        qty = int(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ValidationError("Invalid quantity.") from None
    if qty < 0 or (qty == 0 and not allow_zero):
        raise ValidationError("Invalid quantity.")
    return qty


def _get_item(session: Session, user_id: int, item_id: int) -> BackpackItem:
    item = session.scalar(
        select(BackpackItem).where(BackpackItem.id == item_id, BackpackItem.user_id == user_id)
    )
    if item is None:
        raise NotFoundError("Item not found in your backpack.")
    return item


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

def list_items(engine: Engine, actor: Actor, user_id: int) -> list[BackpackItem]:
    require_access(actor, user_id)
    with get_session(engine) as session:
        return list(session.scalars(
            select(BackpackItem)
            .where(BackpackItem.user_id == user_id)
            .order_by(BackpackItem.item_name.asc())
        ).all())


def get_item(engine: Engine, actor: Actor, user_id: int, item_id: int) -> BackpackItem:
    require_access(actor, user_id)
    with get_session(engine) as session:
        return _get_item(session, user_id, item_id)


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

def add_item(
    engine: Engine,
    actor: Actor,
    user_id: int,
    *,
    item_name: str | None,
    quantity: int | str | None,
) -> BackpackItem:
    """Insert a new stack or increment the existing one."""
    item_name = (item_name or "").strip()
    if not item_name:
        raise ValidationError("Item name and a valid quantity are required.")
    try:
        qty = _parse_quantity(quantity, allow_zero=False)
    except ValidationError:
        raise ValidationError("Item name and a valid quantity are required.") from None
    require_access(actor, user_id)

    with get_session(engine) as session:
        if lock_owner(session, user_id) is None:
            raise NotFoundError("User not found.")
        item = session.scalar(
            select(BackpackItem).where(
                BackpackItem.user_id == user_id, BackpackItem.item_name == item_name
            )
        )
        if item is None:
            item = BackpackItem(user_id=user_id, item_name=item_name, quantity=qty)
            session.add(item)
        else:
            item.quantity += qty
        session.flush()

    audit_service.record_action(
        engine, actor.account_id, AuditAction.ITEM_ADDED,
        f"Added {qty}x '{item_name}' to the backpack.",
    )
    return item


def set_quantity(
    engine: Engine,
    actor: Actor,
    user_id: int,
    item_id: int,
    *,
    quantity: int | str | None,
) -> BackpackItem | None:
    """Set an item's quantity.  Returns ``None`` when 0 removed the row."""
    qty = _parse_quantity(quantity, allow_zero=True)
    require_access(actor, user_id)

    with get_session(engine) as session:
        item = _get_item(session, user_id, item_id)
        old_qty, name = item.quantity, item.item_name
        if qty == 0:
            session.delete(item)
        else:
            item.quantity = qty

    if qty == 0:
        audit_service.record_action(
            engine, actor.account_id, AuditAction.ITEM_REMOVED,
            f"Removed the rest of '{name}' from the backpack.",
        )
        return None

    audit_service.record_action(
        engine, actor.account_id, AuditAction.ITEM_QUANTITY_CHANGED,
        f"Changed the quantity of '{name}': {old_qty} -> {qty}.",
    )
    return item


def delete_item(engine: Engine, actor: Actor, user_id: int, item_id: int) -> None:
    require_access(actor, user_id)
    with get_session(engine) as session:
        item = _get_item(session, user_id, item_id)
        name = item.item_name
        session.delete(item)

    audit_service.record_action(
        engine, actor.account_id, AuditAction.ITEM_REMOVED,
        f"Removed '{name}' from the backpack.",
    )
