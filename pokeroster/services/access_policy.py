"""
pokeroster.services.access_policy — Master-or-Owner Authorization
==================================================================

The one place that decides whether an authenticated actor may touch a
resource.  Rules, in order:

1. A master may do anything.
2. A trainer may act only on resources whose owning account is their own.
3. Everything else is denied.

:func:`can_access` is a pure decision; :func:`require_access` and
:func:`require_master` turn a denial into :class:`PermissionDenied` so the
caller stops before any mutation or audit write.
"""

from __future__ import annotations

from dataclasses import dataclass

from pokeroster.database.models import Role
from pokeroster.errors import PermissionDenied


@dataclass(frozen=True, slots=True)
class Actor:
    """The authenticated identity behind a request."""

    account_id: int
    role: Role
    username: str | None = None

    @property
    def is_master(self) -> bool:
        return self.role is Role.MASTER


def can_access(actor: Actor, owner_id: int | None) -> bool:
    """Return ``True`` if *actor* may act on a resource owned by *owner_id*.

    ``owner_id=None`` marks a global resource, which only masters may touch.
    """
    if actor.role is Role.MASTER:
        return True
    if actor.role is Role.TRAINER and owner_id is not None:
        return actor.account_id == owner_id
    return False


def require_access(
    actor: Actor,
    owner_id: int | None,
    message: str = "You do not have permission to access this resource.",
) -> None:
    if not can_access(actor, owner_id):
        raise PermissionDenied(message)


def require_master(
    actor: Actor,
    message: str = "Access denied. Masters only.",
) -> None:
    if not actor.is_master:
        raise PermissionDenied(message)
