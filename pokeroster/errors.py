"""
pokeroster.errors — Domain Error Taxonomy
==========================================

Services raise these; :mod:`pokeroster.api.main` maps each one to its
HTTP status and a ``{"message": ...}`` body.
"""

from __future__ import annotations

from typing import Any


class RosterError(Exception):
    """Base class for every expected, user-facing failure."""

    status_code: int = 500

    def __init__(self, message: str, **extra: Any) -> None:
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, **self.extra}


class ValidationError(RosterError):
    """Missing or malformed input."""

    status_code = 400


class PermissionDenied(RosterError):
    status_code = 403


class TeamFullError(PermissionDenied):
    """The trainer already has the maximum number of Pokémon on the team."""


class NotFoundError(RosterError):
    status_code = 404


class ConflictError(RosterError):
    """Uniqueness violation, e.g. a username already taken."""

    status_code = 409
