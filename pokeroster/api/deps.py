"""
pokeroster.api.deps — FastAPI dependency injection
===================================================
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Annotated

import jwt
from fastapi import Depends, Header, HTTPException, status
from jwt.exceptions import InvalidTokenError
from sqlalchemy import Engine

from pokeroster.config import RosterConfig, load_config
from pokeroster.database.engine import create_db_engine
from pokeroster.database.models import Role
from pokeroster.services.access_policy import Actor

_WEAK_SECRETS = frozenset({
    "SEGREDO_SUPER_SECRETO_PARA_DESENVOLVIMENTO",
    "pokeroster-dev-secret-change-me",
    "change-me",
    "secret",
    "dev",
    "",
})

_MIN_SECRET_LENGTH = 32

JWT_ALGORITHM = "HS256"


def _load_jwt_secret() -> str:
    """Load and validate JWT_SECRET from the environment.

    Raises RuntimeError at import time if the secret is missing, blank,
    too short (< 32 chars), or a known weak default.
    """
    secret = os.getenv("JWT_SECRET", "")
    if not secret:
        raise RuntimeError(
            "JWT_SECRET environment variable is not set. "
            "Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(64))\""
        )
    if secret in _WEAK_SECRETS:
        raise RuntimeError(
            f"JWT_SECRET is set to a known weak default ('{secret}'). "
            "Please set a strong, unique secret."
        )
    if len(secret) < _MIN_SECRET_LENGTH:
        raise RuntimeError(
            f"JWT_SECRET is too short ({len(secret)} chars). "
            f"Minimum length is {_MIN_SECRET_LENGTH} characters."
        )
    return secret


JWT_SECRET: str = _load_jwt_secret()


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    return create_db_engine()


@lru_cache(maxsize=1)
def get_config() -> RosterConfig:
    return load_config(os.getenv("POKEROSTER_CONFIG", "config.yaml"))


def get_current_actor(
    authorization: Annotated[str | None, Header()] = None,
) -> Actor:
    """Validate the bearer JWT and return the acting identity. 401 if invalid."""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status.HTTP_401_UNAUTHORIZED, "Access denied. No token provided."
        )
    token = authorization.split(" ", 1)[1]
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
        actor = Actor(
            account_id=int(payload["sub"]),
            role=Role(payload["role"]),
            username=payload.get("username"),
        )
    except (InvalidTokenError, KeyError, ValueError):
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Invalid or expired token.")
    return actor


def require_master(actor: Actor = Depends(get_current_actor)) -> Actor:
    """Like :func:`get_current_actor`, but 403 unless the actor is a master."""
    if not actor.is_master:
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Access denied. Masters only.")
    return actor
