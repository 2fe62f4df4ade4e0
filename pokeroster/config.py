"""
pokeroster.config — YAML Configuration Loader
==============================================

This module reads ``config.yaml`` for **infrastructure-only** settings
(master account handle, team cap, audit listing cap, token lifetime,
placeholder avatars).  Secrets (``JWT_SECRET``, ``MASTER_PASSWORD``,
``DATABASE_URL``) never live here; they come from the environment.

Usage::

    from pokeroster.config import load_config

    cfg = load_config()          # reads ./config.yaml by default
    print(cfg.app_name)          # "Poké Roster"
    print(cfg.max_team_size)     # 6
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from pokeroster.constants import (
    AUDIT_LOG_LIMIT,
    DEFAULT_POKEMON_IMAGE,
    DEFAULT_TRAINER_IMAGE,
    MAX_TEAM_SIZE,
)


# ---------------------------------------------------------------------------
# Typed settings object
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class RosterConfig:
    """Immutable configuration loaded from ``config.yaml``."""

    # Identity
    app_name: str
    master_username: str

    # Rules
    max_team_size: int = MAX_TEAM_SIZE
    audit_log_limit: int = AUDIT_LOG_LIMIT

    # Auth
    token_ttl_hours: int = 8

    # Placeholder avatars (never unlinked from disk)
    default_trainer_image: str = DEFAULT_TRAINER_IMAGE
    default_pokemon_image: str = DEFAULT_POKEMON_IMAGE


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def load_config(path: str | Path = "config.yaml") -> RosterConfig:
    """Read *path* and return a :class:`RosterConfig` instance.

    Parameters
    ----------
    path:
        Filesystem path to the YAML configuration file.
        Defaults to ``config.yaml`` in the current working directory.

    Raises
    ------
    FileNotFoundError
        If the YAML file doesn't exist.
    KeyError
        If a required key is missing from the YAML file.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path.resolve()}\n"
            "Hint: copy config.yaml.example → config.yaml and edit it."
        )

    with open(config_path, encoding="utf-8") as fh:
        raw: dict = yaml.safe_load(fh) or {}

    return RosterConfig(
        app_name=raw["app_name"],
        master_username=raw["master_username"],
        max_team_size=int(raw.get("max_team_size", MAX_TEAM_SIZE)),
        audit_log_limit=int(raw.get("audit_log_limit", AUDIT_LOG_LIMIT)),
        token_ttl_hours=int(raw.get("token_ttl_hours", 8)),
        default_trainer_image=raw.get("default_trainer_image") or DEFAULT_TRAINER_IMAGE,
        default_pokemon_image=raw.get("default_pokemon_image") or DEFAULT_POKEMON_IMAGE,
    )
