"""
pokeroster.constants — Shared Constants
========================================

Single source of truth for placeholder avatars, caps and labels.
Import from here instead of duplicating in services and routes.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Placeholder avatars — shared images, never deleted from disk
# ---------------------------------------------------------------------------
DEFAULT_TRAINER_IMAGE = "https://i.imgur.com/6MKOJ1G.png"
DEFAULT_POKEMON_IMAGE = "https://i.imgur.com/bTf0PCo.png"
DEFAULT_MASTER_IMAGE = "https://i.imgur.com/t9E4gE9.png"

# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------
MAX_TEAM_SIZE = 6
AUDIT_LOG_LIMIT = 200

# Actor label stored in audit_logs when no account is attached
SYSTEM_ACTOR = "System"

# Stat columns a trainer may edit through /pokemon-stats
POKEMON_STAT_FIELDS: tuple[str, ...] = (
    "level",
    "xp",
    "max_hp",
    "current_hp",
    "special",
    "special_total",
    "vigor",
    "vigor_total",
)
