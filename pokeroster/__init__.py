"""
Poké Roster — Trainer & Creature Management Backend
=====================================================
REST backend for a tabletop-RPG table: trainer accounts, a six-slot team
plus an unbounded box of Pokémon per trainer, a backpack, a Pokédex, free
form character sheets, and an audit trail of every mutating action.

Package layout::

    pokeroster/
    ├── config.py          # YAML → typed Python config
    ├── constants.py       # Default avatars, caps, labels
    ├── errors.py          # Domain error taxonomy (→ HTTP status)
    ├── database/
    │   ├── engine.py      # SQLAlchemy engine + async helper
    │   ├── models.py      # All ORM models (7 tables)
    │   └── seed.py        # Master account bootstrap
    ├── services/
    │   ├── access_policy.py   # Master-or-owner authorization decision
    │   ├── audit_service.py   # Best-effort audit trail writer/reader
    │   ├── auth_service.py    # Password hashing, register, login
    │   ├── trainer_service.py # Account edits + cascading delete
    │   ├── pokemon_service.py # Team/box lifecycle, creature sheets
    │   ├── sheet_service.py   # Character sheet upsert
    │   ├── pokedex_service.py # Insert-or-ignore dex entries
    │   ├── backpack_service.py # Insert-or-increment items
    │   └── upload_service.py  # Avatar files on disk
    └── api/
        ├── main.py        # FastAPI app + error handlers
        ├── deps.py        # JWT → Actor, engine/config injection
        ├── auth.py        # /login, /register
        └── routes/        # REST endpoints per resource
"""

__version__ = "0.1.0"
