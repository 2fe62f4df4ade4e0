"""
tests/test_seed.py — Master Account Bootstrap
===============================================
"""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from pokeroster.database.engine import init_db
from pokeroster.database.models import Role, User
from pokeroster.database.seed import seed_master_account
from pokeroster.services import auth_service


def _masters(engine) -> int:
    with Session(engine) as session:
        return session.scalar(
            select(func.count()).select_from(User).where(User.role == Role.MASTER.value)
        )


def test_seeds_master_with_env_password(db_engine, cfg, monkeypatch):
    monkeypatch.setenv("MASTER_PASSWORD", "oak-lab-1996")
    master = seed_master_account(db_engine, cfg)
    assert master.username == cfg.master_username
    assert auth_service.authenticate(
        db_engine, username=cfg.master_username, password="oak-lab-1996"
    ) is not None


def test_generated_password_is_logged(db_engine, cfg, monkeypatch, caplog):
    monkeypatch.delenv("MASTER_PASSWORD", raising=False)
    with caplog.at_level("WARNING", logger="pokeroster.database.seed"):
        assert seed_master_account(db_engine, cfg) is not None
    assert "generated password" in caplog.text


def test_idempotent(db_engine, cfg, master):
    assert seed_master_account(db_engine, cfg) is None
    init_db(db_engine, cfg)
    assert _masters(db_engine) == 1
