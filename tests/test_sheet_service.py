"""
tests/test_sheet_service.py — Trainer Character Sheet Upsert
==============================================================
"""

from __future__ import annotations

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from pokeroster.database.models import TrainerSheet
from pokeroster.errors import NotFoundError, PermissionDenied
from pokeroster.services import sheet_service


def test_missing_sheet_is_404(db_engine, ash, ash_actor):
    with pytest.raises(NotFoundError):
        sheet_service.get_sheet(db_engine, ash_actor, ash.id)


def test_json_fields_roundtrip(db_engine, ash, ash_actor):
    sheet_service.save_sheet(
        db_engine,
        ash_actor,
        ash.id,
        name="Ash Ketchum",
        region="Kanto",
        advantages=["A", "B"],
        attributes={"str": 3},
        skills={"stealth": 2},
    )
    sheet = sheet_service.get_sheet(db_engine, ash_actor, ash.id)
    assert sheet["name"] == "Ash Ketchum"
    assert sheet["region"] == "Kanto"
    assert sheet["advantages"] == ["A", "B"]
    assert sheet["attributes"] == {"str": 3}
    assert sheet["skills"] == {"stealth": 2}


def test_save_replaces_whole_row(db_engine, ash, ash_actor):
    sheet_service.save_sheet(
        db_engine, ash_actor, ash.id, name="Ash", city="Pallet", advantages=["A"]
    )
    sheet_service.save_sheet(db_engine, ash_actor, ash.id, name="Ash")

    sheet = sheet_service.get_sheet(db_engine, ash_actor, ash.id)
    assert sheet["city"] is None
    assert sheet["advantages"] == []
    with Session(db_engine) as session:
        assert session.scalar(select(func.count()).select_from(TrainerSheet)) == 1


def test_master_may_edit_any_sheet(db_engine, ash, master_actor, ash_actor):
    sheet_service.save_sheet(db_engine, master_actor, ash.id, name="Edited by GM")
    assert sheet_service.get_sheet(db_engine, ash_actor, ash.id)["name"] == "Edited by GM"


def test_other_trainer_denied(db_engine, ash, misty_actor):
    with pytest.raises(PermissionDenied):
        sheet_service.save_sheet(db_engine, misty_actor, ash.id, name="x")


def test_corrupt_json_decodes_to_default(db_engine, ash, ash_actor):
    sheet_service.save_sheet(db_engine, ash_actor, ash.id, name="Ash")
    with Session(db_engine) as session:
        row = session.scalar(select(TrainerSheet))
        row.skills_json = "{not json"
        session.commit()
    assert sheet_service.get_sheet(db_engine, ash_actor, ash.id)["skills"] == {}
