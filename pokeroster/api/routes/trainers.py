"""
pokeroster.api.routes.trainers — Account endpoints
===================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Form, UploadFile
from sqlalchemy import Engine

from pokeroster.api.deps import get_config, get_current_actor, get_engine, require_master
from pokeroster.api.uploads import store_avatar
from pokeroster.config import RosterConfig
from pokeroster.database.engine import run_db
from pokeroster.services import trainer_service, upload_service
from pokeroster.services.access_policy import Actor

router = APIRouter(tags=["trainers"])


@router.get("/users/all")
def list_trainers(
    actor: Actor = Depends(require_master),
    engine: Engine = Depends(get_engine),
):
    return trainer_service.list_trainers(engine, actor)


@router.get("/user/{user_id}")
def get_user(
    user_id: int,
    actor: Actor = Depends(get_current_actor),
    engine: Engine = Depends(get_engine),
):
    return trainer_service.get_trainer(engine, actor, user_id).to_dict()


@router.put("/user/{user_id}")
async def update_user(
    user_id: int,
    username: str | None = Form(None),
    password: str | None = Form(None),
    imageFile: UploadFile | None = None,  # noqa: N803 — form field name
    actor: Actor = Depends(get_current_actor),
    engine: Engine = Depends(get_engine),
    cfg: RosterConfig = Depends(get_config),
):
    """Partial profile edit: only the supplied fields change."""
    image_url = await store_avatar(imageFile)
    try:
        user = await run_db(
            trainer_service.update_trainer,
            engine,
            actor,
            user_id,
            cfg=cfg,
            username=username,
            password=password,
            image_url=image_url,
        )
    except Exception:
        upload_service.delete_upload(image_url)
        raise
    return {
        "message": "Trainer updated successfully!",
        "user": {"id": user.id, "username": user.username, "image_url": user.image_url},
    }


@router.delete("/user/{user_id}")
def delete_user(
    user_id: int,
    actor: Actor = Depends(get_current_actor),
    engine: Engine = Depends(get_engine),
    cfg: RosterConfig = Depends(get_config),
):
    trainer_service.delete_trainer(engine, actor, user_id, cfg=cfg)
    return {"message": "Trainer and all of their data were deleted successfully!"}
