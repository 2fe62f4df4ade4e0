"""
pokeroster.api.auth — Login, registration and JWT issuance
===========================================================

The only anonymous routes of the API.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta

import jwt
from fastapi import APIRouter, Depends, Form, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import Engine

from pokeroster.api.deps import JWT_ALGORITHM, JWT_SECRET, get_config, get_engine
from pokeroster.api.uploads import store_avatar
from pokeroster.config import RosterConfig
from pokeroster.database.engine import run_db
from pokeroster.database.models import User
from pokeroster.services import auth_service, upload_service

logger = logging.getLogger(__name__)
router = APIRouter(tags=["auth"])


class LoginRequest(BaseModel):
    username: str | None = None
    password: str | None = None


def issue_token(user: User, cfg: RosterConfig) -> str:
    payload = {
        "sub": str(user.id),
        "username": user.username,
        "role": user.role,
        "exp": datetime.now(UTC) + timedelta(hours=cfg.token_ttl_hours),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


@router.post("/login")
def login(
    body: LoginRequest,
    engine: Engine = Depends(get_engine),
    cfg: RosterConfig = Depends(get_config),
):
    """Check credentials and return a bearer token."""
    user = auth_service.authenticate(engine, username=body.username, password=body.password)
    if user is None:
        return JSONResponse(status_code=401, content={"message": "Invalid credentials."})
    return {
        "message": "Login successful!",
        "token": issue_token(user, cfg),
        "user": user.to_dict(),
    }


@router.post("/register", status_code=201)
async def register(
    username: str | None = Form(None),
    password: str | None = Form(None),
    imageFile: UploadFile | None = None,  # noqa: N803 — form field name
    engine: Engine = Depends(get_engine),
    cfg: RosterConfig = Depends(get_config),
):
    """Create a trainer account, optionally with an avatar upload."""
    image_url = await store_avatar(imageFile) or cfg.default_trainer_image
    try:
        user = await run_db(
            auth_service.register_trainer,
            engine,
            username=username,
            password=password,
            image_url=image_url,
        )
    except Exception:
        upload_service.delete_upload(image_url, keep=frozenset({cfg.default_trainer_image}))
        raise
    return {"message": "Trainer registered successfully!", "userId": user.id}
