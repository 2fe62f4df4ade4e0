"""
pokeroster.api.main — FastAPI application entry point
======================================================

Run with::

    uvicorn pokeroster.api.main:app --reload --port 3001

or ``python -m pokeroster``.
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.staticfiles import StaticFiles

load_dotenv()

from pokeroster.api.auth import router as auth_router  # noqa: E402
from pokeroster.api.deps import get_config, get_engine  # noqa: E402
from pokeroster.api.routes.audit import router as audit_router  # noqa: E402
from pokeroster.api.routes.backpack import router as backpack_router  # noqa: E402
from pokeroster.api.routes.pokedex import router as pokedex_router  # noqa: E402
from pokeroster.api.routes.pokemons import router as pokemons_router  # noqa: E402
from pokeroster.api.routes.sheets import router as sheets_router  # noqa: E402
from pokeroster.api.routes.trainers import router as trainers_router  # noqa: E402
from pokeroster.database.engine import init_db  # noqa: E402
from pokeroster.errors import RosterError  # noqa: E402
from pokeroster.services.upload_service import UPLOAD_DIR, ensure_upload_dir  # noqa: E402

logger = logging.getLogger(__name__)


def _cors_origins() -> list[str]:
    """Resolve allowed CORS origins from env with safe defaults.

    Priority:
      1) CORS_ALLOW_ORIGINS (comma-separated)
      2) FRONTEND_URL (single origin)
    """
    raw = os.getenv("CORS_ALLOW_ORIGINS", "").strip()
    if raw:
        return [origin.strip().rstrip("/") for origin in raw.split(",") if origin.strip()]

    frontend_url = os.getenv("FRONTEND_URL", "").strip()
    if frontend_url:
        return [frontend_url.rstrip("/")]

    return []


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle — create tables and seed the master."""
    ensure_upload_dir()

    # Honour test overrides so a TestClient context uses the injected engine
    engine = app.dependency_overrides.get(get_engine, get_engine)()
    cfg = app.dependency_overrides.get(get_config, get_config)()
    init_db(engine, cfg)
    logger.info("%s API started — engine ready (%s)", cfg.app_name, engine.url.database)
    yield
    logger.info("%s API shutting down", cfg.app_name)


app = FastAPI(
    title="Poké Roster API",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Error mapping — every error body is {"message": ...}
# ---------------------------------------------------------------------------
@app.exception_handler(RosterError)
async def roster_error_handler(request: Request, exc: RosterError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail
    content = detail if isinstance(detail, dict) else {"message": str(detail)}
    return JSONResponse(
        status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None)
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={
            "message": "Invalid request data.",
            "errors": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal server error."})


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
app.include_router(auth_router)
app.include_router(trainers_router)
app.include_router(pokemons_router)
app.include_router(sheets_router)
app.include_router(pokedex_router)
app.include_router(backpack_router)
app.include_router(audit_router)


@app.get("/health")
def health():
    return {"status": "ok"}


# Serve uploaded avatars as static assets
ensure_upload_dir()
app.mount(
    "/uploads",
    StaticFiles(directory=str(UPLOAD_DIR)),
    name="uploads",
)
