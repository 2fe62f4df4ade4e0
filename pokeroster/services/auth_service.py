"""
pokeroster.services.auth_service — Passwords, Registration, Login
==================================================================

Passwords are always stored as salted bcrypt hashes; there is no
plaintext path.  Registration and login are the only anonymous
operations, so neither goes through the access policy.
"""

from __future__ import annotations

import logging

import bcrypt
from sqlalchemy import Engine, select
from sqlalchemy.exc import IntegrityError

from pokeroster.database.engine import get_session
from pokeroster.database.models import AuditAction, Role, User
from pokeroster.errors import ConflictError, ValidationError
from pokeroster.services import audit_service

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------

def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Not a bcrypt hash (e.g. a legacy plaintext row)
        logger.warning("Stored password is not a valid bcrypt hash")
        return False


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------

def register_trainer(
    engine: Engine,
    *,
    username: str | None,
    password: str | None,
    image_url: str,
) -> User:
    """Create a trainer account.

    Raises
    ------
    ValidationError
        If username or password is missing.
    ConflictError
        If the username is already taken.
    """
    username = (username or "").strip()
    if not username or not password:
        raise ValidationError("Username and password are required.")

    try:
        with get_session(engine) as session:
            taken = session.scalar(select(User.id).where(User.username == username))
            if taken is not None:
                raise ConflictError("This username is already taken.")
            user = User(
                username=username,
                password=hash_password(password),
                role=Role.TRAINER.value,
                image_url=image_url,
            )
            session.add(user)
            session.flush()
    except IntegrityError as exc:
        raise ConflictError("This username is already taken.") from exc

    audit_service.record_action(
        engine,
        None,
        AuditAction.TRAINER_REGISTERED,
        f"Trainer '{user.username}' (ID: {user.id}) was created.",
    )
    return user


# ---------------------------------------------------------------------------
# Login
# ---------------------------------------------------------------------------

def authenticate(engine: Engine, *, username: str | None, password: str | None) -> User | None:
    """Return the matching account, or ``None`` on bad credentials.

    Raises
    ------
    ValidationError
        If username or password is missing.
    """
    if not username or not password:
        raise ValidationError("Username and password are required.")

    with get_session(engine) as session:
        user = session.scalar(select(User).where(User.username == username))

    if user is None or not verify_password(password, user.password):
        logger.info("Failed login for %r", username)
        return None

    audit_service.record_action(
        engine, user.id, AuditAction.LOGIN, f"User '{user.username}' logged in.",
    )
    return user
