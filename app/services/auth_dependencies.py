"""Request identity for the API.

Tokens are issued by the external identity provider; this module only
verifies them. Every request resolves to either ``Authenticated`` or
``Anonymous``.
"""

import logging
from dataclasses import dataclass
from uuid import UUID

import jwt
from fastapi import Depends, Header, HTTPException, Request
from jwt.exceptions import PyJWTError as JWTError
from sqlalchemy.orm import Session

from app.config import settings
from app.db import SessionLocal
from app.models.person import Person, PersonRole
from app.services.common import coerce_uuid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Authenticated:
    person_id: UUID
    role: PersonRole


@dataclass(frozen=True)
class Anonymous:
    pass


RequestContext = Authenticated | Anonymous


def _get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _extract_bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    parts = authorization.split(" ", 1)
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1].strip()
    return None


def decode_access_token(token: str) -> dict:
    if not settings.jwt_secret:
        raise HTTPException(status_code=500, detail="JWT secret not configured")
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise HTTPException(status_code=401, detail="Invalid or expired token") from exc


def _resolve(db: Session, token: str) -> Authenticated:
    payload = decode_access_token(token)
    person_id = payload.get("sub")
    if not person_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    try:
        person_uuid = coerce_uuid(person_id)
    except HTTPException as exc:
        raise HTTPException(status_code=401, detail="Unauthorized") from exc
    person = db.get(Person, person_uuid)
    if not person or not person.is_active:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return Authenticated(person_id=person.id, role=person.role)


def _remember(request: Request, ctx: RequestContext) -> None:
    if isinstance(ctx, Authenticated):
        request.state.actor_id = str(ctx.person_id)
        request.state.actor_type = ctx.role.value
    else:
        request.state.actor_type = "anonymous"


def optional_auth(
    request: Request,
    authorization: str | None = Header(default=None),
    db: Session = Depends(_get_db),
) -> RequestContext:
    """Resolve the caller when a valid token is sent; fall back to Anonymous otherwise."""
    token = _extract_bearer_token(authorization)
    ctx: RequestContext = Anonymous()
    if token:
        try:
            ctx = _resolve(db, token)
        except HTTPException as exc:
            if exc.status_code != 401:
                raise
            logger.debug("Ignoring invalid token on optional-auth route")
    _remember(request, ctx)
    return ctx


def require_user_auth(
    request: Request,
    authorization: str | None = Header(default=None),
    db: Session = Depends(_get_db),
) -> Authenticated:
    token = _extract_bearer_token(authorization)
    if not token:
        raise HTTPException(status_code=401, detail="Unauthorized")
    ctx = _resolve(db, token)
    _remember(request, ctx)
    return ctx


def require_role(role: PersonRole):
    def _require_role(auth: Authenticated = Depends(require_user_auth)) -> Authenticated:
        if auth.role != role:
            raise HTTPException(status_code=403, detail="Forbidden")
        return auth

    return _require_role


require_admin = require_role(PersonRole.admin)
