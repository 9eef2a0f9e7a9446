"""Notification API — a citizen's status-change notifications."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import Authenticated, get_db, require_user_auth
from app.schemas.notifications import (
    NotificationListResponse,
    NotificationRead,
    NotificationUnreadCountResponse,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationListResponse)
def list_notifications(
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    auth: Authenticated = Depends(require_user_auth),
) -> dict:
    from app.services.notification_service import NotificationService

    svc = NotificationService(db)
    return svc.get_api_payload(auth.person_id, limit=limit, offset=offset)


@router.get("/unread-count", response_model=NotificationUnreadCountResponse)
def unread_count(
    db: Session = Depends(get_db),
    auth: Authenticated = Depends(require_user_auth),
) -> dict:
    from app.services.notification_service import NotificationService

    svc = NotificationService(db)
    return {"unread_count": svc.get_unread_count(auth.person_id)}


@router.post("/read-all")
def mark_all_read(
    db: Session = Depends(get_db),
    auth: Authenticated = Depends(require_user_auth),
) -> dict:
    from app.services.notification_service import NotificationService

    svc = NotificationService(db)
    count = svc.mark_all_read(auth.person_id)
    db.commit()
    return {"marked": count}


@router.post("/{notification_id}/read", response_model=NotificationRead)
def mark_read(
    notification_id: UUID,
    db: Session = Depends(get_db),
    auth: Authenticated = Depends(require_user_auth),
):
    from app.services.notification_service import NotificationService

    svc = NotificationService(db)
    n = svc.mark_read(notification_id, auth.person_id)
    db.commit()
    db.refresh(n)
    return n
