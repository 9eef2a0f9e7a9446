"""
Remarks API — citizen submissions and administrator triage.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import Authenticated, RequestContext, get_db, optional_auth, require_admin, require_user_auth
from app.models.person import Person
from app.models.remark import RemarkCategory, RemarkPriority, RemarkStatus
from app.schemas.remarks import (
    RemarkAdminRead,
    RemarkAdminUpdate,
    RemarkCreate,
    RemarkDeleteResponse,
    RemarkRead,
    RemarkUpdateResponse,
)

router = APIRouter(prefix="/remarks", tags=["remarks"])


# ──────────────────────────── Admin ──────────────────────────────


@router.get("/admin/all", response_model=list[RemarkAdminRead])
def list_all_remarks(
    status_filter: RemarkStatus | None = Query(default=None, alias="status"),
    category: RemarkCategory | None = None,
    priority: RemarkPriority | None = None,
    order_by: str = Query(default="created_at"),
    order_dir: str = Query(default="desc", pattern="^(asc|desc)$"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    auth: Authenticated = Depends(require_admin),
):
    from app.services.remark_lifecycle import RemarkLifecycleService
    from app.services.remark_service import RemarkService

    remarks = RemarkService(db).list_active(
        status=status_filter,
        category=category,
        priority=priority,
        order_by=order_by,
        order_dir=order_dir,
        limit=limit,
        offset=offset,
    )
    lifecycle = RemarkLifecycleService(db)
    return [
        RemarkAdminRead.model_validate(r).model_copy(update={"is_archivable": lifecycle.is_archivable(r)})
        for r in remarks
    ]


@router.put("/admin/{remark_id}", response_model=RemarkUpdateResponse)
def update_remark(
    remark_id: UUID,
    payload: RemarkAdminUpdate,
    db: Session = Depends(get_db),
    auth: Authenticated = Depends(require_admin),
):
    from app.services.notification_service import NotificationService
    from app.services.remark_lifecycle import RemarkLifecycleService

    result = RemarkLifecycleService(db).apply_update(remark_id, payload)
    db.commit()
    delivered = NotificationService(db).deliver(result.notifications)
    return {
        "remark": RemarkRead.model_validate(result.remark),
        "status_changed": result.status_changed,
        "notifications_created": delivered,
    }


@router.delete("/admin/{remark_id}", response_model=RemarkDeleteResponse)
def delete_remark(
    remark_id: UUID,
    db: Session = Depends(get_db),
    auth: Authenticated = Depends(require_admin),
):
    from app.services.remark_lifecycle import RemarkLifecycleService

    deleted = RemarkLifecycleService(db).delete(remark_id)
    db.commit()
    return {"remark_id": deleted.remark_id, "deleted": True, "release_asset": deleted.release_asset}


# ──────────────────────────── Citizen ────────────────────────────


@router.post("", response_model=RemarkRead, status_code=status.HTTP_201_CREATED)
def create_remark(
    payload: RemarkCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(optional_auth),
):
    from app.services.remark_service import RemarkService

    submitter = db.get(Person, ctx.person_id) if isinstance(ctx, Authenticated) else None
    remark = RemarkService(db).create(payload, submitter=submitter)
    db.commit()
    db.refresh(remark)
    return remark


@router.get("", response_model=list[RemarkRead])
def list_my_remarks(
    db: Session = Depends(get_db),
    auth: Authenticated = Depends(require_user_auth),
):
    from app.services.remark_service import RemarkService

    return RemarkService(db).list_for_person(auth.person_id)


@router.get("/{remark_id}", response_model=RemarkRead)
def get_my_remark(
    remark_id: UUID,
    db: Session = Depends(get_db),
    auth: Authenticated = Depends(require_user_auth),
):
    from app.services.remark_service import RemarkService

    return RemarkService(db).get_for_person(remark_id, auth.person_id)
