"""Archive API — manual archival, the on-demand sweep and archive reporting."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_db, require_admin
from app.schemas.remarks import (
    ArchivedRemarkRead,
    ArchiveStatsResponse,
    ArchiveSweepResponse,
    RemarkRead,
)

router = APIRouter(prefix="/archive", tags=["archive"], dependencies=[Depends(require_admin)])


@router.post("/auto-archive", response_model=ArchiveSweepResponse)
def run_auto_archive(db: Session = Depends(get_db)) -> dict:
    from app.services.remark_lifecycle import RemarkLifecycleService

    count = RemarkLifecycleService(db).auto_archive_sweep(trigger="manual")
    db.commit()
    return {"count": count}


@router.post("/{remark_id}/archive", response_model=RemarkRead)
def archive_remark(remark_id: UUID, db: Session = Depends(get_db)):
    from app.services.remark_lifecycle import RemarkLifecycleService

    remark = RemarkLifecycleService(db).archive(remark_id)
    db.commit()
    db.refresh(remark)
    return remark


@router.post("/{remark_id}/unarchive", response_model=RemarkRead)
def unarchive_remark(remark_id: UUID, db: Session = Depends(get_db)):
    from app.services.remark_lifecycle import RemarkLifecycleService

    remark = RemarkLifecycleService(db).unarchive(remark_id)
    db.commit()
    db.refresh(remark)
    return remark


@router.get("/archived", response_model=list[ArchivedRemarkRead])
def list_archived(db: Session = Depends(get_db)):
    from app.services.remark_lifecycle import RemarkLifecycleService

    svc = RemarkLifecycleService(db)
    return [
        ArchivedRemarkRead.model_validate(r).model_copy(
            update={
                "is_deletable": svc.is_deletable(r),
                "days_since_archive": svc.days_since_archive(r),
            }
        )
        for r in svc.list_archived()
    ]


@router.get("/stats", response_model=ArchiveStatsResponse)
def archive_stats(db: Session = Depends(get_db)) -> dict:
    from app.services.remark_lifecycle import RemarkLifecycleService

    return RemarkLifecycleService(db).archive_stats()
