"""Remark Service — citizen submissions and administrator listings."""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.person import Person
from app.models.remark import Remark, RemarkCategory, RemarkPriority, RemarkStatus
from app.schemas.remarks import RemarkCreate
from app.services.common import apply_ordering, apply_pagination
from app.services.errors import RemarkNotFoundError

logger = logging.getLogger(__name__)


class RemarkService:
    def __init__(self, db: Session):
        self.db = db

    def create(self, payload: RemarkCreate, submitter: Person | None = None) -> Remark:
        """Create a remark. Contact details come from the submitter when known."""
        data = payload.model_dump()
        remark = Remark(**data)
        if submitter is not None:
            remark.person_id = submitter.id
            remark.contact_name = submitter.name
            remark.contact_email = submitter.email
            remark.contact_phone = submitter.phone
        self.db.add(remark)
        self.db.flush()
        logger.info(
            "Remark %s created (%s)",
            remark.remark_id,
            "anonymous" if submitter is None else f"person {submitter.id}",
        )
        return remark

    def get_for_person(self, remark_id: UUID, person_id: UUID) -> Remark:
        stmt = select(Remark).where(Remark.remark_id == remark_id, Remark.person_id == person_id)
        remark = self.db.scalar(stmt)
        if not remark:
            raise RemarkNotFoundError(remark_id)
        return remark

    def list_for_person(self, person_id: UUID) -> list[Remark]:
        """A citizen's own remarks that are still active, newest first."""
        stmt = (
            select(Remark)
            .where(Remark.person_id == person_id, Remark.archived.is_(False))
            .order_by(Remark.created_at.desc())
        )
        return list(self.db.scalars(stmt).all())

    def list_active(
        self,
        status: RemarkStatus | None = None,
        category: RemarkCategory | None = None,
        priority: RemarkPriority | None = None,
        order_by: str = "created_at",
        order_dir: str = "desc",
        limit: int = 50,
        offset: int = 0,
    ) -> list[Remark]:
        stmt = select(Remark).where(Remark.archived.is_(False))
        if status is not None:
            stmt = stmt.where(Remark.status == status)
        if category is not None:
            stmt = stmt.where(Remark.category == category)
        if priority is not None:
            stmt = stmt.where(Remark.priority == priority)
        stmt = apply_ordering(
            stmt,
            order_by,
            order_dir,
            {
                "created_at": Remark.created_at,
                "updated_at": Remark.updated_at,
                "priority": Remark.priority,
                "status": Remark.status,
            },
        )
        stmt = apply_pagination(stmt, limit, offset)
        return list(self.db.scalars(stmt).all())
