"""Notification Service — persist and manage citizen notifications."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from app.metrics import NOTIFICATION_FAILURES
from app.models.notification import Notification, NotificationType
from app.services.errors import NotificationNotFoundError

if TYPE_CHECKING:
    from app.services.remark_lifecycle import NotificationRequest

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def create(
        self,
        person_id: UUID,
        type: NotificationType,
        title: str,
        message: str,
        remark_id: UUID | None = None,
    ) -> Notification:
        """Create a notification for a specific person."""
        n = Notification(
            person_id=person_id,
            remark_id=remark_id,
            type=type,
            title=title[:200],
            message=message,
        )
        self.db.add(n)
        self.db.flush()
        return n

    def deliver(self, requests: Iterable[NotificationRequest]) -> int:
        """Persist notification requests issued after an already-committed update.

        Each request is committed on its own. A failure is logged, counted and
        rolled back without being raised, so it never affects the update that
        produced it. Returns the number of notifications stored.
        """
        delivered = 0
        for request in requests:
            try:
                self.create(
                    person_id=request.person_id,
                    type=request.type,
                    title=request.title,
                    message=request.message,
                    remark_id=request.remark_id,
                )
                self.db.commit()
                delivered += 1
            except Exception:
                self.db.rollback()
                NOTIFICATION_FAILURES.inc()
                logger.exception(
                    "Failed to create %s notification for remark %s",
                    request.type.value,
                    request.remark_id,
                )
        return delivered

    def get_unread_count(self, person_id: UUID) -> int:
        stmt = select(func.count(Notification.notification_id)).where(
            Notification.person_id == person_id,
            Notification.is_read.is_(False),
        )
        return self.db.scalar(stmt) or 0

    def get_recent(
        self,
        person_id: UUID,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Notification]:
        stmt = (
            select(Notification)
            .where(Notification.person_id == person_id)
            .order_by(Notification.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(self.db.scalars(stmt).all())

    def get_api_payload(self, person_id: UUID, limit: int = 50, offset: int = 0) -> dict:
        return {
            "unread_count": self.get_unread_count(person_id),
            "notifications": self.get_recent(person_id, limit=limit, offset=offset),
        }

    def mark_read(self, notification_id: UUID, person_id: UUID) -> Notification:
        """Mark a single notification as read. Only the recipient may do so."""
        n = self.db.get(Notification, notification_id)
        if not n or n.person_id != person_id:
            raise NotificationNotFoundError(notification_id)
        n.is_read = True
        self.db.flush()
        return n

    def mark_all_read(self, person_id: UUID) -> int:
        stmt = (
            update(Notification)
            .where(
                Notification.person_id == person_id,
                Notification.is_read.is_(False),
            )
            .values(is_read=True)
        )
        result = self.db.execute(stmt)
        self.db.flush()
        return result.rowcount  # type: ignore[return-value]
