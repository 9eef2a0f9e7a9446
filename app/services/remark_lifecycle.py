"""
Remark Lifecycle Service — status transitions, archival and deletion policy.

Status moves freely between the four values; entering a closed status
(completed or rejected) starts the archival clock through ``updated_at``.
Closed remarks untouched for ``archive_after_days`` may be archived, either
one at a time or by the daily sweep. Remarks archived for
``delete_after_days`` may be permanently deleted.

Status changes on remarks with a submitter produce a notification request.
The request is returned to the caller rather than persisted here, so that
the update commits first and notification delivery
(``NotificationService.deliver``) can fail without undoing it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from app.config import settings
from app.metrics import REMARK_STATUS_CHANGES, REMARKS_ARCHIVED, REMARKS_DELETED
from app.models.notification import Notification, NotificationType
from app.models.remark import CLOSED_STATUSES, Remark, RemarkStatus
from app.schemas.remarks import RemarkAdminUpdate
from app.services.common import make_aware
from app.services.errors import IneligibleTransitionError, RemarkNotFoundError

logger = logging.getLogger(__name__)

STATUS_LABELS = {
    RemarkStatus.pending: "en attente",
    RemarkStatus.in_progress: "en cours de traitement",
    RemarkStatus.completed: "terminée",
    RemarkStatus.rejected: "rejetée",
}

STATUS_CHANGE_TITLE = "Changement de statut"

_SECONDS_PER_DAY = 86400


@dataclass(frozen=True)
class NotificationRequest:
    person_id: UUID
    remark_id: UUID
    type: NotificationType
    title: str
    message: str


@dataclass
class UpdateResult:
    remark: Remark
    notifications: list[NotificationRequest] = field(default_factory=list)
    status_changed: bool = False


@dataclass(frozen=True)
class DeletionResult:
    remark_id: UUID
    # Photo reference the storage layer may now release.
    release_asset: str | None


def _whole_days(delta: timedelta) -> int:
    return max(int(delta.total_seconds() // _SECONDS_PER_DAY), 0)


def status_change_message(title: str, status: RemarkStatus) -> str:
    return f'Votre remarque "{title}" est maintenant : {STATUS_LABELS[status]}'


class RemarkLifecycleService:
    def __init__(
        self,
        db: Session,
        archive_after_days: int | None = None,
        delete_after_days: int | None = None,
    ):
        self.db = db
        if archive_after_days is None:
            archive_after_days = settings.archive_after_days
        if delete_after_days is None:
            delete_after_days = settings.delete_after_days
        self.archive_after_days = archive_after_days
        self.delete_after_days = delete_after_days
        self.archive_after = timedelta(days=archive_after_days)
        self.delete_after = timedelta(days=delete_after_days)

    def _get_remark_for_update(self, remark_id: UUID) -> Remark:
        stmt = select(Remark).where(Remark.remark_id == remark_id).with_for_update()
        remark = self.db.scalar(stmt)
        if not remark:
            raise RemarkNotFoundError(remark_id)
        return remark

    # ──────────────────────────── Status ────────────────────────────

    def apply_update(self, remark_id: UUID, patch: RemarkAdminUpdate) -> UpdateResult:
        """Apply an administrator patch; fields missing from the patch are untouched."""
        remark = self._get_remark_for_update(remark_id)
        data = patch.model_dump(exclude_unset=True)
        result = UpdateResult(remark=remark)

        if "priority" in data:
            remark.priority = data["priority"]
        if "admin_notes" in data:
            remark.admin_notes = data["admin_notes"] or ""
        if "assigned_to" in data:
            remark.assigned_to = data["assigned_to"] or ""

        new_status = data.get("status")
        if new_status is not None and new_status != remark.status:
            old_status = remark.status
            now = datetime.now(UTC)
            remark.status = new_status
            remark.updated_at = now
            remark.resolved_at = now if new_status in CLOSED_STATUSES else None
            result.status_changed = True
            REMARK_STATUS_CHANGES.labels(status=new_status.value).inc()
            logger.info("Remark %s status %s -> %s", remark.remark_id, old_status.value, new_status.value)

            if remark.person_id is not None:
                result.notifications.append(
                    NotificationRequest(
                        person_id=remark.person_id,
                        remark_id=remark.remark_id,
                        type=NotificationType.status_change,
                        title=STATUS_CHANGE_TITLE,
                        message=status_change_message(remark.title, new_status),
                    )
                )
            else:
                logger.info("Remark %s is anonymous, no notification", remark.remark_id)

        self.db.flush()
        return result

    # ──────────────────────────── Archival ──────────────────────────

    def days_since_update(self, remark: Remark, now: datetime | None = None) -> int:
        now = now or datetime.now(UTC)
        updated_at = make_aware(remark.updated_at)
        if updated_at is None:
            return 0
        return _whole_days(now - updated_at)

    def archive_ineligibility(
        self, remark: Remark, now: datetime | None = None
    ) -> IneligibleTransitionError | None:
        """Return the reason ``remark`` cannot be archived, or None if it can."""
        now = now or datetime.now(UTC)
        status = remark.status.value if remark.status else None
        if remark.archived:
            return IneligibleTransitionError(
                "Remark is already archived",
                reason="already_archived",
                status=status,
                required_days=self.archive_after_days,
            )
        if remark.status not in CLOSED_STATUSES:
            return IneligibleTransitionError(
                "Only completed or rejected remarks can be archived",
                reason="status",
                status=status,
                days_elapsed=self.days_since_update(remark, now),
                required_days=self.archive_after_days,
            )
        updated_at = make_aware(remark.updated_at)
        if updated_at is None or now - updated_at < self.archive_after:
            return IneligibleTransitionError(
                f"Remark must be inactive for {self.archive_after_days} days before archiving",
                reason="threshold",
                status=status,
                days_elapsed=self.days_since_update(remark, now),
                required_days=self.archive_after_days,
            )
        return None

    def is_archivable(self, remark: Remark, now: datetime | None = None) -> bool:
        return self.archive_ineligibility(remark, now) is None

    def archive(self, remark_id: UUID, now: datetime | None = None) -> Remark:
        """Archive a single eligible remark."""
        now = now or datetime.now(UTC)
        remark = self._get_remark_for_update(remark_id)
        error = self.archive_ineligibility(remark, now)
        if error is not None:
            raise error
        remark.archived = True
        remark.archived_at = now
        self.db.flush()
        REMARKS_ARCHIVED.labels(trigger="manual").inc()
        logger.info("Archived remark %s", remark.remark_id)
        return remark

    def unarchive(self, remark_id: UUID) -> Remark:
        """Return a remark to the active set. Always permitted."""
        remark = self._get_remark_for_update(remark_id)
        remark.archived = False
        remark.archived_at = None
        self.db.flush()
        logger.info("Unarchived remark %s", remark.remark_id)
        return remark

    def auto_archive_sweep(self, now: datetime | None = None, trigger: str = "scheduled") -> int:
        """Archive every eligible remark in one conditional UPDATE.

        Already-archived rows fail the filter, so concurrent sweeps converge.
        """
        now = now or datetime.now(UTC)
        cutoff = now - self.archive_after
        self.db.flush()
        stmt = (
            update(Remark)
            .where(
                Remark.archived.is_(False),
                Remark.status.in_(list(CLOSED_STATUSES)),
                Remark.updated_at <= cutoff,
            )
            .values(archived=True, archived_at=now)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        count = result.rowcount or 0
        self.db.expire_all()
        if count:
            REMARKS_ARCHIVED.labels(trigger=trigger).inc(count)
        logger.info("Auto-archive sweep (%s) archived %d remarks", trigger, count)
        return count

    def list_archived(self) -> list[Remark]:
        stmt = select(Remark).where(Remark.archived.is_(True)).order_by(Remark.archived_at.desc())
        return list(self.db.scalars(stmt).all())

    # ──────────────────────────── Deletion ──────────────────────────

    def days_since_archive(self, remark: Remark, now: datetime | None = None) -> int:
        archived_at = make_aware(remark.archived_at)
        if not remark.archived or archived_at is None:
            return 0
        return _whole_days((now or datetime.now(UTC)) - archived_at)

    def is_deletable(self, remark: Remark, now: datetime | None = None) -> bool:
        archived_at = make_aware(remark.archived_at)
        if not remark.archived or archived_at is None:
            return False
        return (now or datetime.now(UTC)) - archived_at >= self.delete_after

    def delete(self, remark_id: UUID, now: datetime | None = None) -> DeletionResult:
        """Permanently remove a remark archived for long enough."""
        now = now or datetime.now(UTC)
        remark = self._get_remark_for_update(remark_id)
        if not remark.archived:
            raise IneligibleTransitionError(
                "Only archived remarks can be deleted",
                reason="not_archived",
                status=remark.status.value,
                days_elapsed=0,
                required_days=self.delete_after_days,
            )
        if not self.is_deletable(remark, now):
            days = self.days_since_archive(remark, now)
            raise IneligibleTransitionError(
                f"Remark archived {days} days ago, deletion allowed after {self.delete_after_days} days",
                reason="threshold",
                status=remark.status.value,
                days_elapsed=days,
                required_days=self.delete_after_days,
            )

        deleted = DeletionResult(remark_id=remark.remark_id, release_asset=remark.image_url)
        self.db.execute(
            update(Notification)
            .where(Notification.remark_id == remark.remark_id)
            .values(remark_id=None)
            .execution_options(synchronize_session=False)
        )
        self.db.delete(remark)
        self.db.flush()
        REMARKS_DELETED.inc()
        logger.info("Deleted remark %s", deleted.remark_id)
        return deleted

    # ──────────────────────────── Stats ─────────────────────────────

    def archive_stats(self, now: datetime | None = None) -> dict[str, int]:
        now = now or datetime.now(UTC)

        def _count(*criteria) -> int:
            stmt = select(func.count(Remark.remark_id)).where(*criteria)
            return self.db.scalar(stmt) or 0

        return {
            "archived": _count(Remark.archived.is_(True)),
            "active": _count(Remark.archived.is_(False)),
            "archivable": _count(
                Remark.archived.is_(False),
                Remark.status.in_(list(CLOSED_STATUSES)),
                Remark.updated_at <= now - self.archive_after,
            ),
            "deletable": _count(
                Remark.archived.is_(True),
                Remark.archived_at <= now - self.delete_after,
            ),
        }
