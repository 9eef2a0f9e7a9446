"""Domain errors raised by the remark services and mapped to HTTP in app.errors."""

from __future__ import annotations

from uuid import UUID


class RemarkNotFoundError(LookupError):
    def __init__(self, remark_id: UUID | str):
        super().__init__(f"Remark {remark_id} not found")
        self.remark_id = remark_id


class NotificationNotFoundError(LookupError):
    def __init__(self, notification_id: UUID | str):
        super().__init__(f"Notification {notification_id} not found")
        self.notification_id = notification_id


class IneligibleTransitionError(ValueError):
    """An archive or delete precondition is not met.

    ``reason`` is one of ``already_archived``, ``status``, ``threshold`` or
    ``not_archived``. ``days_elapsed`` is measured from ``updated_at`` for
    archival and from ``archived_at`` for deletion.
    """

    def __init__(
        self,
        message: str,
        *,
        reason: str,
        status: str | None = None,
        days_elapsed: int | None = None,
        required_days: int | None = None,
    ):
        super().__init__(message)
        self.reason = reason
        self.status = status
        self.days_elapsed = days_elapsed
        self.required_days = required_days

    def to_details(self) -> dict:
        return {
            "reason": self.reason,
            "status": self.status,
            "days_elapsed": self.days_elapsed,
            "required_days": self.required_days,
        }
