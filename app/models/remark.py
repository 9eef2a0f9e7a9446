"""Remark model — citizen-submitted issue reports."""

import enum
import uuid
from datetime import UTC, datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, Enum, Float, ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db import Base


class RemarkCategory(str, enum.Enum):
    help_for_people = "help_for_people"
    traffic_parking = "traffic_parking"
    culture_events = "culture_events"
    water_sanitation = "water_sanitation"
    school = "school"
    street_lighting = "street_lighting"
    green_spaces = "green_spaces"
    cleanliness = "cleanliness"
    roadworks = "roadworks"
    other = "other"


class RemarkStatus(str, enum.Enum):
    pending = "pending"
    in_progress = "in_progress"
    completed = "completed"
    rejected = "rejected"


class RemarkPriority(str, enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"
    urgent = "urgent"


# Statuses that start the archival clock.
CLOSED_STATUSES = frozenset({RemarkStatus.completed, RemarkStatus.rejected})


class Remark(Base):
    __tablename__ = "remarks"
    __table_args__ = (
        Index("ix_remarks_person_status_created", "person_id", "status", "created_at"),
        Index("ix_remarks_archived_status_updated", "archived", "status", "updated_at"),
        CheckConstraint(
            "(archived AND archived_at IS NOT NULL) OR (NOT archived AND archived_at IS NULL)",
            name="ck_remarks_archived_at",
        ),
    )

    remark_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    person_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("people.id", ondelete="SET NULL"), nullable=True
    )
    # Contact details copied from the submitter at creation time
    contact_name: Mapped[str | None] = mapped_column(String(160))
    contact_email: Mapped[str | None] = mapped_column(String(255))
    contact_phone: Mapped[str | None] = mapped_column(String(40))

    category: Mapped[RemarkCategory] = mapped_column(Enum(RemarkCategory), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[str | None] = mapped_column(String(1024))
    latitude: Mapped[float | None] = mapped_column(Float)
    longitude: Mapped[float | None] = mapped_column(Float)

    status: Mapped[RemarkStatus] = mapped_column(Enum(RemarkStatus), default=RemarkStatus.pending)
    priority: Mapped[RemarkPriority | None] = mapped_column(
        Enum(RemarkPriority), default=RemarkPriority.medium, nullable=True, index=True
    )
    admin_notes: Mapped[str] = mapped_column(Text, default="")
    assigned_to: Mapped[str] = mapped_column(String(160), default="")

    # Archival
    archived: Mapped[bool] = mapped_column(Boolean, default=False)
    archived_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    person = relationship("Person")
