"""add people, remarks and notifications

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ENUM, UUID

from alembic import op

revision = "a1b2c3d4e5f6"
down_revision = None
branch_labels = None
depends_on = None

_PERSON_ROLES = ("citizen", "admin")
_CATEGORIES = (
    "help_for_people",
    "traffic_parking",
    "culture_events",
    "water_sanitation",
    "school",
    "street_lighting",
    "green_spaces",
    "cleanliness",
    "roadworks",
    "other",
)
_STATUSES = ("pending", "in_progress", "completed", "rejected")
_PRIORITIES = ("low", "medium", "high", "urgent")
_NOTIFICATION_TYPES = ("status_change", "new_remark", "admin_note")


def upgrade() -> None:
    bind = op.get_bind()

    # Ensure enum types exist before creating tables.
    for values, name in (
        (_PERSON_ROLES, "personrole"),
        (_CATEGORIES, "remarkcategory"),
        (_STATUSES, "remarkstatus"),
        (_PRIORITIES, "remarkpriority"),
        (_NOTIFICATION_TYPES, "notificationtype"),
    ):
        ENUM(*values, name=name).create(bind, checkfirst=True)

    op.create_table(
        "people",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(160), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("phone", sa.String(40), nullable=True),
        sa.Column(
            "role",
            ENUM(*_PERSON_ROLES, name="personrole", create_type=False),
            nullable=False,
            server_default="citizen",
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "remarks",
        sa.Column("remark_id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "person_id",
            UUID(as_uuid=True),
            sa.ForeignKey("people.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("contact_name", sa.String(160), nullable=True),
        sa.Column("contact_email", sa.String(255), nullable=True),
        sa.Column("contact_phone", sa.String(40), nullable=True),
        sa.Column(
            "category",
            ENUM(*_CATEGORIES, name="remarkcategory", create_type=False),
            nullable=False,
        ),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("image_url", sa.String(1024), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column(
            "status",
            ENUM(*_STATUSES, name="remarkstatus", create_type=False),
            nullable=False,
            server_default="pending",
        ),
        sa.Column(
            "priority",
            ENUM(*_PRIORITIES, name="remarkpriority", create_type=False),
            nullable=True,
            server_default="medium",
        ),
        sa.Column("admin_notes", sa.Text(), nullable=False, server_default=""),
        sa.Column("assigned_to", sa.String(160), nullable=False, server_default=""),
        sa.Column("archived", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("archived_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint(
            "(archived AND archived_at IS NOT NULL) OR (NOT archived AND archived_at IS NULL)",
            name="ck_remarks_archived_at",
        ),
    )
    op.create_index("ix_remarks_category", "remarks", ["category"])
    op.create_index("ix_remarks_priority", "remarks", ["priority"])
    op.create_index("ix_remarks_person_status_created", "remarks", ["person_id", "status", "created_at"])
    op.create_index("ix_remarks_archived_status_updated", "remarks", ["archived", "status", "updated_at"])

    op.create_table(
        "notifications",
        sa.Column("notification_id", UUID(as_uuid=True), primary_key=True),
        sa.Column("person_id", UUID(as_uuid=True), sa.ForeignKey("people.id"), nullable=False),
        sa.Column(
            "remark_id",
            UUID(as_uuid=True),
            sa.ForeignKey("remarks.remark_id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "type",
            ENUM(*_NOTIFICATION_TYPES, name="notificationtype", create_type=False),
            nullable=False,
        ),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_notifications_person_id", "notifications", ["person_id"])
    op.create_index("ix_notifications_remark_id", "notifications", ["remark_id"])
    op.create_index("ix_notifications_created_at", "notifications", ["created_at"])
    op.create_index("ix_notifications_is_read", "notifications", ["is_read"])


def downgrade() -> None:
    op.drop_index("ix_notifications_is_read")
    op.drop_index("ix_notifications_created_at")
    op.drop_index("ix_notifications_remark_id")
    op.drop_index("ix_notifications_person_id")
    op.drop_table("notifications")
    op.drop_index("ix_remarks_archived_status_updated")
    op.drop_index("ix_remarks_person_status_created")
    op.drop_index("ix_remarks_priority")
    op.drop_index("ix_remarks_category")
    op.drop_table("remarks")
    op.drop_table("people")
    for name in ("notificationtype", "remarkpriority", "remarkstatus", "remarkcategory", "personrole"):
        sa.Enum(name=name).drop(op.get_bind(), checkfirst=True)
