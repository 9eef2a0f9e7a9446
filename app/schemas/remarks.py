from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.models.remark import RemarkCategory, RemarkPriority, RemarkStatus


class RemarkCreate(BaseModel):
    category: RemarkCategory
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    image_url: str | None = Field(default=None, max_length=1024)
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    # Used only for anonymous submissions
    contact_name: str | None = Field(default=None, max_length=160)
    contact_email: EmailStr | None = None
    contact_phone: str | None = Field(default=None, max_length=40)


class RemarkAdminUpdate(BaseModel):
    status: RemarkStatus | None = None
    priority: RemarkPriority | None = None
    admin_notes: str | None = None
    assigned_to: str | None = Field(default=None, max_length=160)


class RemarkRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    remark_id: UUID
    person_id: UUID | None = None
    contact_name: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    category: RemarkCategory
    title: str
    description: str
    image_url: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    status: RemarkStatus
    priority: RemarkPriority | None = None
    admin_notes: str = ""
    assigned_to: str = ""
    archived: bool = False
    archived_at: datetime | None = None
    resolved_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RemarkAdminRead(RemarkRead):
    is_archivable: bool = False


class ArchivedRemarkRead(RemarkRead):
    is_deletable: bool = False
    days_since_archive: int = 0


class RemarkUpdateResponse(BaseModel):
    remark: RemarkRead
    status_changed: bool
    notifications_created: int


class RemarkDeleteResponse(BaseModel):
    remark_id: UUID
    deleted: bool = True
    release_asset: str | None = None


class ArchiveSweepResponse(BaseModel):
    count: int


class ArchiveStatsResponse(BaseModel):
    archived: int
    active: int
    archivable: int
    deletable: int
