from app.models.notification import Notification, NotificationType  # noqa: F401
from app.models.person import Person, PersonRole  # noqa: F401
from app.models.remark import (  # noqa: F401
    CLOSED_STATUSES,
    Remark,
    RemarkCategory,
    RemarkPriority,
    RemarkStatus,
)
