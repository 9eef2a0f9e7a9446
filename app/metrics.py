from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "path", "status"],
)
REQUEST_ERRORS = Counter(
    "http_request_errors_total",
    "Total HTTP 5xx responses",
    ["method", "path", "status"],
)

JOB_DURATION = Histogram(
    "job_duration_seconds",
    "Background job duration",
    ["task", "status"],
)

REMARKS_ARCHIVED = Counter(
    "remarks_archived_total",
    "Remarks moved to the archive",
    ["trigger"],
)
REMARKS_DELETED = Counter(
    "remarks_deleted_total",
    "Archived remarks permanently deleted",
)
REMARK_STATUS_CHANGES = Counter(
    "remark_status_changes_total",
    "Remark status transitions",
    ["status"],
)
NOTIFICATION_FAILURES = Counter(
    "notification_failures_total",
    "Notifications that could not be persisted",
)


def observe_job(task_name: str, status: str, duration: float) -> None:
    JOB_DURATION.labels(task=task_name, status=status).observe(duration)
