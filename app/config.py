import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, model_validator

load_dotenv()


_TRUTHY_VALUES = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: str = "") -> bool:
    return os.getenv(name, default).lower() in _TRUTHY_VALUES


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    database_url: str | None = os.getenv("DATABASE_URL")
    db_pool_size: int = int(os.getenv("DB_POOL_SIZE", "5"))
    db_max_overflow: int = int(os.getenv("DB_MAX_OVERFLOW", "10"))
    db_pool_timeout: int = int(os.getenv("DB_POOL_TIMEOUT", "30"))
    db_pool_recycle: int = int(os.getenv("DB_POOL_RECYCLE", "1800"))

    # Branding
    brand_name: str = os.getenv("BRAND_NAME", "Remarques Citoyennes")

    # Security
    jwt_secret: str | None = os.getenv("JWT_SECRET")
    jwt_algorithm: str = os.getenv("JWT_ALGORITHM", "HS256")

    # Bootstrap administrator
    admin_email: str | None = os.getenv("ADMIN_EMAIL") or None
    admin_name: str = os.getenv("ADMIN_NAME", "Administrateur")

    # Remark lifecycle
    archive_after_days: int = int(os.getenv("ARCHIVE_AFTER_DAYS", "30"))
    delete_after_days: int = int(os.getenv("DELETE_AFTER_DAYS", "365"))
    auto_archive_hour: int = int(os.getenv("AUTO_ARCHIVE_HOUR", "2"))
    auto_archive_minute: int = int(os.getenv("AUTO_ARCHIVE_MINUTE", "0"))

    # Celery
    celery_broker_url: str = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")
    celery_result_backend: str = os.getenv("CELERY_RESULT_BACKEND", "redis://localhost:6379/1")

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_json: bool = _env_bool("LOG_JSON")

    # Runtime flags
    testing: bool = _env_bool("TESTING")

    @model_validator(mode="after")
    def require_database_url_when_not_testing(self) -> "Settings":
        if not self.testing and not (self.database_url and self.database_url.strip()):
            raise ValueError("DATABASE_URL must be set when TESTING is false")
        return self

    @model_validator(mode="after")
    def require_positive_thresholds(self) -> "Settings":
        if self.archive_after_days < 1 or self.delete_after_days < 1:
            raise ValueError("ARCHIVE_AFTER_DAYS and DELETE_AFTER_DAYS must be >= 1")
        return self


settings = Settings()
