from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from sqlalchemy import text
from starlette.responses import Response

from app.api.archive import router as archive_router
from app.api.deps import require_admin
from app.api.notifications import router as notifications_router
from app.api.remarks import router as remarks_router
from app.config import settings
from app.db import SessionLocal
from app.errors import register_error_handlers
from app.logging import configure_logging
from app.observability import ObservabilityMiddleware
from app.services.settings_seed import seed_admin


@asynccontextmanager
async def lifespan(app: FastAPI):
    db = SessionLocal()
    try:
        seed_admin(db, settings.admin_email, settings.admin_name)
        db.commit()
    finally:
        db.close()
    yield


app = FastAPI(title=f"{settings.brand_name} API", lifespan=lifespan)

configure_logging()
app.add_middleware(ObservabilityMiddleware)
register_error_handlers(app)


def _include_api_router(router, dependencies=None):
    app.include_router(router, dependencies=dependencies)
    app.include_router(router, prefix="/api/v1", dependencies=dependencies)


_include_api_router(remarks_router)
_include_api_router(archive_router)
_include_api_router(notifications_router)


@app.get("/")
def root():
    return {
        "name": f"{settings.brand_name} API",
        "status": "running",
        "endpoints": {
            "remarks": "/api/v1/remarks",
            "archive": "/api/v1/archive",
            "notifications": "/api/v1/notifications",
        },
    }


@app.get("/health")
def health_check():
    checks = {"db": False}

    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        checks["db"] = True
    except Exception:
        pass
    finally:
        db.close()

    all_ok = all(checks.values())
    return {
        "status": "ok" if all_ok else "degraded",
        "checks": checks,
    }


@app.get("/metrics", dependencies=[Depends(require_admin)])
def metrics():
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)
