import asyncio
import os
import uuid
from datetime import UTC, datetime, timedelta

# Configure the app for tests BEFORE any app imports
os.environ["TESTING"] = "true"
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["JWT_ALGORITHM"] = "HS256"
os.environ["ARCHIVE_AFTER_DAYS"] = "30"
os.environ["DELETE_AFTER_DAYS"] = "365"
os.environ.pop("ADMIN_EMAIL", None)

import fastapi.dependencies.utils as fastapi_deps_utils
import fastapi.routing as fastapi_routing
import httpx
import jwt
import pytest
import starlette.concurrency as starlette_concurrency
import starlette.routing as starlette_routing
from sqlalchemy.orm import sessionmaker

from app.db import Base, get_engine
from app.models.notification import Notification
from app.models.person import Person, PersonRole
from app.models.remark import Remark, RemarkCategory, RemarkStatus


async def _patched_run_in_threadpool(func, *args, **kwargs):
    """Run inline in tests to avoid cross-thread sqlite/session deadlocks."""
    return func(*args, **kwargs)


starlette_concurrency.run_in_threadpool = _patched_run_in_threadpool
starlette_routing.run_in_threadpool = _patched_run_in_threadpool
fastapi_routing.run_in_threadpool = _patched_run_in_threadpool
fastapi_deps_utils.run_in_threadpool = _patched_run_in_threadpool


class SyncASGIClient:
    def __init__(self, app):
        self._app = app

    async def _request(self, method: str, url: str, **kwargs):
        async with httpx.AsyncClient(
            transport=httpx.ASGITransport(app=self._app, raise_app_exceptions=False),
            base_url="http://testserver",
        ) as client:
            return await client.request(method, url, **kwargs)

    def request(self, method: str, url: str, **kwargs):
        return asyncio.run(self._request(method, url, **kwargs))

    def get(self, url: str, **kwargs):
        return self.request("GET", url, **kwargs)

    def post(self, url: str, **kwargs):
        return self.request("POST", url, **kwargs)

    def put(self, url: str, **kwargs):
        return self.request("PUT", url, **kwargs)

    def delete(self, url: str, **kwargs):
        return self.request("DELETE", url, **kwargs)


_test_engine = get_engine()

# Create all tables
Base.metadata.create_all(_test_engine)


@pytest.fixture(scope="session")
def engine():
    return _test_engine


@pytest.fixture()
def db_session(engine):
    Session = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    session = Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def _clean_tables(engine):
    """Start every test from empty remark/notification tables."""
    with sessionmaker(bind=engine)() as session:
        session.query(Notification).delete()
        session.query(Remark).delete()
        session.commit()
    yield


def _unique_email() -> str:
    return f"test-{uuid.uuid4().hex}@example.com"


@pytest.fixture()
def person(db_session):
    person = Person(
        name="Test Citizen",
        email=_unique_email(),
        phone="0600000000",
        role=PersonRole.citizen,
    )
    db_session.add(person)
    db_session.commit()
    db_session.refresh(person)
    return person


@pytest.fixture()
def admin_person(db_session):
    person = Person(name="Admin User", email=_unique_email(), role=PersonRole.admin)
    db_session.add(person)
    db_session.commit()
    db_session.refresh(person)
    return person


@pytest.fixture()
def make_remark(db_session):
    """Factory for remarks with explicit (possibly backdated) timestamps."""

    def _make(
        *,
        person_id: uuid.UUID | None = None,
        status: RemarkStatus = RemarkStatus.pending,
        updated_days_ago: float = 0,
        archived_days_ago: float | None = None,
        title: str = "Lampadaire en panne",
        image_url: str | None = None,
    ) -> Remark:
        now = datetime.now(UTC)
        remark = Remark(
            person_id=person_id,
            category=RemarkCategory.street_lighting,
            title=title,
            description="Le lampadaire de la rue principale ne s'allume plus.",
            image_url=image_url,
            status=status,
            created_at=now - timedelta(days=max(updated_days_ago, 0) + 1),
            updated_at=now - timedelta(days=updated_days_ago),
        )
        if archived_days_ago is not None:
            remark.archived = True
            remark.archived_at = now - timedelta(days=archived_days_ago)
        db_session.add(remark)
        db_session.commit()
        db_session.refresh(remark)
        return remark

    return _make


# ============ FastAPI Test Client Fixtures ============


@pytest.fixture()
def client(db_session):
    """Create a test client sharing the test database session."""
    from app.api.deps import get_db
    from app.main import app

    def override_get_db():
        return db_session

    app.dependency_overrides[get_db] = override_get_db
    test_client = SyncASGIClient(app)
    try:
        yield test_client
    finally:
        app.dependency_overrides.clear()


def _create_access_token(person_id: str, expires_in: timedelta = timedelta(minutes=15)) -> str:
    """Create a JWT access token for testing."""
    now = datetime.now(UTC)
    payload = {
        "sub": person_id,
        "typ": "access",
        "exp": int((now + expires_in).timestamp()),
        "iat": int(now.timestamp()),
    }
    return str(jwt.encode(payload, os.environ["JWT_SECRET"], algorithm=os.environ["JWT_ALGORITHM"]))


@pytest.fixture()
def auth_headers(person):
    return {"Authorization": f"Bearer {_create_access_token(str(person.id))}"}


@pytest.fixture()
def admin_headers(admin_person):
    return {"Authorization": f"Bearer {_create_access_token(str(admin_person.id))}"}
