"""Tests for NotificationService."""

from __future__ import annotations

import uuid
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from app.models.notification import Notification, NotificationType
from app.models.remark import RemarkStatus
from app.schemas.remarks import RemarkAdminUpdate
from app.services.errors import NotificationNotFoundError
from app.services.notification_service import NotificationService
from app.services.remark_lifecycle import NotificationRequest, RemarkLifecycleService


@pytest.fixture()
def svc(db_session):
    return NotificationService(db_session)


@pytest.fixture()
def person_id(person):
    return person.id


def _request(person_id, remark_id, message="Votre remarque est maintenant : terminée"):
    return NotificationRequest(
        person_id=person_id,
        remark_id=remark_id,
        type=NotificationType.status_change,
        title="Changement de statut",
        message=message,
    )


class TestCreate:
    def test_create(self, svc, person_id, db_session):
        n = svc.create(person_id, NotificationType.status_change, "Changement de statut", "msg")
        db_session.commit()
        assert n.notification_id is not None
        assert n.person_id == person_id
        assert n.type == NotificationType.status_change
        assert n.is_read is False
        assert n.remark_id is None

    def test_create_truncates_long_title(self, svc, person_id, db_session):
        n = svc.create(person_id, NotificationType.admin_note, "A" * 300, "msg")
        db_session.commit()
        assert len(n.title) == 200


class TestDeliver:
    def test_delivers_requests(self, svc, person_id, make_remark, db_session):
        remark = make_remark(person_id=person_id)
        assert svc.deliver([_request(person_id, remark.remark_id)]) == 1

        stored = db_session.query(Notification).filter(Notification.remark_id == remark.remark_id).all()
        assert len(stored) == 1
        assert stored[0].person_id == person_id

    def test_empty(self, svc):
        assert svc.deliver([]) == 0

    def test_failure_is_swallowed_and_update_survives(self, person_id, make_remark, db_session):
        remark = make_remark(person_id=person_id)
        result = RemarkLifecycleService(db_session).apply_update(
            remark.remark_id, RemarkAdminUpdate(status=RemarkStatus.completed)
        )
        db_session.commit()

        svc = NotificationService(db_session)
        with patch.object(NotificationService, "create", side_effect=OperationalError("INSERT", {}, Exception("down"))):
            delivered = svc.deliver(result.notifications)

        assert delivered == 0
        db_session.refresh(remark)
        assert remark.status == RemarkStatus.completed
        assert db_session.query(Notification).count() == 0

    def test_one_failure_does_not_block_the_rest(self, svc, person_id, make_remark):
        first = make_remark(person_id=person_id)
        second = make_remark(person_id=person_id)
        original = NotificationService.create
        calls = {"n": 0}

        def flaky(self, *args, **kwargs):
            calls["n"] += 1
            if calls["n"] == 1:
                raise RuntimeError("boom")
            return original(self, *args, **kwargs)

        with patch.object(NotificationService, "create", flaky):
            delivered = svc.deliver(
                [_request(person_id, first.remark_id), _request(person_id, second.remark_id)]
            )
        assert delivered == 1


class TestReadState:
    def test_unread_count_and_recent(self, svc, person_id, db_session):
        for i in range(3):
            svc.create(person_id, NotificationType.status_change, f"T{i}", "msg")
        db_session.commit()

        assert svc.get_unread_count(person_id) == 3
        assert len(svc.get_recent(person_id, limit=2)) == 2

    def test_other_people_are_isolated(self, svc, person_id, admin_person, db_session):
        svc.create(admin_person.id, NotificationType.status_change, "Other", "msg")
        db_session.commit()
        assert svc.get_unread_count(person_id) == 0
        assert svc.get_recent(person_id) == []

    def test_mark_read(self, svc, person_id, db_session):
        n = svc.create(person_id, NotificationType.status_change, "T", "msg")
        db_session.commit()
        svc.mark_read(n.notification_id, person_id)
        db_session.commit()
        assert svc.get_unread_count(person_id) == 0

    def test_mark_read_rejects_other_recipient(self, svc, person_id, admin_person, db_session):
        n = svc.create(admin_person.id, NotificationType.status_change, "T", "msg")
        db_session.commit()
        with pytest.raises(NotificationNotFoundError):
            svc.mark_read(n.notification_id, person_id)

    def test_mark_read_unknown(self, svc, person_id):
        with pytest.raises(NotificationNotFoundError):
            svc.mark_read(uuid.uuid4(), person_id)

    def test_mark_all_read(self, svc, person_id, db_session):
        for i in range(2):
            svc.create(person_id, NotificationType.status_change, f"T{i}", "msg")
        db_session.commit()
        assert svc.mark_all_read(person_id) == 2
        db_session.commit()
        assert svc.get_unread_count(person_id) == 0
