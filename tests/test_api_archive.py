"""Tests for the archive API."""

from __future__ import annotations

import uuid

from app.models.remark import RemarkStatus


class TestArchiveEndpoints:
    def test_requires_admin(self, client, auth_headers):
        assert client.get("/archive/stats", headers=auth_headers).status_code == 403
        assert client.post("/archive/auto-archive").status_code == 401

    def test_archive_and_unarchive(self, client, admin_headers, make_remark):
        remark = make_remark(status=RemarkStatus.completed, updated_days_ago=31)

        resp = client.post(f"/archive/{remark.remark_id}/archive", headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json()["archived"] is True
        assert resp.json()["archived_at"] is not None

        resp = client.post(f"/api/v1/archive/{remark.remark_id}/unarchive", headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json()["archived"] is False
        assert resp.json()["archived_at"] is None

    def test_archive_ineligible(self, client, admin_headers, make_remark):
        remark = make_remark(status=RemarkStatus.completed, updated_days_ago=3)
        resp = client.post(f"/archive/{remark.remark_id}/archive", headers=admin_headers)
        assert resp.status_code == 400
        body = resp.json()
        assert body["code"] == "ineligible_transition"
        assert body["details"]["reason"] == "threshold"
        assert body["details"]["days_elapsed"] == 3

    def test_archive_unknown(self, client, admin_headers):
        resp = client.post(f"/archive/{uuid.uuid4()}/archive", headers=admin_headers)
        assert resp.status_code == 404

    def test_manual_sweep(self, client, admin_headers, make_remark):
        make_remark(status=RemarkStatus.completed, updated_days_ago=40)
        make_remark(status=RemarkStatus.rejected, updated_days_ago=31)
        make_remark(status=RemarkStatus.in_progress, updated_days_ago=40)

        resp = client.post("/archive/auto-archive", headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json() == {"count": 2}

        resp = client.post("/archive/auto-archive", headers=admin_headers)
        assert resp.json() == {"count": 0}

    def test_list_archived_with_deletability(self, client, admin_headers, make_remark):
        old = make_remark(status=RemarkStatus.completed, updated_days_ago=500, archived_days_ago=366)
        recent = make_remark(status=RemarkStatus.rejected, updated_days_ago=60, archived_days_ago=10)
        make_remark(status=RemarkStatus.pending)

        resp = client.get("/archive/archived", headers=admin_headers)
        assert resp.status_code == 200
        rows = resp.json()
        assert [r["remark_id"] for r in rows] == [str(recent.remark_id), str(old.remark_id)]
        assert rows[0]["is_deletable"] is False
        assert rows[0]["days_since_archive"] == 10
        assert rows[1]["is_deletable"] is True
        assert rows[1]["days_since_archive"] == 366

    def test_stats(self, client, admin_headers, make_remark):
        make_remark(status=RemarkStatus.pending)
        make_remark(status=RemarkStatus.completed, updated_days_ago=31)
        make_remark(status=RemarkStatus.completed, updated_days_ago=400, archived_days_ago=370)

        resp = client.get("/archive/stats", headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json() == {"archived": 1, "active": 2, "archivable": 1, "deletable": 1}
