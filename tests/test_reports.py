import pytest
from datetime import date
from decimal import Decimal
from sqlalchemy import update

from app.core.exceptions import ConflictException
from app.models.request_context import RequestContext
from app.models.weekly_report import WeeklyReport
from app.schemas.report_schemas import ReportCreate, ReportUpdate
from app.services.report_service import ReportService


class TestReportCreation:
    """Tests for creating weekly reports"""

    def test_create_report_starts_as_draft(self, client, driver, draft_report, taxi):
        assert draft_report["status"] == "draft"
        assert draft_report["total_expenses"] == 0.0
        assert draft_report["earnings"] == 1200.00
        assert draft_report["driver_id"] == driver.id
        assert draft_report["taxi_id"] == taxi.id
        assert draft_report["submitted_at"] is None
        assert draft_report["version"] == 1

    def test_create_report_taxi_of_other_tenant(self, client, driver_headers, foreign_taxi):
        """Reports can only reference taxis of the caller's tenant"""
        response = client.post(
            "/api/reports",
            headers=driver_headers,
            json={"taxi_id": foreign_taxi.id, "week_start_date": "2026-03-02", "earnings": 100},
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Taxi not found"

    def test_create_report_requires_add_reports(self, client, mechanic_headers, taxi):
        response = client.post(
            "/api/reports",
            headers=mechanic_headers,
            json={"taxi_id": taxi.id, "week_start_date": "2026-03-02", "earnings": 100},
        )

        assert response.status_code == 403

    def test_create_report_negative_earnings(self, client, driver_headers, taxi):
        response = client.post(
            "/api/reports",
            headers=driver_headers,
            json={"taxi_id": taxi.id, "week_start_date": "2026-03-02", "earnings": -5},
        )

        assert response.status_code == 422

    def test_create_report_malformed_date(self, client, driver_headers, taxi):
        response = client.post(
            "/api/reports",
            headers=driver_headers,
            json={"taxi_id": taxi.id, "week_start_date": "02/03/2026", "earnings": 100},
        )

        assert response.status_code == 422

    def test_tenant_comes_from_token_not_payload(
        self, client, driver_headers, taxi, tenant, other_tenant
    ):
        response = client.post(
            "/api/reports",
            headers=driver_headers,
            json={
                "taxi_id": taxi.id,
                "week_start_date": "2026-03-02",
                "earnings": 100,
                "tenant_id": other_tenant.id,
            },
        )

        assert response.status_code == 201
        assert response.json()["tenant_id"] == tenant.id


class TestReportListing:
    """Tests for listing and fetching reports"""

    def _create(self, client, headers, taxi, week, earnings=100):
        response = client.post(
            "/api/reports",
            headers=headers,
            json={"taxi_id": taxi.id, "week_start_date": week, "earnings": earnings},
        )
        assert response.status_code == 201
        return response.json()

    def test_driver_sees_only_own_reports(
        self, client, driver_headers, other_driver_headers, taxi
    ):
        mine = self._create(client, driver_headers, taxi, "2026-03-02")
        self._create(client, other_driver_headers, taxi, "2026-03-09")

        response = client.get("/api/reports", headers=driver_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["reports"][0]["id"] == mine["id"]

    def test_owner_sees_all_newest_week_first(
        self, client, driver_headers, other_driver_headers, owner_headers, taxi
    ):
        self._create(client, driver_headers, taxi, "2026-03-02")
        self._create(client, other_driver_headers, taxi, "2026-03-16")
        self._create(client, driver_headers, taxi, "2026-03-09")

        response = client.get("/api/reports", headers=owner_headers)

        weeks = [r["week_start_date"] for r in response.json()["reports"]]
        assert weeks == ["2026-03-16", "2026-03-09", "2026-03-02"]

    def test_mechanic_can_view_reports(self, client, mechanic_headers, draft_report):
        response = client.get(f"/api/reports/{draft_report['id']}", headers=mechanic_headers)

        assert response.status_code == 200

    def test_get_missing_report(self, client, owner_headers):
        response = client.get("/api/reports/999", headers=owner_headers)

        assert response.status_code == 404


class TestReportLifecycle:
    """draft -> submitted -> approved | rejected"""

    def test_full_approval_flow(self, client, driver, owner, driver_headers, owner_headers, taxi):
        """Driver creates and submits, owner approves, second approve fails"""
        created = client.post(
            "/api/reports",
            headers=driver_headers,
            json={"taxi_id": taxi.id, "week_start_date": "2026-03-02", "earnings": 500},
        ).json()
        assert created["status"] == "draft"
        assert created["total_expenses"] == 0.0

        submitted = client.post(f"/api/reports/{created['id']}/submit", headers=driver_headers)
        assert submitted.status_code == 200
        assert submitted.json()["status"] == "submitted"
        assert submitted.json()["submitted_at"] is not None

        approved = client.post(f"/api/reports/{created['id']}/approve", headers=owner_headers)
        assert approved.status_code == 200
        assert approved.json()["status"] == "approved"
        assert approved.json()["approved_by_id"] == owner.id
        assert approved.json()["approved_at"] is not None

        again = client.post(f"/api/reports/{created['id']}/approve", headers=owner_headers)
        assert again.status_code == 409
        assert again.json()["detail"] == "Report must be submitted first"

    def test_submit_twice_fails(self, client, driver_headers, submitted_report):
        response = client.post(
            f"/api/reports/{submitted_report['id']}/submit", headers=driver_headers
        )

        assert response.status_code == 409
        assert response.json()["detail"] == "Report already submitted"

    def test_only_own_driver_can_submit(self, client, other_driver_headers, draft_report):
        response = client.post(
            f"/api/reports/{draft_report['id']}/submit", headers=other_driver_headers
        )

        assert response.status_code == 403

    def test_owner_cannot_submit_drivers_report(self, client, owner_headers, draft_report):
        response = client.post(f"/api/reports/{draft_report['id']}/submit", headers=owner_headers)

        assert response.status_code == 403

    def test_approve_draft_fails(self, client, owner_headers, draft_report):
        response = client.post(f"/api/reports/{draft_report['id']}/approve", headers=owner_headers)

        assert response.status_code == 409
        assert response.json()["detail"] == "Report must be submitted first"

    def test_driver_cannot_approve(self, client, driver_headers, submitted_report):
        response = client.post(
            f"/api/reports/{submitted_report['id']}/approve", headers=driver_headers
        )

        assert response.status_code == 403

    def test_manager_cannot_approve(self, client, manager_headers, submitted_report):
        """Approval needs the full owner mask, not just report bits"""
        response = client.post(
            f"/api/reports/{submitted_report['id']}/approve", headers=manager_headers
        )

        assert response.status_code == 403

    def test_admin_can_approve(self, client, admin, admin_headers, submitted_report):
        response = client.post(
            f"/api/reports/{submitted_report['id']}/approve", headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["approved_by_id"] == admin.id

    def test_reject_submitted(self, client, owner_headers, submitted_report):
        response = client.post(
            f"/api/reports/{submitted_report['id']}/reject", headers=owner_headers
        )

        assert response.status_code == 200
        assert response.json()["status"] == "rejected"

    def test_reject_requires_owner(self, client, driver_headers, submitted_report):
        response = client.post(
            f"/api/reports/{submitted_report['id']}/reject", headers=driver_headers
        )

        assert response.status_code == 403

    def test_reject_draft_fails(self, client, owner_headers, draft_report):
        response = client.post(f"/api/reports/{draft_report['id']}/reject", headers=owner_headers)

        assert response.status_code == 409

    def test_rejected_is_terminal(self, client, driver_headers, owner_headers, submitted_report):
        report_id = submitted_report["id"]
        client.post(f"/api/reports/{report_id}/reject", headers=owner_headers)

        assert client.post(f"/api/reports/{report_id}/submit", headers=driver_headers).status_code == 409
        assert client.post(f"/api/reports/{report_id}/approve", headers=owner_headers).status_code == 409

    def test_every_transition_bumps_version(self, client, owner_headers, submitted_report):
        assert submitted_report["version"] == 2

        approved = client.post(
            f"/api/reports/{submitted_report['id']}/approve", headers=owner_headers
        )

        assert approved.json()["version"] == 3


class TestReportUpdate:
    """Edit rules depend on who is editing and the report status"""

    def test_driver_updates_own_draft(self, client, driver_headers, draft_report):
        response = client.put(
            f"/api/reports/{draft_report['id']}",
            headers=driver_headers,
            json={"earnings": 1350.50, "notes": "Airport runs"},
        )

        assert response.status_code == 200
        assert response.json()["earnings"] == 1350.50
        assert response.json()["notes"] == "Airport runs"

    def test_driver_cannot_update_submitted(self, client, driver_headers, submitted_report):
        response = client.put(
            f"/api/reports/{submitted_report['id']}", headers=driver_headers, json={"earnings": 1}
        )

        assert response.status_code == 409
        assert response.json()["detail"] == "Can only edit draft reports"

    def test_driver_cannot_update_others_draft(self, client, other_driver_headers, draft_report):
        response = client.put(
            f"/api/reports/{draft_report['id']}", headers=other_driver_headers, json={"earnings": 1}
        )

        assert response.status_code == 403

    def test_owner_updates_submitted(self, client, owner_headers, submitted_report):
        response = client.put(
            f"/api/reports/{submitted_report['id']}", headers=owner_headers, json={"earnings": 990}
        )

        assert response.status_code == 200
        assert response.json()["earnings"] == 990
        assert response.json()["status"] == "submitted"

    def test_manager_updates_submitted(self, client, manager_headers, submitted_report):
        response = client.put(
            f"/api/reports/{submitted_report['id']}", headers=manager_headers, json={"notes": "ok"}
        )

        assert response.status_code == 200

    def test_owner_cannot_update_approved(self, client, owner_headers, submitted_report):
        client.post(f"/api/reports/{submitted_report['id']}/approve", headers=owner_headers)

        response = client.put(
            f"/api/reports/{submitted_report['id']}", headers=owner_headers, json={"earnings": 1}
        )

        assert response.status_code == 409
        assert response.json()["detail"] == "Cannot edit approved reports"


class TestReportDeletion:
    """Soft delete rules"""

    def test_driver_deletes_own_draft(self, client, driver_headers, draft_report):
        response = client.delete(f"/api/reports/{draft_report['id']}", headers=driver_headers)

        assert response.status_code == 204
        assert client.get(f"/api/reports/{draft_report['id']}", headers=driver_headers).status_code == 404

    def test_driver_cannot_delete_submitted(self, client, driver_headers, submitted_report):
        response = client.delete(f"/api/reports/{submitted_report['id']}", headers=driver_headers)

        assert response.status_code == 409

    def test_driver_cannot_delete_others_draft(self, client, other_driver_headers, draft_report):
        response = client.delete(f"/api/reports/{draft_report['id']}", headers=other_driver_headers)

        assert response.status_code == 403

    def test_manager_cannot_delete(self, client, manager_headers, draft_report):
        response = client.delete(f"/api/reports/{draft_report['id']}", headers=manager_headers)

        assert response.status_code == 403

    def test_owner_deletes_approved(self, client, owner_headers, submitted_report, db_session):
        client.post(f"/api/reports/{submitted_report['id']}/approve", headers=owner_headers)

        response = client.delete(f"/api/reports/{submitted_report['id']}", headers=owner_headers)

        assert response.status_code == 204
        # Row is kept, only stamped
        row = db_session.get(WeeklyReport, submitted_report["id"])
        assert row is not None
        assert row.deleted_at is not None


class TestReportConcurrency:
    """Optimistic concurrency on the version counter"""

    def test_stale_write_raises_conflict(self, db_session, driver, taxi, role_masks):
        context = RequestContext(user=driver, role_masks=role_masks)
        service = ReportService(db_session)
        report = service.create_report(
            ReportCreate(taxi_id=taxi.id, week_start_date=date(2026, 3, 2), earnings=Decimal("100")),
            context,
        )

        # Another writer bumps the version behind this session's back
        db_session.execute(
            update(WeeklyReport)
            .where(WeeklyReport.id == report.id)
            .values(version=WeeklyReport.version + 1)
            .execution_options(synchronize_session=False)
        )

        with pytest.raises(ConflictException):
            service.update_report(report.id, ReportUpdate(notes="late edit"), context)

    def test_conflict_maps_to_409(self, client, db_session, driver_headers, draft_report):
        stale = db_session.get(WeeklyReport, draft_report["id"])
        assert stale.version == 1

        db_session.execute(
            update(WeeklyReport)
            .where(WeeklyReport.id == draft_report["id"])
            .values(version=7)
            .execution_options(synchronize_session=False)
        )

        response = client.post(f"/api/reports/{draft_report['id']}/submit", headers=driver_headers)

        assert response.status_code == 409
