"""
Cross-tenant access must look exactly like a missing record: 404, never 403.
"""

import pytest


@pytest.fixture
def yellow_expense(client, owner_headers, draft_report):
    response = client.post(
        "/api/expenses",
        headers=owner_headers,
        json={"category": "fuel", "amount": 20, "report_id": draft_report["id"]},
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def yellow_deposit(client, owner_headers):
    response = client.post(
        "/api/deposits",
        headers=owner_headers,
        json={
            "amount": 100,
            "deposit_date": "2026-03-09",
            "period_start": "2026-03-02",
            "period_end": "2026-03-08",
        },
    )
    assert response.status_code == 201
    return response.json()


class TestCrossTenantAccess:
    """Owner of Green Cabs probing Yellow Cabs data"""

    def test_taxi(self, client, foreign_owner_headers, taxi):
        url = f"/api/taxis/{taxi.id}"

        assert client.get(url, headers=foreign_owner_headers).status_code == 404
        assert client.put(url, headers=foreign_owner_headers, json={"color": "red"}).status_code == 404
        assert client.delete(url, headers=foreign_owner_headers).status_code == 404

    def test_report(self, client, foreign_owner_headers, submitted_report):
        url = f"/api/reports/{submitted_report['id']}"

        assert client.get(url, headers=foreign_owner_headers).status_code == 404
        assert client.put(url, headers=foreign_owner_headers, json={"notes": "x"}).status_code == 404
        assert client.post(f"{url}/approve", headers=foreign_owner_headers).status_code == 404
        assert client.post(f"{url}/reject", headers=foreign_owner_headers).status_code == 404
        assert client.delete(url, headers=foreign_owner_headers).status_code == 404

    def test_expense(self, client, foreign_owner_headers, yellow_expense):
        url = f"/api/expenses/{yellow_expense['id']}"

        assert client.get(url, headers=foreign_owner_headers).status_code == 404
        assert client.put(url, headers=foreign_owner_headers, json={"amount": 1}).status_code == 404
        assert client.delete(url, headers=foreign_owner_headers).status_code == 404

    def test_deposit(self, client, foreign_owner_headers, yellow_deposit):
        url = f"/api/deposits/{yellow_deposit['id']}"

        assert client.get(url, headers=foreign_owner_headers).status_code == 404
        assert client.put(url, headers=foreign_owner_headers, json={"notes": "x"}).status_code == 404
        assert client.delete(url, headers=foreign_owner_headers).status_code == 404

    def test_lists_are_tenant_scoped(
        self, client, foreign_owner_headers, taxi, draft_report, yellow_expense, yellow_deposit
    ):
        for path in ["/api/taxis", "/api/reports", "/api/expenses", "/api/deposits"]:
            response = client.get(path, headers=foreign_owner_headers)
            assert response.status_code == 200
            assert response.json()["total"] == 0

    def test_data_untouched_after_probe(
        self, client, owner_headers, foreign_owner_headers, yellow_expense, draft_report
    ):
        client.put(
            f"/api/expenses/{yellow_expense['id']}", headers=foreign_owner_headers, json={"amount": 1}
        )
        client.delete(f"/api/reports/{draft_report['id']}", headers=foreign_owner_headers)

        report = client.get(f"/api/reports/{draft_report['id']}", headers=owner_headers).json()
        assert report["total_expenses"] == 20.0

    def test_tenant_admin_is_still_scoped(self, client, admin_headers, foreign_taxi):
        """Admin mask grants every bit, tenant data is still filtered by the admin's tenant"""
        assert client.get(f"/api/taxis/{foreign_taxi.id}", headers=admin_headers).status_code == 404
