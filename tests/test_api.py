"""Tests for the HTTP API."""

from urllib.parse import quote
from uuid import uuid4

import httpx
import pytest

from site_ledger.api import create_app
from site_ledger.database import build_engine, build_session_factory


@pytest.fixture
async def client(session_factory, notifier):
    app = create_app(session_factory=session_factory, notifier=notifier)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def create_site(client, name="Site A") -> str:
    response = await client.post("/api/v1/sites", json={"name": name})
    assert response.status_code == 201
    return response.json()["site_id"]


async def add_worker(client, site_id, name, category) -> str:
    response = await client.post(
        f"/api/v1/sites/{site_id}/workers", json={"name": name, "category": category}
    )
    assert response.status_code == 201
    return response.json()["worker_id"]


class TestHealth:
    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["database"] == "healthy"

    async def test_ready_with_schema(self, client):
        response = await client.get("/ready")
        assert response.status_code == 200
        assert response.json() == {"status": "ready", "missing_tables": []}

    async def test_not_ready_without_schema(self):
        engine = build_engine("sqlite+aiosqlite:///:memory:")
        app = create_app(session_factory=build_session_factory(engine))
        transport = httpx.ASGITransport(app=app)
        try:
            async with httpx.AsyncClient(transport=transport, base_url="http://test") as bare:
                response = await bare.get("/ready")
        finally:
            await engine.dispose()

        assert response.status_code == 503
        body = response.json()
        assert body["status"] == "not_ready"
        assert "hajari_record" in body["missing_tables"]


class TestSitesAndWorkers:
    """Site and worker endpoints."""

    async def test_site_with_generated_code(self, client):
        response = await client.post(
            "/api/v1/sites", json={"name": "Site A", "generate_code": True}
        )
        body = response.json()
        assert response.status_code == 201
        assert len(body["site_code"]) == 6

        found = await client.get(f"/api/v1/sites/by-code/{body['site_code'].lower()}")
        assert found.json()["site_id"] == body["site_id"]

    async def test_site_details(self, client):
        response = await client.post(
            "/api/v1/sites",
            json={
                "name": "Site A",
                "site_type": "Bungalow",
                "start_date": "2025-01-10",
                "owner_name": "Patil",
                "contact": "9822000000",
            },
        )
        body = response.json()
        assert body["site_type"] == "Bungalow"
        assert body["owner_name"] == "Patil"
        assert body["end_date"] == ""

    async def test_missing_site_is_404(self, client):
        response = await client.get(f"/api/v1/sites/{uuid4()}")
        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    async def test_invalid_category_is_400(self, client):
        site_id = await create_site(client)
        response = await client.post(
            f"/api/v1/sites/{site_id}/workers", json={"name": "X", "category": "boss"}
        )
        assert response.status_code == 400
        assert response.json()["context"]["field"] == "category"

    async def test_update_and_delete_worker(self, client):
        site_id = await create_site(client)
        worker_id = await add_worker(client, site_id, "Ramesh", "karigar")

        updated = await client.patch(f"/api/v1/workers/{worker_id}", json={"village": "Pune"})
        assert updated.json()["village"] == "Pune"

        assert (await client.delete(f"/api/v1/workers/{worker_id}")).status_code == 204
        assert (await client.get(f"/api/v1/workers/{worker_id}")).status_code == 404


class TestLedgerFlow:
    """Submitting records and reading balances."""

    async def test_worker_balance(self, client, notifier):
        site_id = await create_site(client)
        worker_id = await add_worker(client, site_id, "Ramesh", "karigar")

        hajari = await client.post(
            f"/api/v1/sites/{site_id}/hajari",
            json={
                "entries": [
                    {"worker_id": worker_id, "amount": "500", "overtime": "50"},
                    {"worker_id": worker_id, "amount": 500},
                ]
            },
        )
        assert hajari.status_code == 201
        assert len(hajari.json()) == 2

        expense = await client.post(
            f"/api/v1/sites/{site_id}/expenses",
            json={"entries": [{"amount": 200, "worker_id": worker_id}]},
        )
        assert expense.status_code == 201

        payment = await client.post(
            f"/api/v1/sites/{site_id}/payments",
            json={"worker_id": worker_id, "amount": 600},
        )
        assert payment.status_code == 201

        totals = await client.get(f"/api/v1/sites/{site_id}/workers/{worker_id}/totals")
        assert totals.status_code == 200
        assert {k: float(v) for k, v in totals.json().items()} == {
            "total_hajari": 1050.0,
            "total_expense": 200.0,
            "total_paid": 600.0,
            "remaining": 250.0,
        }
        assert [title for title, _ in notifier.messages] == [
            "Hajari saved",
            "Expense added",
            "Payment recorded",
        ]

    async def test_negative_hajari_rejects_batch(self, client):
        site_id = await create_site(client)
        first = await add_worker(client, site_id, "Ramesh", "karigar")
        second = await add_worker(client, site_id, "Suresh", "mazdoor")

        response = await client.post(
            f"/api/v1/sites/{site_id}/hajari",
            json={
                "entries": [
                    {"worker_id": first, "amount": "500"},
                    {"worker_id": second, "amount": "-50"},
                ]
            },
        )

        assert response.status_code == 400
        assert response.json()["context"]["field"] == "amount"
        assert (await client.get(f"/api/v1/sites/{site_id}/hajari")).json() == []

    async def test_zero_payment_rejected(self, client):
        site_id = await create_site(client)
        worker_id = await add_worker(client, site_id, "Ramesh", "karigar")

        response = await client.post(
            f"/api/v1/sites/{site_id}/payments", json={"worker_id": worker_id, "amount": 0}
        )

        assert response.status_code == 400

    async def test_preview_total(self, client):
        a, b = str(uuid4()), str(uuid4())
        response = await client.post(
            "/api/v1/ledger/preview-total",
            json={
                "entries": [
                    {"worker_id": a, "amount": "500", "overtime": "50"},
                    {"worker_id": b, "amount": "400"},
                ],
                "selected_worker_ids": [a],
            },
        )
        assert float(response.json()["total"]) == 550.0

    async def test_site_summary_and_deleted_worker(self, client):
        site_id = await create_site(client)
        worker_id = await add_worker(client, site_id, "Ramesh", "karigar")
        await client.post(
            f"/api/v1/sites/{site_id}/hajari",
            json={"entries": [{"worker_id": worker_id, "amount": 700}]},
        )
        await client.delete(f"/api/v1/workers/{worker_id}")

        summaries = (await client.get(f"/api/v1/sites/{site_id}/ledger/workers")).json()
        assert summaries[0]["worker_name"] == "Ramesh"
        assert summaries[0]["is_active"] is False

        summary = (await client.get(f"/api/v1/sites/{site_id}/ledger/summary")).json()
        assert float(summary["totals"]["remaining"]) == 700.0


class TestMaterials:
    """Purchases, usage and remaining stock."""

    async def test_usage_and_stock(self, client, notifier):
        site_id = await create_site(client)
        created = await client.post(
            f"/api/v1/sites/{site_id}/materials",
            json={
                "name": "Cement",
                "quantity": "50",
                "unit": "bags",
                "rate_per_unit": "400",
                "amount_paid": "15000",
            },
        )
        assert created.status_code == 201
        material = created.json()
        assert float(material["cost"]) == 20000.0
        assert float(material["remaining_payment"]) == 5000.0

        usage = await client.post(
            f"/api/v1/materials/{material['material_id']}/usages",
            json={"quantity_used": "45", "note": "Slab"},
        )
        assert usage.status_code == 201

        stock = (await client.get(f"/api/v1/sites/{site_id}/materials/stock")).json()
        assert float(stock[0]["remaining"]) == 5.0
        assert stock[0]["is_low"] is True
        assert notifier.messages == [("Material added", "Cement - ₹20,000")]

    async def test_usage_of_unknown_material(self, client):
        response = await client.post(
            f"/api/v1/materials/{uuid4()}/usages", json={"quantity_used": 1}
        )
        assert response.status_code == 404


class TestReports:
    """Report downloads."""

    async def test_download_csv(self, client):
        site_id = await create_site(client, name="SiteA")
        await add_worker(client, site_id, "Ramesh", "karigar")

        response = await client.get(f"/api/v1/sites/{site_id}/reports/workers?format=csv")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        disposition = response.headers["content-disposition"]
        assert disposition.startswith('attachment; filename="SiteA_Workers_Report_')
        assert response.text.splitlines()[0] == "Name,Category,Village,Contact"

    async def test_empty_html_report(self, client):
        site_id = await create_site(client)

        response = await client.get(f"/api/v1/sites/{site_id}/reports/materials?format=html")

        assert response.status_code == 200
        assert response.headers["x-report-empty"] == "true"
        assert "No data available for this report." in response.text

    async def test_unknown_kind_is_validation_error(self, client):
        site_id = await create_site(client)
        response = await client.get(f"/api/v1/sites/{site_id}/reports/salaries")
        assert response.status_code == 422

    async def test_non_ascii_site_name_download(self, client):
        site_id = await create_site(client, name='साइट "A"')

        response = await client.get(f"/api/v1/sites/{site_id}/reports/workers?format=csv")

        assert response.status_code == 200
        disposition = response.headers["content-disposition"]
        assert disposition.isascii()
        assert 'filename="____ _A__Workers_Report_' in disposition
        assert "filename*=UTF-8''" + quote('साइट "A"_Workers_Report_', safe="") in disposition
