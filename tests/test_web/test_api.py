"""Tests for Field Ops Web API endpoints."""

import pytest
from httpx import AsyncClient

from conftest import FAILING_AIRFLOW, PASSING_FORMS

INTAKE = {
    "customer_first_name": "Dana",
    "customer_last_name": "Reyes",
    "customer_phone": "(559) 555-0142",
    "address_line1": "1200 Olive Ave",
    "city": "Fresno",
    "equipment": [
        {"system_location": "Hallway", "equipment_role": "condenser", "tonnage": "3"},
    ],
}


async def create_job(client: AsyncClient, **fields) -> dict:
    response = await client.post("/api/v1/jobs", json={**INTAKE, **fields})
    assert response.status_code == 201
    return response.json()


async def first_system_id(client: AsyncClient, job_id: str) -> str:
    response = await client.get(f"/api/v1/jobs/{job_id}/systems")
    return response.json()[0]["id"]


async def pass_core_tests(client: AsyncClient, job_id: str, forms=None):
    system_id = await first_system_id(client, job_id)
    readings = {**PASSING_FORMS, **(forms or {})}
    response = await client.post(f"/api/v1/jobs/{job_id}/tests/core", json={"system_id": system_id})
    assert response.status_code == 201
    for run in response.json():
        saved = await client.post(
            f"/api/v1/jobs/{job_id}/tests/{run['id']}/measurements",
            data=readings[run["test_type"]],
        )
        assert saved.status_code == 200
        completed = await client.post(f"/api/v1/jobs/{job_id}/tests/{run['id']}/complete")
        assert completed.status_code == 200


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    """Test health check endpoint."""
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "fieldops-web"


@pytest.mark.asyncio
async def test_create_job(client: AsyncClient):
    """Test job creation from intake."""
    data = await create_job(client)
    assert data["title"] == "ECC Test - Reyes (Fresno)"
    assert data["ops_status"] == "need_to_schedule"
    assert data["id"] is not None


@pytest.mark.asyncio
async def test_create_job_validation_error(client: AsyncClient):
    response = await client.post("/api/v1/jobs", json={**INTAKE, "customer_phone": ""})
    assert response.status_code == 400
    assert "Missing required fields" in response.json()["detail"]


@pytest.mark.asyncio
async def test_get_job_not_found(client: AsyncClient):
    """Test getting non-existent job."""
    response = await client.get("/api/v1/jobs/non-existent-id")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_list_jobs(client: AsyncClient):
    """Test listing jobs."""
    for _ in range(3):
        await create_job(client)

    response = await client.get("/api/v1/jobs", params={"ops_status": "need_to_schedule"})
    assert response.status_code == 200
    data = response.json()
    assert len(data["jobs"]) == 3
    assert data["page"] == 1


@pytest.mark.asyncio
async def test_measurements_form_post(client: AsyncClient):
    job = await create_job(client, project_type="all_new")
    system_id = await first_system_id(client, job["id"])
    run = (
        await client.post(
            f"/api/v1/jobs/{job['id']}/tests",
            json={"test_type": "duct_leakage", "system_id": system_id},
        )
    ).json()

    response = await client.post(
        f"/api/v1/jobs/{job['id']}/tests/{run['id']}/measurements",
        data={"tonnage": "3", "measured_duct_leakage_cfm": "58.5"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["computed_verdict"] == "pass"
    assert data["computed"]["max_leakage_cfm"] == 60


@pytest.mark.asyncio
async def test_full_pass_flow(client: AsyncClient):
    job = await create_job(client)

    await pass_core_tests(client, job["id"])

    response = await client.get(f"/api/v1/jobs/{job['id']}")
    assert response.json()["ops_status"] == "paperwork_required"

    response = await client.post(f"/api/v1/jobs/{job['id']}/paperwork-complete")
    assert response.json()["ops_status"] == "closed"


@pytest.mark.asyncio
async def test_override_without_reason_is_rejected(client: AsyncClient):
    job = await create_job(client)
    run = (await client.post(f"/api/v1/jobs/{job['id']}/tests", json={"test_type": "airflow"})).json()

    response = await client.put(
        f"/api/v1/jobs/{job['id']}/tests/{run['id']}/override",
        json={"override": "fail"},
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_retest_flow(client: AsyncClient):
    parent = await create_job(client)
    await pass_core_tests(client, parent["id"], forms={"airflow": FAILING_AIRFLOW})
    assert (await client.get(f"/api/v1/jobs/{parent['id']}")).json()["ops_status"] == "failed"

    response = await client.post(f"/api/v1/jobs/{parent['id']}/retests", json={"copy_equipment": True})
    assert response.status_code == 201
    child = response.json()
    assert child["parent_job_id"] == parent["id"]

    await pass_core_tests(client, child["id"])

    assert (await client.get(f"/api/v1/jobs/{parent['id']}")).json()["ops_status"] == "closed"
    events = (await client.get(f"/api/v1/jobs/{parent['id']}/events")).json()
    assert "retest_passed" in [event["event_type"] for event in events]


@pytest.mark.asyncio
async def test_manual_ops_edit_and_evaluate(client: AsyncClient):
    job = await create_job(client)
    response = await client.put(
        f"/api/v1/jobs/{job['id']}/ops-status",
        json={"ops_status": "on_hold"},
        headers={"X-Actor-Id": "user-7"},
    )
    assert response.json()["ops_status"] == "on_hold"

    response = await client.post(f"/api/v1/jobs/{job['id']}/evaluate")
    assert response.status_code == 200
    assert response.json() == {"job_id": job["id"], "verdict": "none", "ops_status": "on_hold"}

    events = (await client.get(
        f"/api/v1/jobs/{job['id']}/events", params={"event_type": "ops_status_changed"}
    )).json()
    assert events[0]["user_id"] == "user-7"


@pytest.mark.asyncio
async def test_visits_endpoints(client: AsyncClient):
    job = await create_job(client)
    visits = (await client.get(f"/api/v1/jobs/{job['id']}/visits")).json()
    assert [v["visit_number"] for v in visits] == [1]

    response = await client.put(
        f"/api/v1/jobs/{job['id']}/visits/{visits[0]['id']}/schedule",
        json={"scheduled_date": "2026-03-04", "window_start": "08:00", "window_end": "10:00"},
    )
    assert response.status_code == 200
    assert (await client.get(f"/api/v1/jobs/{job['id']}")).json()["ops_status"] == "scheduled"

    response = await client.post(
        f"/api/v1/jobs/{job['id']}/visits/{visits[0]['id']}/close",
        json={"outcome": "fail"},
    )
    assert response.json()["needs_another_visit"] is True

    response = await client.post(f"/api/v1/jobs/{job['id']}/visits")
    assert response.status_code == 201
    assert (await client.get(f"/api/v1/jobs/{job['id']}")).json()["ops_status"] == "retest_needed"


@pytest.mark.asyncio
async def test_equipment_endpoints(client: AsyncClient):
    job = await create_job(client, equipment=[])
    response = await client.post(
        f"/api/v1/jobs/{job['id']}/equipment",
        json={"system_location": "Attic", "equipment_role": "furnace"},
    )
    assert response.status_code == 201
    item = response.json()

    response = await client.delete(f"/api/v1/jobs/{job['id']}/equipment/{item['id']}")
    assert response.status_code == 204
    assert (await client.get(f"/api/v1/jobs/{job['id']}/systems")).json() == []


@pytest.mark.asyncio
async def test_contact_attempt_endpoint(client: AsyncClient):
    job = await create_job(client)

    response = await client.post(
        f"/api/v1/jobs/{job['id']}/contact-attempts", json={"method": "email"}
    )
    assert response.status_code == 400

    response = await client.post(
        f"/api/v1/jobs/{job['id']}/contact-attempts", json={"method": "call"}
    )
    assert response.status_code == 200
    assert response.json()["action_required_by"] == "customer"


@pytest.mark.asyncio
async def test_ops_dashboard_and_calendar(client: AsyncClient):
    await create_job(client, scheduled_date="2026-03-10")

    summary = (await client.get("/api/v1/ops/summary")).json()
    assert summary["total"] == 1

    bucket = (await client.get("/api/v1/ops/buckets/scheduled", params={"q": "olive"})).json()
    assert len(bucket["jobs"]) == 1

    calendar = (await client.get("/api/v1/calendar", params={"year": 2026, "month": 3})).json()
    assert [event["start_date"] for event in calendar["events"]] == ["2026-03-10"]


@pytest.mark.asyncio
async def test_missing_run_is_404(client: AsyncClient):
    job = await create_job(client)
    response = await client.post(f"/api/v1/jobs/{job['id']}/tests/missing/complete")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_contractor_endpoints(client: AsyncClient):
    created = await client.post("/api/v1/contractors", json={"name": "Valley Air"})
    assert created.status_code == 201
    contractor = created.json()
    assert contractor["billing_name"] == "Valley Air"

    patched = await client.patch(
        f"/api/v1/contractors/{contractor['id']}", json={"email": "office@valleyair.example"}
    )
    assert patched.status_code == 200
    assert patched.json()["email"] == "office@valleyair.example"

    listed = await client.get("/api/v1/contractors")
    assert [c["id"] for c in listed.json()] == [contractor["id"]]

    job = await create_job(client, contractor_id=contractor["id"], scheduled_date="2026-03-10")
    calendar = await client.get("/api/v1/calendar", params={"year": 2026, "month": 3})
    assert calendar.json()["events"][0]["job_id"] == job["id"]
    assert calendar.json()["events"][0]["contractor_name"] == "Valley Air"


@pytest.mark.asyncio
async def test_contractor_errors(client: AsyncClient):
    blank = await client.post("/api/v1/contractors", json={"name": ""})
    assert blank.status_code == 400

    missing = await client.get("/api/v1/contractors/missing")
    assert missing.status_code == 404

    unknown = await client.post("/api/v1/jobs", json={**INTAKE, "contractor_id": "missing"})
    assert unknown.status_code == 400


@pytest.mark.asyncio
async def test_customer_profile_endpoints(client: AsyncClient):
    job = await create_job(client)

    response = await client.put(
        f"/api/v1/customers/{job['customer_id']}",
        json={
            "first_name": "Dana",
            "last_name": "Reyes",
            "phone": "(559) 555-0142",
            "address_line1": "88 Shaw Ave",
            "city": "Clovis",
        },
    )
    assert response.status_code == 200
    assert response.json()["locations"][0]["city"] == "Clovis"

    refreshed = await client.get(f"/api/v1/jobs/{job['id']}")
    assert refreshed.json()["city"] == "Clovis"

    missing = await client.get("/api/v1/customers/missing")
    assert missing.status_code == 404
