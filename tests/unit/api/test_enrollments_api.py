"""Tests for enrollments API: enroll, grade, read, audit trail, error envelope."""

import asyncio

from httpx import AsyncClient


async def _enroll(client, headers, student_id="S1002", offering_id="CS101-F22"):
    return await client.post(
        "/enrollments/",
        json={"student_id": student_id, "offering_id": offering_id},
        headers=headers,
    )


async def test_enroll_returns_201_with_enrollment_id(client: AsyncClient, actor_headers, api_metrics):
    r = await _enroll(client, actor_headers)
    assert r.status_code == 201
    data = r.json()
    assert data["status"] == "success"
    assert data["enrollment_id"].startswith("ENR")
    assert api_metrics.count("enroll", "success") == 1


async def test_enroll_twice_returns_409_already_enrolled(client: AsyncClient, actor_headers):
    assert (await _enroll(client, actor_headers)).status_code == 201
    r = await _enroll(client, actor_headers)
    assert r.status_code == 409
    assert r.json() == {
        "status": "error",
        "kind": "AlreadyEnrolled",
        "detail": r.json()["detail"],
    }


async def test_enroll_full_offering_returns_409_capacity(client: AsyncClient, actor_headers):
    assert (await _enroll(client, actor_headers, "S1001", "ECE101-F24")).status_code == 201
    r = await _enroll(client, actor_headers, "S1002", "ECE101-F24")
    assert r.status_code == 409
    assert r.json()["kind"] == "CapacityExceeded"


async def test_enroll_unknown_student_and_offering_return_404(client: AsyncClient, actor_headers):
    r = await _enroll(client, actor_headers, "S9999", "CS101-F22")
    assert r.status_code == 404
    assert r.json()["kind"] == "StudentNotFound"
    r = await _enroll(client, actor_headers, "S1002", "NOPE-000")
    assert r.status_code == 404
    assert r.json()["kind"] == "OfferingNotFound"


async def test_enroll_missing_field_returns_422(client: AsyncClient, actor_headers):
    r = await client.post("/enrollments/", json={"student_id": "S1002"}, headers=actor_headers)
    assert r.status_code == 422


async def test_update_grade_then_read_enrollment(client: AsyncClient, actor_headers):
    enrollment_id = (await _enroll(client, actor_headers)).json()["enrollment_id"]

    r = await client.put(f"/enrollments/{enrollment_id}/grade", json={"grade": "B+"}, headers=actor_headers)
    assert r.status_code == 200
    assert r.json() == {"status": "success", "enrollment_id": enrollment_id, "grade": "B+"}

    r = await client.get(f"/enrollments/{enrollment_id}", headers=actor_headers)
    assert r.status_code == 200
    body = r.json()
    assert body["grade"] == "B+"
    assert body["status"] == "Active"
    assert body["student_id"] == "S1002"


async def test_update_grade_invalid_returns_422_and_no_audit(client: AsyncClient, actor_headers):
    enrollment_id = (await _enroll(client, actor_headers)).json()["enrollment_id"]

    r = await client.put(f"/enrollments/{enrollment_id}/grade", json={"grade": "E"}, headers=actor_headers)
    assert r.status_code == 422
    assert r.json()["kind"] == "InvalidGrade"

    trail = (await client.get(f"/enrollments/{enrollment_id}/audit", headers=actor_headers)).json()
    assert [e["action"] for e in trail["entries"]] == ["INSERT"]


async def test_update_grade_unknown_enrollment_returns_404(client: AsyncClient, actor_headers):
    r = await client.put("/enrollments/ENR404/grade", json={"grade": "A"}, headers=actor_headers)
    assert r.status_code == 404
    assert r.json()["kind"] == "EnrollmentNotFound"


async def test_audit_trail_records_actor_per_mutation(client: AsyncClient, actor_headers):
    enrollment_id = (await _enroll(client, actor_headers)).json()["enrollment_id"]
    await client.put(
        f"/enrollments/{enrollment_id}/grade",
        json={"grade": "A"},
        headers={"X-Actor-ID": "prof-singh"},
    )

    r = await client.get(f"/enrollments/{enrollment_id}/audit", headers=actor_headers)
    assert r.status_code == 200
    entries = r.json()["entries"]
    assert [(e["action"], e["actor"]) for e in entries] == [
        ("INSERT", "registrar-office"),
        ("UPDATE", "prof-singh"),
    ]
    assert all(e["enrollment_id"] == enrollment_id for e in entries)


async def test_get_unknown_enrollment_returns_404(client: AsyncClient, actor_headers):
    r = await client.get("/enrollments/ENR404", headers=actor_headers)
    assert r.status_code == 404
    assert r.json()["status"] == "error"


async def test_concurrent_requests_for_last_seat(client: AsyncClient, actor_headers):
    responses = await asyncio.gather(
        _enroll(client, actor_headers, "S1001", "ECE101-F24"),
        _enroll(client, actor_headers, "S1002", "ECE101-F24"),
    )
    codes = sorted(r.status_code for r in responses)
    assert codes == [201, 409]
    rejected = next(r for r in responses if r.status_code == 409)
    assert rejected.json()["kind"] == "CapacityExceeded"
