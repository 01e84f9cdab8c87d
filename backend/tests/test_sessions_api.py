"""
Puff Backend: Session API Tests
===============================

What we test:
    ✅ Logging a session copies the strain name
    ✅ Unknown or foreign strain → 404
    ✅ Recording mood_after and effects later via PATCH
    ✅ Filters by strain and method
"""

import uuid

import pytest


@pytest.fixture
def strain_payload():
    return {"name": "Jack Herer", "type": "sativa", "rating": 4}


async def _strain_id(client, headers, payload) -> str:
    response = await client.post("/api/strains", json=payload, headers=headers)
    return response.json()["id"]


class TestSessions:

    @pytest.mark.asyncio
    async def test_log_session(self, test_client, auth_headers, strain_payload):
        strain_id = await _strain_id(test_client, auth_headers, strain_payload)

        response = await test_client.post(
            "/api/sessions",
            json={"strain_id": strain_id, "method": "vape", "amount": " 2 hits ", "mood_before": 2},
            headers=auth_headers,
        )

        assert response.status_code == 201
        session = response.json()
        assert session["strain_name"] == "Jack Herer"
        assert session["strain_id"] == strain_id
        assert session["method"] == "vape"
        assert session["amount"] == "2 hits"
        assert session["mood_after"] is None

    @pytest.mark.asyncio
    async def test_defaults(self, test_client, auth_headers, strain_payload):
        strain_id = await _strain_id(test_client, auth_headers, strain_payload)
        response = await test_client.post("/api/sessions", json={"strain_id": strain_id}, headers=auth_headers)
        assert response.json()["method"] == "smoke"
        assert response.json()["mood_before"] == 3

    @pytest.mark.asyncio
    async def test_unknown_strain(self, test_client, auth_headers):
        response = await test_client.post(
            "/api/sessions", json={"strain_id": str(uuid.uuid4())}, headers=auth_headers
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_cannot_log_with_someone_elses_strain(
        self, test_client, auth_headers, other_auth_headers, strain_payload
    ):
        strain_id = await _strain_id(test_client, auth_headers, strain_payload)
        response = await test_client.post(
            "/api/sessions", json={"strain_id": strain_id}, headers=other_auth_headers
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field,value", [
        ("mood_before", 6), ("mood_after", 0), ("duration", -5), ("method", "bong"),
    ])
    async def test_rejects_invalid(self, test_client, auth_headers, strain_payload, field, value):
        strain_id = await _strain_id(test_client, auth_headers, strain_payload)
        response = await test_client.post(
            "/api/sessions", json={"strain_id": strain_id, field: value}, headers=auth_headers
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_record_how_it_went(self, test_client, auth_headers, strain_payload):
        strain_id = await _strain_id(test_client, auth_headers, strain_payload)
        created = await test_client.post(
            "/api/sessions", json={"strain_id": strain_id, "mood_before": 2}, headers=auth_headers
        )

        response = await test_client.patch(
            f"/api/sessions/{created.json()['id']}",
            json={"mood_after": 4, "effects": ["Creative", "Focused"], "duration": 90},
            headers=auth_headers,
        )

        session = response.json()
        assert session["mood_before"] == 2
        assert session["mood_after"] == 4
        assert session["effects"] == ["Creative", "Focused"]
        assert session["duration"] == 90

    @pytest.mark.asyncio
    async def test_empty_update_rejected(self, test_client, auth_headers, strain_payload):
        strain_id = await _strain_id(test_client, auth_headers, strain_payload)
        created = await test_client.post("/api/sessions", json={"strain_id": strain_id}, headers=auth_headers)

        response = await test_client.patch(f"/api/sessions/{created.json()['id']}", json={}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_filters(self, test_client, auth_headers, strain_payload):
        first = await _strain_id(test_client, auth_headers, strain_payload)
        second = await _strain_id(test_client, auth_headers, {"name": "Gelato"})
        for strain_id, method in ((first, "vape"), (first, "smoke"), (second, "vape")):
            await test_client.post(
                "/api/sessions", json={"strain_id": strain_id, "method": method}, headers=auth_headers
            )

        by_strain = await test_client.get(f"/api/sessions?strain_id={first}", headers=auth_headers)
        assert by_strain.json()["total_count"] == 2
        assert by_strain.headers["X-Total-Count"] == "2"

        by_method = await test_client.get("/api/sessions?method=vape", headers=auth_headers)
        assert {s["strain_name"] for s in by_method.json()["sessions"]} == {"Jack Herer", "Gelato"}

    @pytest.mark.asyncio
    async def test_delete(self, test_client, auth_headers, other_auth_headers, strain_payload):
        strain_id = await _strain_id(test_client, auth_headers, strain_payload)
        created = await test_client.post("/api/sessions", json={"strain_id": strain_id}, headers=auth_headers)
        url = f"/api/sessions/{created.json()['id']}"

        assert (await test_client.delete(url, headers=other_auth_headers)).status_code == 404
        assert (await test_client.delete(url, headers=auth_headers)).status_code == 204
        assert (await test_client.get(url, headers=auth_headers)).status_code == 404
