"""
Puff Backend: Strain API Tests
==============================

What we test:
    ✅ Create with defaults and input normalization
    ✅ Validation (blank name, unknown effect, out-of-range numbers)
    ✅ Cursor pagination, filters and X-Total-Count
    ✅ Partial update, null handling, empty update is a 400
    ✅ Rows sharing a created_at are not skipped between pages
    ✅ Delete keeps sessions with strain_id cleared
    ✅ Another user's strain is 404
"""

import uuid
from datetime import datetime, timezone

import pytest
from sqlalchemy import update

from puff.models.strain import Strain


async def _create(client, headers, **fields):
    payload = {"name": "Blue Dream"}
    payload.update(fields)
    response = await client.post("/api/strains", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateStrain:

    @pytest.mark.asyncio
    async def test_defaults(self, test_client, auth_headers):
        strain = await _create(test_client, auth_headers)

        assert strain["type"] == "hybrid"
        assert strain["rating"] == 3
        assert strain["effects"] == []
        assert strain["favorite"] is False
        assert strain["would_buy_again"] is False
        assert strain["thc_percent"] is None

    @pytest.mark.asyncio
    async def test_normalizes_input(self, test_client, auth_headers):
        strain = await _create(
            test_client, auth_headers,
            name="  Gelato  ",
            notes="   ",
            dispensary=" Green Leaf ",
            effects=["Happy", "Relaxed", "Happy"],
            purchase_date="2025-02-14",
        )

        assert strain["name"] == "Gelato"
        assert strain["notes"] is None
        assert strain["dispensary"] == "Green Leaf"
        assert strain["effects"] == ["Happy", "Relaxed"]
        assert strain["purchase_date"] == "2025-02-14"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [
        {"name": "   "},
        {"name": "X", "effects": ["Sparkly"]},
        {"name": "X", "thc_percent": 101},
        {"name": "X", "rating": 0},
        {"name": "X", "price": -1},
        {"name": "X", "type": "ruderalis"},
    ])
    async def test_rejects_invalid(self, test_client, auth_headers, payload):
        response = await test_client.post("/api/strains", json=payload, headers=auth_headers)
        assert response.status_code == 422


class TestListStrains:

    @pytest.mark.asyncio
    async def test_cursor_pagination(self, test_client, auth_headers):
        for i in range(5):
            await _create(test_client, auth_headers, name=f"Strain {i}")

        first = await test_client.get("/api/strains?limit=2", headers=auth_headers)
        body = first.json()
        assert first.headers["X-Total-Count"] == "5"
        assert [s["name"] for s in body["strains"]] == ["Strain 4", "Strain 3"]
        assert body["has_more"] is True

        second = await test_client.get(
            "/api/strains", params={"limit": 2, "cursor": body["next_cursor"]}, headers=auth_headers
        )
        assert [s["name"] for s in second.json()["strains"]] == ["Strain 2", "Strain 1"]

        third = await test_client.get(
            "/api/strains",
            params={"limit": 2, "cursor": second.json()["next_cursor"]},
            headers=auth_headers,
        )
        assert [s["name"] for s in third.json()["strains"]] == ["Strain 0"]
        assert third.json()["has_more"] is False
        assert third.json()["next_cursor"] is None

    @pytest.mark.asyncio
    async def test_rows_sharing_a_timestamp_span_pages(self, test_client, auth_headers, session_factory):
        created = [await _create(test_client, auth_headers, name=f"Twin {i}") for i in range(3)]
        same_instant = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)
        async with session_factory() as db:
            await db.execute(update(Strain).values(created_at=same_instant))
            await db.commit()

        seen = []
        cursor = None
        for _ in range(3):
            params = {"limit": 2}
            if cursor:
                params["cursor"] = cursor
            body = (await test_client.get("/api/strains", params=params, headers=auth_headers)).json()
            seen.extend(s["id"] for s in body["strains"])
            cursor = body["next_cursor"]
            if not body["has_more"]:
                break

        assert sorted(seen) == sorted(s["id"] for s in created)
        assert seen == sorted(seen, key=lambda s: uuid.UUID(s), reverse=True)

    @pytest.mark.asyncio
    async def test_ascending_sort(self, test_client, auth_headers):
        for i in range(3):
            await _create(test_client, auth_headers, name=f"Strain {i}")

        response = await test_client.get("/api/strains?sort=created_at_asc", headers=auth_headers)
        assert [s["name"] for s in response.json()["strains"]] == ["Strain 0", "Strain 1", "Strain 2"]

    @pytest.mark.asyncio
    async def test_invalid_sort_rejected(self, test_client, auth_headers):
        response = await test_client.get("/api/strains?sort=name", headers=auth_headers)
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_invalid_cursor_starts_from_beginning(self, test_client, auth_headers):
        await _create(test_client, auth_headers)
        response = await test_client.get("/api/strains?cursor=yesterday", headers=auth_headers)
        assert len(response.json()["strains"]) == 1

    @pytest.mark.asyncio
    async def test_filters(self, test_client, auth_headers):
        await _create(test_client, auth_headers, name="Indica Fav", type="indica", favorite=True)
        await _create(test_client, auth_headers, name="Indica", type="indica")
        await _create(test_client, auth_headers, name="Sativa", type="sativa")

        by_type = await test_client.get("/api/strains?type=indica", headers=auth_headers)
        assert by_type.json()["total_count"] == 2

        favorites = await test_client.get("/api/strains?favorite=true", headers=auth_headers)
        assert [s["name"] for s in favorites.json()["strains"]] == ["Indica Fav"]

    @pytest.mark.asyncio
    async def test_only_own_strains(self, test_client, auth_headers, other_auth_headers):
        await _create(test_client, auth_headers)
        response = await test_client.get("/api/strains", headers=other_auth_headers)
        assert response.json()["strains"] == []
        assert response.json()["total_count"] == 0


class TestUpdateAndDelete:

    @pytest.mark.asyncio
    async def test_partial_update(self, test_client, auth_headers):
        strain = await _create(test_client, auth_headers, notes="earthy", rating=2)

        response = await test_client.patch(
            f"/api/strains/{strain['id']}",
            json={"rating": 5, "favorite": True, "notes": None},
            headers=auth_headers,
        )

        updated = response.json()
        assert response.status_code == 200
        assert updated["rating"] == 5
        assert updated["favorite"] is True
        assert updated["notes"] is None
        assert updated["name"] == "Blue Dream"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{"name": None}, {"rating": None}, {"effects": None}])
    async def test_null_for_required_field_rejected(self, test_client, auth_headers, payload):
        strain = await _create(test_client, auth_headers)
        response = await test_client.patch(
            f"/api/strains/{strain['id']}", json=payload, headers=auth_headers
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_empty_update_rejected(self, test_client, auth_headers):
        strain = await _create(test_client, auth_headers)
        response = await test_client.patch(f"/api/strains/{strain['id']}", json={}, headers=auth_headers)

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["message"] == "Nothing to update"
        assert body["details"] == {"field": "body"}
        assert "request_id" in body

    @pytest.mark.asyncio
    async def test_schema_errors_use_error_body(self, test_client, auth_headers):
        response = await test_client.post(
            "/api/strains", json={"name": "X", "rating": 9}, headers=auth_headers
        )

        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "validation_error"
        assert "detail" not in body
        assert [e["field"] for e in body["details"]["errors"]] == ["body.rating"]

    @pytest.mark.asyncio
    async def test_other_users_strain_is_not_found(self, test_client, auth_headers, other_auth_headers):
        strain = await _create(test_client, auth_headers)
        url = f"/api/strains/{strain['id']}"

        assert (await test_client.get(url, headers=other_auth_headers)).status_code == 404
        assert (await test_client.patch(url, json={"rating": 1}, headers=other_auth_headers)).status_code == 404
        assert (await test_client.delete(url, headers=other_auth_headers)).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_keeps_sessions(self, test_client, auth_headers):
        strain = await _create(test_client, auth_headers, name="Gone Soon")
        session = await test_client.post(
            "/api/sessions", json={"strain_id": strain["id"]}, headers=auth_headers
        )

        deleted = await test_client.delete(f"/api/strains/{strain['id']}", headers=auth_headers)
        assert deleted.status_code == 204
        assert (await test_client.get(f"/api/strains/{strain['id']}", headers=auth_headers)).status_code == 404

        kept = await test_client.get(f"/api/sessions/{session.json()['id']}", headers=auth_headers)
        assert kept.status_code == 200
        assert kept.json()["strain_id"] is None
        assert kept.json()["strain_name"] == "Gone Soon"

    @pytest.mark.asyncio
    async def test_malformed_id(self, test_client, auth_headers):
        response = await test_client.get("/api/strains/not-a-uuid", headers=auth_headers)
        assert response.status_code == 422
