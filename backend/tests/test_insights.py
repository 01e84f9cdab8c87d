"""
Puff Backend: Insights Tests
============================

What we test:
    ✅ Rolling 7/30 day windows are strictly after now - N days
    ✅ Method and type breakdowns, mood change, top effects, favorites
    ✅ Empty diary yields zeros
    ✅ Home and profile endpoints
"""

from datetime import timedelta

import pytest

from puff.services.insights_service import average_mood_change, compute_stats

from conftest import FIXED_NOW


class TestComputeStats:

    def test_full_aggregation(self, strain_factory, session_row_factory):
        strains = [
            strain_factory(name="A", type="indica", favorite=True),
            strain_factory(name="B", type="indica"),
            strain_factory(name="C", type="sativa"),
        ]
        sessions = [
            session_row_factory(method="vape", effects=["Happy", "Relaxed"], mood_before=2, mood_after=4,
                                created_at=FIXED_NOW - timedelta(days=1)),
            session_row_factory(method="smoke", effects=["Happy"], mood_before=3, mood_after=2,
                                created_at=FIXED_NOW - timedelta(days=7)),
            session_row_factory(method="vape", effects=[], mood_before=3, mood_after=None,
                                created_at=FIXED_NOW - timedelta(days=10)),
            session_row_factory(method="edible", effects=["Happy"],
                                created_at=FIXED_NOW - timedelta(days=45)),
        ]

        stats = compute_stats(strains, sessions, now=FIXED_NOW)

        assert stats.total_strains == 3
        assert stats.total_sessions == 4
        # Exactly 7 days ago is outside the 7 day window
        assert stats.sessions_last_7_days == 1
        assert stats.sessions_last_30_days == 3
        assert [(m.method, m.count, m.percent) for m in stats.method_breakdown] == [
            ("vape", 2, 50.0),
            ("smoke", 1, 25.0),
            ("edible", 1, 25.0),
        ]
        assert [(t.type, t.count) for t in stats.type_breakdown] == [("indica", 2), ("sativa", 1)]
        assert stats.avg_mood_change == 0.5
        assert stats.mood_improving is True
        assert [(e.effect, e.count) for e in stats.top_effects] == [("Happy", 3), ("Relaxed", 1)]
        assert [s.name for s in stats.favorite_strains] == ["A"]

    def test_empty_diary(self):
        stats = compute_stats([], [], now=FIXED_NOW)

        assert stats.total_sessions == 0
        assert stats.method_breakdown == []
        assert stats.avg_mood_change == 0
        assert stats.mood_improving is False
        assert stats.top_effects == []

    def test_top_effects_limited_to_five(self, session_row_factory):
        effects = ["Relaxed", "Happy", "Euphoric", "Creative", "Focused", "Energetic"]
        sessions = [session_row_factory(effects=effects)]
        stats = compute_stats([], sessions, now=FIXED_NOW)
        assert len(stats.top_effects) == 5

    def test_favorites_capped_at_five(self, strain_factory):
        strains = [strain_factory(name=f"S{i}", favorite=True) for i in range(7)]
        stats = compute_stats(strains, [], now=FIXED_NOW)
        assert len(stats.favorite_strains) == 5

    def test_declining_mood(self, session_row_factory):
        sessions = [session_row_factory(mood_before=4, mood_after=2)]
        assert average_mood_change(sessions) == -2
        assert compute_stats([], sessions, now=FIXED_NOW).mood_improving is False


class TestInsightRoutes:

    @pytest.mark.asyncio
    async def test_home_summary(self, test_client, auth_headers):
        strain_ids = []
        for i, rating in enumerate([5, 4, 3, 2, 1, 3]):
            response = await test_client.post(
                "/api/strains", json={"name": f"Strain {i}", "rating": rating}, headers=auth_headers
            )
            strain_ids.append(response.json()["id"])
        await test_client.post(
            "/api/sessions", json={"strain_id": strain_ids[0]}, headers=auth_headers
        )

        response = await test_client.get("/api/insights/home", headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["total_strains"] == 6
        assert body["total_sessions"] == 1
        assert len(body["recent_strains"]) == 5
        assert body["recent_strains"][0]["name"] == "Strain 5"
        assert body["avg_rating"] == 3.0

    @pytest.mark.asyncio
    async def test_profile_counts(self, test_client, auth_headers):
        await test_client.post(
            "/api/strains", json={"name": "Fav", "rating": 5, "favorite": True}, headers=auth_headers
        )
        await test_client.post("/api/strains", json={"name": "Meh", "rating": 2}, headers=auth_headers)

        response = await test_client.get("/api/insights/profile", headers=auth_headers)

        assert response.json() == {
            "total_strains": 2,
            "total_sessions": 0,
            "favorite_count": 1,
            "avg_rating": 3.5,
        }

    @pytest.mark.asyncio
    async def test_stats_for_new_user(self, test_client, auth_headers):
        response = await test_client.get("/api/insights/stats", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["avg_mood_change"] == 0
