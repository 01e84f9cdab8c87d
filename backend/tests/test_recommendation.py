"""
Puff Backend: Recommendation Tests
==================================

What we test:
    ✅ Each scoring term (type match, effects, rating, favorite, buy again)
    ✅ Session history bonus (keyword effects, mood improvement)
    ✅ Top 3 only, ties keep input order
    ✅ Unknown vibe → 404, empty collection → empty list
"""

import pytest

from puff.catalog import find_vibe
from puff.services.recommendation_service import score_strain, score_strains

CHILL = find_vibe("chill")  # keywords: Relaxed, Sleepy, Stress Relief; types: indica, hybrid


class TestScoreStrain:

    def test_rating_only_when_nothing_matches(self, strain_factory):
        strain = strain_factory(type="sativa", rating=4, effects=["Energetic"])
        assert score_strain(strain, [], CHILL) == 4

    def test_type_and_effect_matches(self, strain_factory):
        strain = strain_factory(type="indica", rating=4, effects=["Relaxed", "Sleepy", "Happy"])
        # 3 (type) + 2*2 (effects) + 4 (rating)
        assert score_strain(strain, [], CHILL) == 11

    def test_favorite_and_would_buy_again_bonuses(self, strain_factory):
        strain = strain_factory(type="sativa", rating=1, favorite=True, would_buy_again=True)
        assert score_strain(strain, [], CHILL) == 1 + 2 + 1

    def test_session_history_counts_only_this_strain(self, strain_factory, session_row_factory):
        strain = strain_factory(type="sativa", rating=2)
        other = strain_factory()
        sessions = [
            session_row_factory(strain_id=strain.id, effects=["Relaxed", "Stress Relief", "Happy"],
                                mood_before=2, mood_after=4),
            session_row_factory(strain_id=strain.id, effects=["Sleepy"], mood_before=3, mood_after=3),
            session_row_factory(strain_id=other.id, effects=["Relaxed"], mood_before=1, mood_after=5),
        ]
        # 2 (rating) + (2 effects + 1 mood) + (1 effect + 0 mood)
        assert score_strain(strain, sessions, CHILL) == 6

    def test_missing_mood_after_gets_no_bonus(self, strain_factory, session_row_factory):
        strain = strain_factory(type="sativa", rating=2)
        session = session_row_factory(strain_id=strain.id, mood_before=1, mood_after=None)
        assert score_strain(strain, [session], CHILL) == 2


class TestScoreStrains:

    def test_ranks_top_three_with_stable_ties(self, strain_factory, session_row_factory):
        a = strain_factory(name="A", type="indica", rating=4, effects=["Relaxed", "Sleepy"], favorite=True)
        b = strain_factory(name="B", type="sativa", rating=5, effects=["Energetic"], would_buy_again=True)
        c = strain_factory(name="C", type="hybrid", rating=1)
        d = strain_factory(name="D", type="sativa", rating=4)
        sessions = [
            session_row_factory(strain_id=b.id, effects=["Relaxed", "Stress Relief"],
                                mood_before=2, mood_after=4),
        ]

        ranked = score_strains([a, b, c, d], sessions, CHILL)

        assert [(s.name, score) for s, score in ranked] == [("A", 13), ("B", 9), ("C", 4)]

    def test_fewer_than_three_strains(self, strain_factory):
        ranked = score_strains([strain_factory(name="Only")], [], CHILL)
        assert len(ranked) == 1

    def test_no_strains(self):
        assert score_strains([], [], CHILL) == []


class TestRecommendationRoutes:

    @pytest.mark.asyncio
    async def test_list_vibes(self, test_client, auth_headers):
        response = await test_client.get("/api/recommendations/vibes", headers=auth_headers)
        assert response.status_code == 200
        ids = [vibe["id"] for vibe in response.json()]
        assert ids == ["chill", "creative", "social", "focus", "sleep", "pain", "energy", "munchies"]

    @pytest.mark.asyncio
    async def test_unknown_vibe_is_404(self, test_client, auth_headers):
        response = await test_client.get("/api/recommendations/party", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_empty_collection(self, test_client, auth_headers):
        response = await test_client.get("/api/recommendations/sleep", headers=auth_headers)
        assert response.status_code == 200
        body = response.json()
        assert body["vibe"]["id"] == "sleep"
        assert body["recommendations"] == []

    @pytest.mark.asyncio
    async def test_recommends_from_own_strains(self, test_client, auth_headers):
        for payload in (
            {"name": "Northern Lights", "type": "indica", "rating": 5, "effects": ["Sleepy", "Relaxed"]},
            {"name": "Sour Diesel", "type": "sativa", "rating": 4, "effects": ["Energetic"]},
        ):
            created = await test_client.post("/api/strains", json=payload, headers=auth_headers)
            assert created.status_code == 201

        response = await test_client.get("/api/recommendations/sleep", headers=auth_headers)

        recs = response.json()["recommendations"]
        assert recs[0]["strain"]["name"] == "Northern Lights"
        # 3 (indica) + 2*2 (Sleepy, Relaxed) + 5 (rating)
        assert recs[0]["score"] == 12
        assert recs[1]["strain"]["name"] == "Sour Diesel"

    @pytest.mark.asyncio
    async def test_requires_authentication(self, test_client):
        response = await test_client.get("/api/recommendations/vibes")
        assert response.status_code == 401
