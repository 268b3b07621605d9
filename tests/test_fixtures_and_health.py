"""
Quai Antique API — Fixture Loader, Health & Plumbing Tests
==========================================================
"""

import logging

import pytest
from sqlalchemy import func, select

from app.database import is_sqlite_url
from app.fixtures import RESTAURANT_FIXTURE_COUNT, load_restaurant_fixtures
from app.middleware.logging import level_for_status
from app.models.catalog import Restaurant


class TestRestaurantFixtures:

    @pytest.mark.asyncio
    async def test_loads_twenty_restaurants(self, db_session):
        restaurants = await load_restaurant_fixtures(db_session)
        assert len(restaurants) == RESTAURANT_FIXTURE_COUNT == 20

        count = await db_session.scalar(select(func.count()).select_from(Restaurant))
        assert count == 20

    @pytest.mark.asyncio
    async def test_fixture_values(self, db_session):
        restaurants = await load_restaurant_fixtures(db_session, count=3)
        assert [r.name for r in restaurants] == ["Restaurant n°1", "Restaurant n°2", "Restaurant n°3"]
        assert restaurants[0].description == "Description resto 1"
        for restaurant in restaurants:
            assert restaurant.id is not None
            assert restaurant.am_opening_time == []
            assert restaurant.pm_opening_time == []
            assert 10 <= restaurant.max_guest <= 50


class TestHealth:

    @pytest.mark.asyncio
    async def test_health_reports_version(self, client):
        response = await client.get("/health")
        assert response.status_code in (200, 503)
        body = response.json()
        assert body["version"] == "1.0.0"
        assert body["status"] in ("healthy", "unhealthy")


class TestEngineOptions:

    def test_sqlite_urls_skip_pool_sizing(self):
        assert is_sqlite_url("sqlite+aiosqlite:///./test.db")
        assert not is_sqlite_url("postgresql+asyncpg://u:p@localhost/db")


class TestAccessLogLevels:

    @pytest.mark.parametrize("status,level", [
        (200, logging.INFO),
        (204, logging.INFO),
        (401, logging.WARNING),
        (429, logging.WARNING),
        (500, logging.ERROR),
    ])
    def test_level_follows_status_class(self, status, level):
        assert level_for_status(status) == level
