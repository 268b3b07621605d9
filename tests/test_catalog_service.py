"""
Quai Antique API — CatalogService Unit Tests
===============================================

What:  Error translation and edit semantics of the generic catalog service.
How:   Uses the mocked AsyncSession from conftest; no SQL is executed.
"""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from app.exceptions import DatabaseError, NotFoundError
from app.models.catalog import Restaurant
from app.schemas.catalog import RestaurantCreate, RestaurantUpdate
from app.services.catalog_service import category_service, food_service, restaurant_service


class TestCatalogService:

    @pytest.mark.asyncio
    async def test_get_missing_raises_not_found(self, mock_db_session):
        mock_db_session.get.return_value = None
        with pytest.raises(NotFoundError, match="No restaurant found for 7 id"):
            await restaurant_service.get(mock_db_session, 7)

    @pytest.mark.asyncio
    async def test_get_database_failure(self, mock_db_session):
        mock_db_session.get.side_effect = OperationalError("SELECT", {}, Exception("down"))
        with pytest.raises(DatabaseError):
            await category_service.get(mock_db_session, 1)

    @pytest.mark.asyncio
    async def test_create_flush_failure(self, mock_db_session):
        mock_db_session.flush.side_effect = OperationalError("INSERT", {}, Exception("down"))
        with pytest.raises(DatabaseError, match="Could not create the restaurant"):
            await restaurant_service.create(mock_db_session, RestaurantCreate(name="Quai Antique"))

    @pytest.mark.asyncio
    async def test_create_stamps_created_at(self, mock_db_session):
        entity = await restaurant_service.create(mock_db_session, RestaurantCreate(name="Quai Antique"))
        assert entity.created_at is not None
        mock_db_session.add.assert_called_once_with(entity)

    @pytest.mark.asyncio
    async def test_update_skips_absent_and_null_fields(self, mock_db_session):
        existing = Restaurant(name="Quai Antique", description="old", max_guest=40)
        mock_db_session.get.return_value = existing

        await restaurant_service.update(
            mock_db_session, 1, RestaurantUpdate(description=None, max_guest=12)
        )

        assert existing.name == "Quai Antique"
        assert existing.description == "old"
        assert existing.max_guest == 12
        assert existing.updated_at is not None

    @pytest.mark.asyncio
    async def test_delete_missing(self, mock_db_session):
        mock_db_session.get.return_value = None
        with pytest.raises(NotFoundError):
            await restaurant_service.delete(mock_db_session, 3)
        mock_db_session.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_food_validation_without_category_skips_lookup(self, mock_db_session):
        mock_db_session.get = AsyncMock()
        await food_service._validate(mock_db_session, {"title": "Fondue"})
        mock_db_session.get.assert_not_called()
