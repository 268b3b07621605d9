"""
Quai Antique API — Catalog Service (generic CRUD)
===================================================

What:  Create / show / edit / delete for restaurants, categories and foods.
How:   One generic CatalogService parameterised by the ORM model, a resource
       name (for 404 messages) and the tuple of client-writable attributes.
       FoodService adds the category reference check.
Who:   Called by the restaurant, category and food route handlers.

Edit semantics (every resource):
    Only attributes listed in `writable_fields` can change. A field is
    overwritten when the client sent it with a non-null value; absent and
    null fields keep their stored value. updated_at is stamped on every edit.
"""

import logging
from datetime import datetime, timezone
from typing import Generic, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import Base
from app.exceptions import DatabaseError, NotFoundError
from app.models.catalog import Category, Food, Restaurant

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class CatalogService(Generic[ModelT]):

    def __init__(self, model: Type[ModelT], resource: str, writable_fields: Tuple[str, ...]):
        self.model = model
        self.resource = resource
        self.writable_fields = writable_fields

    async def create(self, db: AsyncSession, payload: BaseModel) -> ModelT:
        values = {
            field: value
            for field, value in payload.model_dump().items()
            if field in self.writable_fields
        }
        await self._validate(db, values)
        entity = self.model(**values)
        entity.created_at = datetime.now(timezone.utc)
        db.add(entity)
        await self._flush(db, "create")
        logger.info("Created %s id=%s", self.resource, entity.id)
        return entity

    async def get(self, db: AsyncSession, entity_id: int) -> ModelT:
        try:
            entity = await db.get(self.model, entity_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching %s %s: %s", self.resource, entity_id, str(e))
            raise DatabaseError(
                message=f"Could not retrieve the {self.resource}. Please try again.",
                context={"resource_id": entity_id},
            ) from e
        if entity is None:
            raise NotFoundError(resource=self.resource, resource_id=str(entity_id))
        return entity

    async def update(self, db: AsyncSession, entity_id: int, payload: BaseModel) -> ModelT:
        entity = await self.get(db, entity_id)
        values = {
            field: value
            for field, value in payload.model_dump(exclude_unset=True).items()
            if field in self.writable_fields and value is not None
        }
        await self._validate(db, values)
        for field, value in values.items():
            setattr(entity, field, value)
        entity.updated_at = datetime.now(timezone.utc)
        await self._flush(db, "update")
        logger.info("Updated %s id=%s fields: %s", self.resource, entity_id, ", ".join(values) or "none")
        return entity

    async def delete(self, db: AsyncSession, entity_id: int) -> None:
        entity = await self.get(db, entity_id)
        await db.delete(entity)
        await self._flush(db, "delete")
        logger.info("Deleted %s id=%s", self.resource, entity_id)

    async def _validate(self, db: AsyncSession, values: dict) -> None:
        """Hook for resource-specific checks on the values about to be written."""

    async def _flush(self, db: AsyncSession, operation: str) -> None:
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error during %s %s: %s", self.resource, operation, str(e), exc_info=True)
            raise DatabaseError(
                message=f"Could not {operation} the {self.resource}. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e


class FoodService(CatalogService[Food]):

    def __init__(self):
        super().__init__(Food, "food", ("title", "description", "price", "category_id"))

    async def _validate(self, db: AsyncSession, values: dict) -> None:
        category_id: Optional[int] = values.get("category_id")
        if category_id is not None and await db.get(Category, category_id) is None:
            raise NotFoundError(resource="category", resource_id=str(category_id))


restaurant_service: CatalogService[Restaurant] = CatalogService(
    Restaurant,
    "restaurant",
    ("name", "description", "am_opening_time", "pm_opening_time", "max_guest"),
)
category_service: CatalogService[Category] = CatalogService(Category, "category", ("title",))
food_service = FoodService()
