"""
Quai Antique API — Catalog Route Handlers
===========================================

What:  CRUD endpoints for restaurants, categories and foods.
How:   `build_catalog_router()` wires one CatalogService to the four routes
       every catalog resource exposes:

    POST   /api/{resource}        201 + Location header + read projection
    GET    /api/{resource}/{id}   200 read projection | 404
    PUT    /api/{resource}/{id}   204 | 404
    DELETE /api/{resource}/{id}   204 | 404
"""

from typing import Type

from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.catalog import (
    CategoryCreate,
    CategoryRead,
    CategoryUpdate,
    FoodCreate,
    FoodRead,
    FoodUpdate,
    RestaurantCreate,
    RestaurantRead,
    RestaurantUpdate,
)
from app.schemas.common import ErrorResponse
from app.services.catalog_service import (
    CatalogService,
    category_service,
    food_service,
    restaurant_service,
)

NOT_FOUND = {404: {"description": "Resource not found", "model": ErrorResponse}}


def build_catalog_router(
    service: CatalogService,
    tag: str,
    create_schema: Type[BaseModel],
    update_schema: Type[BaseModel],
    read_schema: Type[BaseModel],
) -> APIRouter:
    resource = service.resource
    show_route = f"{resource}_show"
    router = APIRouter(prefix=f"/api/{resource}", tags=[tag])

    @router.post(
        "",
        response_model=read_schema,
        status_code=status.HTTP_201_CREATED,
        responses=NOT_FOUND,
        summary=f"Create a {resource}",
        name=f"{resource}_new",
    )
    async def create(
        payload: create_schema,
        request: Request,
        response: Response,
        db: AsyncSession = Depends(get_db_session),
    ):
        entity = await service.create(db, payload)
        response.headers["Location"] = str(request.url_for(show_route, entity_id=entity.id))
        return read_schema.model_validate(entity)

    @router.get(
        "/{entity_id}",
        response_model=read_schema,
        responses=NOT_FOUND,
        summary=f"Show a {resource}",
        name=show_route,
    )
    async def show(entity_id: int, db: AsyncSession = Depends(get_db_session)):
        return read_schema.model_validate(await service.get(db, entity_id))

    @router.put(
        "/{entity_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        response_class=Response,
        responses=NOT_FOUND,
        summary=f"Edit a {resource}",
        name=f"{resource}_edit",
    )
    async def edit(
        entity_id: int,
        payload: update_schema,
        db: AsyncSession = Depends(get_db_session),
    ) -> Response:
        await service.update(db, entity_id, payload)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @router.delete(
        "/{entity_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        response_class=Response,
        responses=NOT_FOUND,
        summary=f"Delete a {resource}",
        name=f"{resource}_delete",
    )
    async def delete(entity_id: int, db: AsyncSession = Depends(get_db_session)) -> Response:
        await service.delete(db, entity_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router


restaurant_router = build_catalog_router(
    restaurant_service, "Restaurants", RestaurantCreate, RestaurantUpdate, RestaurantRead
)
category_router = build_catalog_router(
    category_service, "Categories", CategoryCreate, CategoryUpdate, CategoryRead
)
food_router = build_catalog_router(food_service, "Foods", FoodCreate, FoodUpdate, FoodRead)
