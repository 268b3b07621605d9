"""
Quai Antique API — Catalog Schemas
====================================

What:  Create / update / read shapes for restaurants, categories and foods.

Create schemas enforce required fields. Update schemas make every field
optional: CatalogService only overwrites the fields a client actually sent
with a non-null value.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from app.schemas.common import CamelModel


# ── Restaurant ────────────────────────────────────────────────────────────

class RestaurantCreate(CamelModel):
    name: str = Field(min_length=1, max_length=32, examples=["Quai Antique"])
    description: Optional[str] = Field(default=None, examples=["Description du restaurant"])
    am_opening_time: List[str] = Field(default_factory=list, examples=[["12:00-14:00"]])
    pm_opening_time: List[str] = Field(default_factory=list, examples=[["19:00-22:00"]])
    max_guest: int = Field(default=0, ge=0, examples=[40])


class RestaurantUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=32)
    description: Optional[str] = None
    am_opening_time: Optional[List[str]] = None
    pm_opening_time: Optional[List[str]] = None
    max_guest: Optional[int] = Field(default=None, ge=0)


class RestaurantRead(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    am_opening_time: List[str]
    pm_opening_time: List[str]
    max_guest: int
    created_at: datetime
    updated_at: Optional[datetime] = None


# ── Category ──────────────────────────────────────────────────────────────

class CategoryCreate(CamelModel):
    title: str = Field(min_length=1, max_length=128, examples=["Plats principaux"])


class CategoryUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=128)


class CategoryRead(CamelModel):
    id: int
    title: str
    created_at: datetime
    updated_at: Optional[datetime] = None


# ── Food ──────────────────────────────────────────────────────────────────

class FoodCreate(CamelModel):
    title: str = Field(min_length=1, max_length=128, examples=["Tarte aux pommes"])
    description: Optional[str] = Field(default=None, examples=["Délicieux dessert maison"])
    price: float = Field(default=0, ge=0, examples=[12.5])
    category_id: Optional[int] = Field(default=None, examples=[3])


class FoodUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=128)
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    category_id: Optional[int] = None


class FoodRead(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    price: float
    category_id: Optional[int] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
