"""
Quai Antique API — Catalog SQLAlchemy Models
==============================================

What:  ORM models for the restaurant catalog: restaurants, categories and foods.
Who:   CatalogService (generic CRUD), the fixture loader and Alembic.

Foreign keys:
    Category 1 ── * Food   (foods.category_id, nullable, SET NULL on delete)

Restaurants are standalone rows; opening times are stored as JSON arrays of
"HH:MM-HH:MM" strings for the morning (am) and evening (pm) services.
"""

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, Numeric, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class TimestampMixin:
    """created_at set on insert; updated_at null until the first edit."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
    )


class Restaurant(TimestampMixin, Base):
    __tablename__ = "restaurants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(32), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    am_opening_time: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    pm_opening_time: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    max_guest: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<Restaurant(id={self.id}, name='{self.name}')>"


class Category(TimestampMixin, Base):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(128), nullable=False)

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, title='{self.title}')>"


class Food(TimestampMixin, Base):
    __tablename__ = "foods"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False, default=0)
    category_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Food(id={self.id}, title='{self.title}', price={self.price})>"
