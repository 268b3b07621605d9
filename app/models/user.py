"""
Quai Antique API — User SQLAlchemy Model
==========================================

What:  ORM model for the `users` table: the identity and credential record.
Who:   Created only by the registration flow, mutated only by the profile
       edit flow, read by login and the bearer authenticator.

Invariants:
    - roles always contains ROLE_USER (assigned at construction, re-applied
      when reading through `granted_roles`)
    - api_token is issued once, in the constructor, before the first INSERT
    - password_hash never holds plaintext
    - email is stored trimmed and lowercased; UNIQUE at the storage layer

Table Design:
    - Integer primary key assigned by the database
    - email UNIQUE: the last line of defence against concurrent duplicate
      registrations (the service-level check is only a fast path)
    - api_token UNIQUE + indexed: every authenticated request looks it up
    - roles as JSON array: small, read with the row, no join table
"""

from datetime import datetime, timezone
from typing import Any, List, Optional

from sqlalchemy import JSON, DateTime, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.security.tokens import issue_api_token

ROLE_USER = "ROLE_USER"


def normalize_email(email: Optional[str]) -> str:
    """Trim and lowercase an email address; emails are matched case-insensitively."""
    return (email or "").strip().lower()


def with_default_role(roles: Optional[List[str]]) -> List[str]:
    """De-duplicate role tags, keeping order, and make sure ROLE_USER is present."""
    merged: List[str] = []
    for role in [*(roles or []), ROLE_USER]:
        if role and role not in merged:
            merged.append(role)
    return merged


class User(Base):
    """A registered account."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    email: Mapped[str] = mapped_column(
        String(180),
        nullable=False,
        unique=True,
        index=True,
        comment="Login identifier, stored trimmed and lowercased",
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="passlib modular-crypt hash; never plaintext",
    )

    first_name: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    roles: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=lambda: [ROLE_USER],
    )

    api_token: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="Long-lived bearer credential issued at account creation",
    )

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

    def __init__(self, **kwargs: Any):
        # The token is always generated here; a caller-supplied one is discarded
        kwargs.pop("api_token", None)
        roles = kwargs.pop("roles", None)
        super().__init__(**kwargs)
        self.roles = with_default_role(roles)
        self.api_token = issue_api_token()

    @property
    def user_identifier(self) -> str:
        """The value clients log in with (the email)."""
        return self.email

    @property
    def granted_roles(self) -> List[str]:
        return with_default_role(self.roles)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
