"""
Quai Antique API — User Persistence Port
==========================================

What:  The storage interface the account flows depend on, and its SQLAlchemy
       implementation.
How:   AuthService and the authenticator receive a UserStore explicitly for
       each call; route handlers build a SqlAlchemyUserStore around the
       request's AsyncSession. Tests can substitute any other UserStore.

Contract:
    - Email lookups are case-insensitive: every email is normalised
      (trim + lowercase) before it is stored or compared.
    - create()/update() flush immediately so that a UNIQUE(email) violation
      surfaces inside the flow as DuplicateIdentityError, even when two
      registrations race past the service-level pre-check.
    - The transaction itself is committed by the session owner (get_db_session).
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DuplicateIdentityError
from app.models.user import User, normalize_email

logger = logging.getLogger(__name__)


class UserStore(ABC):
    """Persistence collaborator for User records, keyed by integer id."""

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        """Return the user with this (normalised) email, or None."""

    @abstractmethod
    async def find_by_id(self, user_id: int) -> Optional[User]:
        """Return the user with this primary key, or None."""

    @abstractmethod
    async def find_by_api_token(self, token: str) -> Optional[User]:
        """Return the user owning this bearer token, or None."""

    @abstractmethod
    async def create(self, user: User) -> User:
        """
        Insert a new user and return it with its id assigned.

        Raises:
            DuplicateIdentityError: the email is already taken.
        """

    @abstractmethod
    async def update(self, user: User) -> User:
        """
        Write the changes of an existing user.

        Raises:
            DuplicateIdentityError: the new email is already taken.
        """


class SqlAlchemyUserStore(UserStore):
    """UserStore backed by an AsyncSession."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def find_by_email(self, email: str) -> Optional[User]:
        normalized = normalize_email(email)
        if not normalized:
            return None
        result = await self._session.execute(select(User).where(User.email == normalized))
        return result.scalar_one_or_none()

    async def find_by_id(self, user_id: int) -> Optional[User]:
        return await self._session.get(User, user_id)

    async def find_by_api_token(self, token: str) -> Optional[User]:
        if not token:
            return None
        result = await self._session.execute(select(User).where(User.api_token == token))
        return result.scalar_one_or_none()

    async def create(self, user: User) -> User:
        self._session.add(user)
        await self._flush_unique(user)
        return user

    async def update(self, user: User) -> User:
        await self._flush_unique(user)
        return user

    async def _flush_unique(self, user: User) -> None:
        # Rollback expires committed instances; read attributes before it
        email = user.email
        try:
            await self._session.flush()
        except IntegrityError as exc:
            await self._session.rollback()
            logger.info("Unique constraint rejected user write for %s", email)
            raise DuplicateIdentityError() from exc
