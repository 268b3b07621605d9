"""
Quai Antique API — SqlAlchemyUserStore Tests
===============================================

What:  The SQLAlchemy-backed UserStore against a real (in-memory SQLite) schema.
Why:   The UNIQUE(email) constraint is what rejects concurrent duplicate
       registrations, so it must surface as DuplicateIdentityError.
"""

import pytest

from app.exceptions import DuplicateIdentityError
from app.models.user import User
from app.services.user_store import SqlAlchemyUserStore


def new_user(email="a@x.com"):
    return User(email=email, password_hash="$pbkdf2-sha256$1000$salt$hash")


class TestSqlAlchemyUserStore:

    @pytest.mark.asyncio
    async def test_create_assigns_id(self, db_session):
        store = SqlAlchemyUserStore(db_session)
        user = await store.create(new_user())
        assert user.id is not None
        assert await store.find_by_id(user.id) is user

    @pytest.mark.asyncio
    async def test_find_by_email_is_case_insensitive(self, db_session):
        store = SqlAlchemyUserStore(db_session)
        user = await store.create(new_user())
        assert await store.find_by_email(" A@X.COM ") is user
        assert await store.find_by_email("b@x.com") is None
        assert await store.find_by_email("") is None

    @pytest.mark.asyncio
    async def test_find_by_api_token(self, db_session):
        store = SqlAlchemyUserStore(db_session)
        user = await store.create(new_user())
        assert await store.find_by_api_token(user.api_token) is user
        assert await store.find_by_api_token("0" * 40) is None
        assert await store.find_by_api_token("") is None

    @pytest.mark.asyncio
    async def test_unique_email_enforced_by_storage(self, db_session):
        store = SqlAlchemyUserStore(db_session)
        await store.create(new_user())
        with pytest.raises(DuplicateIdentityError):
            await store.create(new_user())

    @pytest.mark.asyncio
    async def test_update_to_taken_email_rejected(self, db_session):
        store = SqlAlchemyUserStore(db_session)
        await store.create(new_user("a@x.com"))
        other = await store.create(new_user("b@x.com"))
        other.email = "a@x.com"
        with pytest.raises(DuplicateIdentityError):
            await store.update(other)

    @pytest.mark.asyncio
    async def test_roles_round_trip_as_json(self, db_session):
        store = SqlAlchemyUserStore(db_session)
        user = await store.create(User(email="a@x.com", password_hash="h", roles=["ROLE_ADMIN"]))
        await db_session.refresh(user)
        assert user.roles == ["ROLE_ADMIN", "ROLE_USER"]

    @pytest.mark.asyncio
    async def test_update_conflict_on_committed_rows(self, session_factory):
        """Rows loaded from a committed transaction are expired by the rollback."""
        async with session_factory() as session:
            store = SqlAlchemyUserStore(session)
            await store.create(new_user("a@x.com"))
            await store.create(new_user("b@x.com"))
            await session.commit()

        async with session_factory() as session:
            store = SqlAlchemyUserStore(session)
            other = await store.find_by_email("b@x.com")
            other.email = "a@x.com"
            with pytest.raises(DuplicateIdentityError):
                await store.update(other)

        async with session_factory() as session:
            store = SqlAlchemyUserStore(session)
            assert await store.find_by_email("b@x.com") is not None
