"""
Quai Antique API — Account Service (registration, login, profile)
===================================================================

What:  The identity & credential lifecycle of a user account.
How:   Stateless service; every call receives the UserStore to read and write
       through, and uses the PasswordHasher for all credential handling.
Who:   Called by the security route handlers.

Flows:
    register      payload → checks → hash → User(...) → store.create → 201 body
    login         username/password → lookup → verify → 200 body (no mutation)
    get_profile   authenticated user → read projection
    edit_profile  authenticated user + partial payload → merge → rehash if a
                  new password was sent → updated_at → store.update → 204

Per-record state:
    Unpersisted ──register──▶ Active ──edit──▶ Active ──(admin delete)──▶ Deleted
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from app.exceptions import (
    DuplicateIdentityError,
    ForbiddenError,
    InvalidCredentialError,
    UnauthenticatedError,
)
from app.models.user import User, normalize_email
from app.schemas.user import (
    AuthResponse,
    LoginRequest,
    ProfileUpdateRequest,
    RegistrationRequest,
    UserRead,
)
from app.security.passwords import PasswordHasher, password_hasher
from app.services.user_store import UserStore

logger = logging.getLogger(__name__)

# Writable profile attributes and the payload field each one is read from.
# The password is not listed: it is never copied, only hashed.
PROFILE_FIELDS = ("email", "first_name", "last_name")


def apply_profile_update(user: User, update: ProfileUpdateRequest) -> List[str]:
    """
    Merge a partial profile update into `user` and return the changed attribute names.

    Merge rule (every listed field): overwrite when the payload carries a
    non-empty value; absent, null and "" leave the stored value unchanged.
    Emails are normalised before comparison and assignment.
    """
    changed: List[str] = []
    for field in PROFILE_FIELDS:
        value: Optional[str] = getattr(update, field)
        if field == "email":
            value = normalize_email(value)
        if not value or value == getattr(user, field):
            continue
        setattr(user, field, value)
        changed.append(field)
    return changed


def to_user_read(user: User) -> UserRead:
    return UserRead(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        roles=user.granted_roles,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def to_auth_response(user: User) -> AuthResponse:
    return AuthResponse(
        user=user.user_identifier,
        api_token=user.api_token,
        roles=user.granted_roles,
    )


class AuthService:
    """
    Business logic for account registration, login and self-service profile edits.

    Error Handling Strategy:
        Every rejection is a typed application exception (DuplicateIdentityError,
        InvalidCredentialError, UnauthenticatedError, ForbiddenError). Nothing is
        persisted unless both the password hash and the API token were produced.
    """

    def __init__(self, hasher: Optional[PasswordHasher] = None):
        self._hasher = hasher or password_hasher

    async def register(self, store: UserStore, payload: RegistrationRequest) -> AuthResponse:
        """
        Create a new account from an untrusted registration payload.

        The new user always gets roles == [ROLE_USER] and a freshly issued API
        token; role or token values present in the payload are never read.

        Raises:
            DuplicateIdentityError: email empty or already registered
            InvalidCredentialError: password empty or missing
            HashingError: hashing backend failure (nothing is persisted)
        """
        email = normalize_email(payload.email)
        if not email:
            raise DuplicateIdentityError(message="An email address is required to register")
        if await store.find_by_email(email) is not None:
            raise DuplicateIdentityError()
        if not payload.password:
            raise InvalidCredentialError()

        user = User(
            email=email,
            first_name=payload.first_name,
            last_name=payload.last_name,
            password_hash=self._hasher.hash(payload.password),
            created_at=datetime.now(timezone.utc),
        )
        await store.create(user)
        logger.info("Registered user id=%s", user.id)
        return to_auth_response(user)

    async def login(self, store: UserStore, credentials: LoginRequest) -> AuthResponse:
        """
        Authenticate a username (email) / password pair.

        Unknown email and wrong password raise the same UnauthenticatedError.
        The stored token is returned as is; login never mutates the record.
        """
        username = normalize_email(credentials.username)
        password = credentials.password or ""
        if not username or not password:
            logger.warning("Login rejected: missing credentials")
            raise UnauthenticatedError(message="Missing credentials")

        user = await store.find_by_email(username)
        if user is None:
            self._hasher.dummy_verify(password)
            logger.warning("Login rejected: invalid credentials")
            raise UnauthenticatedError()
        if not self._hasher.verify(password, user.password_hash):
            logger.warning("Login rejected: invalid credentials for user id=%s", user.id)
            raise UnauthenticatedError()

        logger.info("User id=%s logged in", user.id)
        return to_auth_response(user)

    def get_profile(self, user: User, user_id: Optional[int] = None) -> UserRead:
        """Read projection of the authenticated user; `user_id` must be their own id."""
        self._ensure_self(user, user_id)
        return to_user_read(user)

    async def edit_profile(
        self,
        store: UserStore,
        user: User,
        update: ProfileUpdateRequest,
        user_id: Optional[int] = None,
    ) -> User:
        """
        Apply a partial profile update to the authenticated user.

        Steps:
            1. Refuse when `user_id` names another account (ForbiddenError)
            2. Refuse an email already owned by another account (DuplicateIdentityError)
            3. Merge email / firstName / lastName (present and non-empty only)
            4. Rehash the password only when a non-empty one was sent
            5. Stamp updated_at and persist

        api_token, roles and created_at are never touched.
        """
        self._ensure_self(user, user_id)

        new_email = normalize_email(update.email)
        if new_email and new_email != user.email:
            owner = await store.find_by_email(new_email)
            if owner is not None and owner.id != user.id:
                raise DuplicateIdentityError()

        changed = apply_profile_update(user, update)
        if update.password:
            user.password_hash = self._hasher.hash(update.password)
            changed.append("password")

        user.updated_at = datetime.now(timezone.utc)
        await store.update(user)
        logger.info("User id=%s updated profile fields: %s", user.id, ", ".join(changed) or "none")
        return user

    @staticmethod
    def _ensure_self(user: User, user_id: Optional[int]) -> None:
        if user_id is not None and user_id != user.id:
            logger.warning("User id=%s attempted to access user id=%s", user.id, user_id)
            raise ForbiddenError()


auth_service = AuthService()
