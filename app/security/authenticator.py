"""
Quai Antique API — Bearer Token Authenticator
===============================================

What:  FastAPI dependency resolving the request's API token to a User.
How:   Reads `Authorization: Bearer <token>` (or the `X-AUTH-TOKEN` header),
       looks the token up through the UserStore and confirms it with a
       constant-time comparison.
Who:   Injected into every protected route (profile fetch / edit).
"""

import secrets
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.exceptions import UnauthenticatedError
from app.models.user import User
from app.services.user_store import SqlAlchemyUserStore, UserStore

TOKEN_HEADER = "X-AUTH-TOKEN"

_bearer = HTTPBearer(auto_error=False)


async def authenticate_token(store: UserStore, token: Optional[str]) -> User:
    """
    Resolve a raw token to its user.

    Raises:
        UnauthenticatedError: token missing, unknown, or not an exact match.
    """
    if not token:
        raise UnauthenticatedError(message="Missing API token")
    user = await store.find_by_api_token(token)
    if user is None or not secrets.compare_digest(user.api_token, token):
        raise UnauthenticatedError(message="Invalid API token")
    return user


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    db: AsyncSession = Depends(get_db_session),
) -> User:
    token: Optional[str] = None
    if credentials is not None and credentials.scheme.lower() == "bearer":
        token = credentials.credentials.strip()
    if not token:
        token = request.headers.get(TOKEN_HEADER, "").strip()
    return await authenticate_token(SqlAlchemyUserStore(db), token)
