"""
Quai Antique API — Account Route Handlers
===========================================

What:  Registration, login and self-service profile endpoints.
How:   Builds a SqlAlchemyUserStore around the request session and delegates
       to AuthService. Protected routes depend on get_current_user.

Wire contract:
    POST /api/registration   201 {user, apiToken, roles}
    POST /api/login          200 {user, apiToken, roles} | 401
    GET  /api/me[/{id}]      200 UserRead
    PUT  /api/me/edit/{id}   204 (no body)
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.models.user import User
from app.schemas.common import ErrorResponse
from app.schemas.user import (
    AuthResponse,
    LoginRequest,
    ProfileUpdateRequest,
    RegistrationRequest,
    UserRead,
)
from app.security.authenticator import get_current_user
from app.services.auth_service import auth_service
from app.services.user_store import SqlAlchemyUserStore

router = APIRouter(prefix="/api", tags=["Security"])


@router.post(
    "/registration",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Malformed payload or empty password", "model": ErrorResponse},
        409: {"description": "Email missing or already registered", "model": ErrorResponse},
    },
    summary="Register a new user",
)
async def register(
    payload: RegistrationRequest,
    db: AsyncSession = Depends(get_db_session),
) -> AuthResponse:
    return await auth_service.register(SqlAlchemyUserStore(db), payload)


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={401: {"description": "Invalid or missing credentials", "model": ErrorResponse}},
    summary="Log a user in",
)
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> AuthResponse:
    return await auth_service.login(SqlAlchemyUserStore(db), credentials)


@router.get(
    "/me",
    response_model=UserRead,
    responses={401: {"description": "Missing or invalid API token", "model": ErrorResponse}},
    summary="Get the authenticated user's profile",
)
async def me(user: User = Depends(get_current_user)) -> UserRead:
    return auth_service.get_profile(user)


@router.get(
    "/me/{user_id}",
    response_model=UserRead,
    responses={
        401: {"description": "Missing or invalid API token", "model": ErrorResponse},
        403: {"description": "The id is not the authenticated user's", "model": ErrorResponse},
    },
    summary="Get the authenticated user's profile by id",
)
async def me_by_id(user_id: int, user: User = Depends(get_current_user)) -> UserRead:
    return auth_service.get_profile(user, user_id)


@router.put(
    "/me/edit/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        401: {"description": "Missing or invalid API token", "model": ErrorResponse},
        403: {"description": "The id is not the authenticated user's", "model": ErrorResponse},
        409: {"description": "Email already registered", "model": ErrorResponse},
    },
    summary="Edit the authenticated user's profile",
)
async def edit_profile(
    user_id: int,
    update: ProfileUpdateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await auth_service.edit_profile(SqlAlchemyUserStore(db), user, update, user_id=user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
