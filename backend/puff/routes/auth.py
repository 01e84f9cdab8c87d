"""
Puff Backend: Auth Routes
=========================

What:  POST /api/auth/signup, POST /api/auth/login, GET /api/auth/me.
How:   Signup and login return a bearer token plus the user; every other
       /api/* route (except the catalog) requires that token.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from puff.database import get_db_session
from puff.dependencies import get_current_user
from puff.models.user import User
from puff.schemas.common import ErrorResponse
from puff.schemas.user import LoginRequest, SignUpRequest, TokenResponse, UserResponse
from puff.services.auth_service import auth_service

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/signup",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"description": "Email already registered", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create an account",
)
async def signup(
    body: SignUpRequest,
    db: AsyncSession = Depends(get_db_session),
) -> TokenResponse:
    return await auth_service.signup(db, body)


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={
        401: {"description": "Wrong email or password", "model": ErrorResponse},
    },
    summary="Sign in with email and password",
)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> TokenResponse:
    return await auth_service.login(db, body)


@router.get(
    "/me",
    response_model=UserResponse,
    responses={401: {"description": "Not signed in", "model": ErrorResponse}},
    summary="Current user profile",
)
async def me(user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse.model_validate(user)
