"""
Puff Backend: Auth Service
==========================

What:  Local email/password accounts and the bearer tokens that prove them.
How:   Passwords are salted and stretched with PBKDF2-HMAC-SHA256; access
       tokens are HS256 JWTs signed with settings.jwt_secret_key.
Who:   /api/auth routes (signup, login) and the get_current_user dependency.

Token claims:
    sub   user id (UUID string)
    type  always "access"; anything else is rejected
    iat   issue time
    exp   iat + settings.access_token_expire_minutes
"""

import hashlib
import hmac
import logging
import secrets
import uuid
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Tuple

import jwt
from sqlalchemy import select
from starlette.concurrency import run_in_threadpool
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from puff.config import settings
from puff.exceptions import AuthenticationError, ConflictError, DatabaseError
from puff.models.user import User
from puff.schemas.user import LoginRequest, SignUpRequest, TokenResponse, UserResponse
from puff.timeutils import utcnow

logger = logging.getLogger(__name__)

# Same wording for unknown email and wrong password
LOGIN_FAILED_MESSAGE = "Incorrect email or password"

# Verified against when the email is unknown; matches no real password
_DUMMY_SALT = secrets.token_hex(32)
_DUMMY_HASH = secrets.token_hex(32)


# ── Password Hashing ──────────────────────────────────────────────────────

def hash_password(password: str, salt: Optional[bytes] = None) -> Tuple[str, str]:
    """
    Hash a password using PBKDF2-HMAC-SHA256.

    Returns:
        (salt_hex, hash_hex) for storage on the user row
    """
    if salt is None:
        salt = secrets.token_bytes(32)

    password_hash = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt, settings.password_hash_iterations
    )
    return salt.hex(), password_hash.hex()


def verify_password(password: str, salt_hex: str, hash_hex: str) -> bool:
    """Constant-time check of a password against a stored salt and hash."""
    if not password or not salt_hex or not hash_hex:
        return False

    try:
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except ValueError:
        return False

    computed_hash = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt, settings.password_hash_iterations
    )
    return hmac.compare_digest(computed_hash, stored_hash)


# ── Access Tokens ─────────────────────────────────────────────────────────

def create_access_token(user_id: uuid.UUID, now: Optional[datetime] = None) -> Tuple[str, datetime]:
    """Returns (token, expires_at)."""
    issued_at = now or utcnow()
    expires_at = issued_at + timedelta(minutes=settings.access_token_expire_minutes)
    payload = {
        "sub": str(user_id),
        "type": "access",
        "iat": issued_at,
        "exp": expires_at,
    }
    token = jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
    return token, expires_at


def decode_access_token(token: str) -> uuid.UUID:
    """
    Verify a bearer token and return the user id it was issued for.

    Raises:
        AuthenticationError: expired, tampered, wrong type or malformed subject
    """
    try:
        payload: Dict[str, Any] = jwt.decode(
            token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm]
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Access token has expired")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid access token")

    if payload.get("type") != "access":
        raise AuthenticationError("Invalid token type")

    try:
        return uuid.UUID(str(payload.get("sub")))
    except ValueError:
        raise AuthenticationError("Invalid access token")


class AuthService:
    """Account creation and credential checks."""

    async def signup(self, db: AsyncSession, body: SignUpRequest) -> TokenResponse:
        """
        Create an account and sign it in.

        Raises:
            ConflictError: the email is already registered (→ 409)
        """
        try:
            existing = await db.execute(select(User.id).where(User.email == body.email))
            if existing.scalar_one_or_none() is not None:
                raise ConflictError(
                    "An account with this email already exists",
                    context={"field": "email"},
                )

            # PBKDF2 is CPU bound; keep it off the event loop
            salt_hex, hash_hex = await run_in_threadpool(hash_password, body.password)
            user = User(
                email=body.email,
                name=body.name,
                password_salt=salt_hex,
                password_hash=hash_hex,
            )
            db.add(user)
            await db.flush()
        except ConflictError:
            raise
        except IntegrityError:
            # Lost a race with a concurrent signup for the same email
            raise ConflictError(
                "An account with this email already exists",
                context={"field": "email"},
            )
        except SQLAlchemyError as e:
            logger.error("Database error during signup: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create your account. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Account created: %s", user.id)
        return self._token_response(user)

    async def login(self, db: AsyncSession, body: LoginRequest) -> TokenResponse:
        try:
            result = await db.execute(select(User).where(User.email == body.email))
            user = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error during login: %s", str(e), exc_info=True)
            raise DatabaseError(message="Could not sign you in. Please try again.")

        if user is None:
            # Same PBKDF2 cost as a real check so timing does not reveal registered emails
            await run_in_threadpool(verify_password, body.password, _DUMMY_SALT, _DUMMY_HASH)
            logger.info("Failed login attempt")
            raise AuthenticationError(LOGIN_FAILED_MESSAGE)

        if not await run_in_threadpool(
            verify_password, body.password, user.password_salt, user.password_hash
        ):
            logger.info("Failed login attempt")
            raise AuthenticationError(LOGIN_FAILED_MESSAGE)

        return self._token_response(user)

    async def get_user(self, db: AsyncSession, user_id: uuid.UUID) -> User:
        """Load the token's user; a deleted account invalidates its tokens."""
        try:
            user = await db.get(User, user_id)
        except SQLAlchemyError as e:
            logger.error("Database error loading user %s: %s", user_id, str(e))
            raise DatabaseError(message="Could not verify your session. Please try again.")

        if user is None:
            raise AuthenticationError()
        return user

    @staticmethod
    def _token_response(user: User) -> TokenResponse:
        token, expires_at = create_access_token(user.id)
        return TokenResponse(
            access_token=token,
            expires_at=expires_at,
            user=UserResponse.model_validate(user),
        )


auth_service = AuthService()
