"""
Puff Backend: Request Dependencies
==================================

What:  FastAPI dependencies shared by the authenticated routers.
How:   HTTPBearer with auto_error=False so a missing header goes through our
       AuthenticationError handler (401 + ErrorResponse body) instead of
       FastAPI's default 403.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from puff.database import get_db_session
from puff.exceptions import AuthenticationError
from puff.models.user import User
from puff.services.auth_service import auth_service, decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> User:
    """Resolve `Authorization: Bearer <token>` to the signed-in user."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Not authenticated")

    user_id = decode_access_token(credentials.credentials)
    return await auth_service.get_user(db, user_id)
