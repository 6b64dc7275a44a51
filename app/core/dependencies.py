# app/core/dependencies.py
"""Request dependencies: the current user, approval/role gates and the cron secret."""
from typing import Optional
from uuid import UUID
import secrets

from fastapi import Depends, Header
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from .config import settings
from .database import get_db
from .exceptions import AuthenticationError, PermissionDenied
from .security import decode_access_token
from ..models.user import User

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    if not token:
        raise AuthenticationError()

    payload = decode_access_token(token)
    if not payload or not payload.get("sub"):
        raise AuthenticationError("Invalid token")

    try:
        user_id = UUID(payload["sub"])
    except ValueError:
        raise AuthenticationError("Invalid token")

    user = await db.get(User, user_id)
    if not user:
        raise AuthenticationError("User not found")
    return user


async def require_approved_user(user: User = Depends(get_current_user)) -> User:
    # Pending accounts may hold a token issued before approval was revoked
    if not user.is_approved:
        raise AuthenticationError()
    return user


async def require_admin(user: User = Depends(require_approved_user)) -> User:
    if not user.is_admin:
        raise PermissionDenied()
    return user


async def verify_cron_secret(authorization: Optional[str] = Header(default=None)) -> None:
    """Sweep endpoints accept only 'Bearer <CRON_SECRET>'; with no secret configured nothing passes"""
    expected = settings.cron_secret
    if not expected or not authorization:
        raise AuthenticationError()
    if not secrets.compare_digest(authorization, f"Bearer {expected}"):
        raise AuthenticationError()
