# app/services/password_reset_service.py
"""Password recovery: issue, verify and consume short-lived 6-digit codes."""
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional
import logging
import re
import secrets

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete

from .base_service import BaseService
from .email_service import EmailService, render_password_reset_email
from ..core.config import settings
from ..core.exceptions import NotFoundError, ValidationError
from ..core.security import hash_password
from ..models.password_reset import PasswordResetCode
from ..models.user import User

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
CODE_PATTERN = re.compile(r"^\d{6}$")

GENERIC_ISSUE_MESSAGE = "If an account with this email exists, we've sent a password reset code."
INVALID_CODE_MESSAGE = "Invalid or expired verification code"


def generate_reset_code() -> str:
    return str(100000 + secrets.randbelow(900000))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PasswordResetService(BaseService[PasswordResetCode]):
    def __init__(self, db: AsyncSession):
        super().__init__(PasswordResetCode, db)

    async def issue_code(self, email: str) -> Dict[str, Any]:
        email = (email or "").strip().lower()
        if not EMAIL_PATTERN.match(email):
            raise ValidationError("Please enter a valid email address")

        result = await self.db.execute(select(User.id).where(User.email == email))
        if result.scalar_one_or_none() is None:
            # Same answer for unknown addresses
            return {"message": GENERIC_ISSUE_MESSAGE}

        # Only the newest code for an address is ever valid
        await self.db.execute(delete(PasswordResetCode).where(PasswordResetCode.email == email))
        code = generate_reset_code()
        self.db.add(PasswordResetCode(
            email=email,
            code=code,
            expires_at=_utcnow() + timedelta(minutes=settings.reset_code_ttl_minutes),
            is_used=False,
        ))
        await self.db.commit()

        try:
            await EmailService().send(email, "Reset Your Password - Attendance App", render_password_reset_email(code))
            logger.info(f"Password reset code sent to {email}")
        except Exception as e:
            logger.error(f"Failed to send password reset email to {email}: {e}")

        return {"message": GENERIC_ISSUE_MESSAGE}

    async def _find_code(self, email: str, code: str, is_used: bool) -> Optional[PasswordResetCode]:
        stmt = select(PasswordResetCode).where(
            PasswordResetCode.email == email,
            PasswordResetCode.code == code,
            PasswordResetCode.is_used.is_(is_used),
            PasswordResetCode.expires_at > _utcnow(),
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def verify_code(self, email: str, code: str) -> Dict[str, Any]:
        email = (email or "").strip().lower()
        code = (code or "").strip()
        if not email or not code:
            raise ValidationError("Email and verification code are required")
        if not CODE_PATTERN.match(code):
            raise ValidationError("Verification code must be 6 digits")

        reset_code = await self._find_code(email, code, is_used=False)
        if not reset_code:
            raise ValidationError(INVALID_CODE_MESSAGE)

        reset_code.is_used = True
        await self.db.commit()
        return {"message": "Code verified successfully", "valid": True}

    async def reset_password(self, email: str, code: str, new_password: str) -> Dict[str, Any]:
        email = (email or "").strip().lower()
        code = (code or "").strip()
        if not email or not code or not new_password:
            raise ValidationError("Email, code, and new password are required")
        if len(new_password) < 6:
            raise ValidationError("Password must be at least 6 characters long")

        # The code must have gone through verification first
        reset_code = await self._find_code(email, code, is_used=True)
        if not reset_code:
            raise ValidationError(INVALID_CODE_MESSAGE)

        result = await self.db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()
        if not user:
            raise NotFoundError("User")

        user.password = hash_password(new_password)
        await self.db.delete(reset_code)
        await self.db.commit()
        logger.info(f"Password reset completed for user {user.id}")
        return {"message": "Password reset successfully", "success": True}
