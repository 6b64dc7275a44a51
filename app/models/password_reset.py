# app/models/password_reset.py
from sqlalchemy import Boolean, Column, DateTime, String

from .base import Base


class PasswordResetCode(Base):
    __tablename__ = "password_reset_codes"

    # Keyed by email, not by user id, so unknown addresses never touch this table
    email = Column(String(255), nullable=False, index=True)
    code = Column(String(6), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    is_used = Column(Boolean, nullable=False, default=False)
