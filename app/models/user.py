# app/models/user.py
import enum

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Uuid, func
from sqlalchemy.orm import relationship

from .base import Base, enum_column_type


class UserRole(enum.Enum):
    ADMIN = "admin"
    TEACHER = "teacher"


class User(Base):
    __tablename__ = "users"

    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(100), nullable=False)
    password = Column(String(255), nullable=False)  # passlib hash
    avatar = Column(String(500))
    role = Column(enum_column_type(UserRole), nullable=False, default=UserRole.TEACHER)
    is_approved = Column(Boolean, nullable=False, default=False, index=True)

    preferences = relationship(
        "UserPreference",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class UserPreference(Base):
    __tablename__ = "user_preferences"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    push_notifications = Column(Boolean, nullable=False, default=True)
    email_updates = Column(Boolean, nullable=False, default=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="preferences")
