# app/schemas/user_schemas.py
"""Pydantic schemas for user management and preferences."""
from typing import Optional
from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field, StrictBool

from ..models.user import UserRole


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    role: UserRole
    is_approved: bool
    avatar: Optional[str] = None
    created_at: Optional[datetime] = None


class UserUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    avatar: Optional[str] = Field(default=None, max_length=500)
    current_password: Optional[str] = None
    new_password: Optional[str] = Field(default=None, min_length=6, max_length=128)
    role: Optional[UserRole] = None


class ApprovalRequest(BaseModel):
    user_id: UUID
    approved: StrictBool


class PreferencesPayload(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    push_notifications: StrictBool
    email_updates: StrictBool
