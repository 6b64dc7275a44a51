# app/schemas/notification_schemas.py
from typing import Optional
from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field

from ..models.notification import EntityType, NotificationType


class NotificationCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    type: NotificationType
    entity_type: Optional[EntityType] = None
    entity_id: Optional[str] = Field(default=None, max_length=64)
    actor_name: Optional[str] = Field(default=None, max_length=100)
    action: Optional[str] = Field(default=None, max_length=20)


class NotificationUpdate(BaseModel):
    is_read: Optional[bool] = None


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    message: str
    type: NotificationType
    entity_type: Optional[EntityType] = None
    entity_id: Optional[str] = None
    actor_name: Optional[str] = None
    action: Optional[str] = None
    is_read: bool
    created_at: Optional[datetime] = None
