# app/models/notification.py
import enum

from sqlalchemy import Boolean, Column, String, Text, Uuid

from .base import Base, enum_column_type


class NotificationType(enum.Enum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    CLASS = "class"
    STUDENT = "student"
    ATTENDANCE = "attendance"
    FEE = "fee"


class EntityType(enum.Enum):
    CLASS = "class"
    STUDENT = "student"
    ATTENDANCE = "attendance"
    USER = "user"
    FEE = "fee"


class Notification(Base):
    __tablename__ = "notifications"

    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(enum_column_type(NotificationType), nullable=False)
    entity_type = Column(enum_column_type(EntityType))
    entity_id = Column(String(64), index=True)
    actor_name = Column(String(100))
    action = Column(String(20))
    is_read = Column(Boolean, nullable=False, default=False, index=True)
    user_id = Column(Uuid(as_uuid=True), index=True)
