# app/schemas/report_schemas.py
import enum
from typing import Optional
from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, ConfigDict, EmailStr

from ..models.report_schedule import ScheduleType


class ReportType(str, enum.Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"


class ReportScheduleCreate(BaseModel):
    type: ScheduleType
    email: EmailStr
    class_id: Optional[UUID] = None
    student_id: Optional[UUID] = None


class ReportScheduleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    type: ScheduleType
    email: str
    class_id: Optional[UUID] = None
    student_id: Optional[UUID] = None
    next_run: datetime
    last_run: Optional[datetime] = None
    created_at: Optional[datetime] = None
