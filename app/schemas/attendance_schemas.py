# app/schemas/attendance_schemas.py
import datetime as dt
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict

from ..models.attendance import AttendanceStatus


class AttendanceCreate(BaseModel):
    student_id: UUID
    class_id: UUID
    date: dt.date
    status: AttendanceStatus


class AttendanceUpdate(BaseModel):
    status: Optional[AttendanceStatus] = None
    date: Optional[dt.date] = None


class AttendanceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    student_id: UUID
    class_id: UUID
    date: dt.date
    status: AttendanceStatus
    created_at: Optional[dt.datetime] = None
