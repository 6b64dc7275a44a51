# app/models/report_schedule.py
import enum

from sqlalchemy import Column, DateTime, String, Uuid

from .base import Base, enum_column_type


class ScheduleType(enum.Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class ReportSchedule(Base):
    __tablename__ = "report_schedules"

    type = Column(enum_column_type(ScheduleType), nullable=False)
    email = Column(String(255), nullable=False)
    class_id = Column(Uuid(as_uuid=True))
    student_id = Column(Uuid(as_uuid=True))
    next_run = Column(DateTime(timezone=True), nullable=False, index=True)
    last_run = Column(DateTime(timezone=True))
