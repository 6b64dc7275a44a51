# app/models/attendance.py
import enum

from sqlalchemy import Column, Date, UniqueConstraint, Uuid

from .base import Base, enum_column_type


class AttendanceStatus(enum.Enum):
    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"


class Attendance(Base):
    __tablename__ = "attendance"

    # student_id/class_id are not foreign keys; rows outlive deleted students and classes
    student_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    class_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    status = Column(enum_column_type(AttendanceStatus), nullable=False)

    __table_args__ = (
        UniqueConstraint("class_id", "student_id", "date", name="uq_attendance_class_student_date"),
    )
