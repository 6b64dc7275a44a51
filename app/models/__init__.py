# app/models/__init__.py
"""Import all models here so Alembic and create_all see every table."""
from .base import Base

from .user import User, UserPreference, UserRole
from .class_model import ClassModel, ClassStatus
from .student import Student
from .attendance import Attendance, AttendanceStatus
from .fee import Fee
from .notification import Notification, NotificationType, EntityType
from .password_reset import PasswordResetCode
from .report_schedule import ReportSchedule, ScheduleType
