from .base_service import BaseService
from .user_service import UserService
from .password_reset_service import PasswordResetService
from .student_service import StudentService
from .class_service import ClassService
from .attendance_service import AttendanceService
from .fee_service import FeeService
from .notification_service import NotificationService
from .report_service import ReportService
from .report_schedule_service import ReportScheduleService
from .stats_service import StatsService

__all__ = [
    "BaseService",
    "UserService",
    "PasswordResetService",
    "StudentService",
    "ClassService",
    "AttendanceService",
    "FeeService",
    "NotificationService",
    "ReportService",
    "ReportScheduleService",
    "StatsService"
]
