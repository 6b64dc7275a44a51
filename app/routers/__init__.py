from . import (
    health, auth, users, classes, students, attendance, fees, notifications, reports, stats, cron
)

__all__ = [
    "health",
    "auth",
    "users",
    "classes",
    "students",
    "attendance",
    "fees",
    "notifications",
    "reports",
    "stats",
    "cron"
]
