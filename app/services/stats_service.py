# app/services/stats_service.py
from typing import Dict, Any, Optional
from datetime import date, timedelta

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from ..models.attendance import Attendance, AttendanceStatus
from ..models.student import Student


def _rate(attended: int, total: int) -> float:
    return round(attended / total * 100, 1) if total else 0.0


class StatsService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _status_counts(self, start: date, end: date) -> Dict[AttendanceStatus, int]:
        stmt = (
            select(Attendance.status, func.count())
            .where(Attendance.date >= start, Attendance.date <= end)
            .group_by(Attendance.status)
        )
        result = await self.db.execute(stmt)
        counts = {status: 0 for status in AttendanceStatus}
        for status, count in result.all():
            counts[status] = count
        return counts

    async def dashboard_stats(self, today: Optional[date] = None) -> Dict[str, Any]:
        """Today's rate is against all students; the 7-day rate is against recorded rows"""
        today = today or date.today()
        total_students = (await self.db.execute(select(func.count()).select_from(Student))).scalar()

        today_counts = await self._status_counts(today, today)
        week_counts = await self._status_counts(today - timedelta(days=7), today)

        present = today_counts[AttendanceStatus.PRESENT]
        late = today_counts[AttendanceStatus.LATE]
        week_attended = week_counts[AttendanceStatus.PRESENT] + week_counts[AttendanceStatus.LATE]

        return {
            "total_students": total_students,
            "present_today": present,
            "absent_today": today_counts[AttendanceStatus.ABSENT],
            "late_today": late,
            "today_attendance_rate": _rate(present + late, total_students),
            "week_attendance_rate": _rate(week_attended, sum(week_counts.values())),
        }
