# app/services/report_service.py
"""Attendance reports: date-range resolution, bucketing and the report payload."""
from typing import List, Optional, Dict, Any, Tuple, Iterable, Mapping
from uuid import UUID
from datetime import date, timedelta
import calendar
import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from ..core.exceptions import ValidationError
from ..models.attendance import Attendance, AttendanceStatus
from ..models.class_model import ClassModel
from ..models.student import Student
from ..schemas.attendance_schemas import AttendanceResponse
from ..schemas.class_schemas import ClassResponse
from ..schemas.report_schemas import ReportType
from ..schemas.student_schemas import StudentResponse

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"


def resolve_report_range(
    report_type: str,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    today: Optional[date] = None,
) -> Tuple[date, date]:
    """
    Explicit bounds win when both are given. Otherwise the range is the day,
    the Sunday-to-Saturday week or the calendar month containing ``today``;
    unrecognised types behave like daily.
    """
    if start_date and end_date:
        if start_date > end_date:
            raise ValidationError("start_date cannot be after end_date")
        return start_date, end_date

    today = today or date.today()
    if report_type == ReportType.WEEKLY.value:
        start = today - timedelta(days=(today.weekday() + 1) % 7)
        return start, start + timedelta(days=6)
    if report_type == ReportType.MONTHLY.value:
        last_day = calendar.monthrange(today.year, today.month)[1]
        return today.replace(day=1), today.replace(day=last_day)
    return today, today


def _empty_bucket() -> Dict[str, int]:
    counts = {status.value: 0 for status in AttendanceStatus}
    counts["total"] = 0
    return counts


def summarize_attendance(
    records: Iterable[Attendance],
    student_names: Mapping[UUID, str],
    class_names: Mapping[UUID, str],
) -> Dict[str, Any]:
    """Totals, rate and the three chart groupings (insertion ordered)"""
    totals = _empty_bucket()
    by_date: Dict[str, Dict[str, int]] = {}
    by_class: Dict[str, Dict[str, int]] = {}
    by_student: Dict[str, Dict[str, int]] = {}

    for record in records:
        status = record.status.value
        keys = (
            (by_date, record.date.isoformat()),
            (by_class, class_names.get(record.class_id, UNKNOWN)),
            (by_student, student_names.get(record.student_id, UNKNOWN)),
        )
        for bucket, key in keys:
            counts = bucket.setdefault(key, _empty_bucket())
            counts[status] += 1
            counts["total"] += 1
        totals[status] += 1
        totals["total"] += 1

    total = totals["total"]
    attended = totals[AttendanceStatus.PRESENT.value] + totals[AttendanceStatus.LATE.value]
    rate = round(attended / total * 100, 1) if total else 0.0

    return {
        "summary": {
            "total_records": total,
            "present_count": totals[AttendanceStatus.PRESENT.value],
            "absent_count": totals[AttendanceStatus.ABSENT.value],
            "late_count": totals[AttendanceStatus.LATE.value],
            "attendance_rate": rate,
        },
        "charts": {
            "by_date": [{"date": key, **counts} for key, counts in by_date.items()],
            "by_class": [{"class": key, **counts} for key, counts in by_class.items()],
            "by_student": [{"student": key, **counts} for key, counts in by_student.items()],
        },
    }


class ReportService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def generate_report(
        self,
        report_type: str = ReportType.DAILY.value,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        class_id: Optional[UUID] = None,
        student_id: Optional[UUID] = None,
        today: Optional[date] = None,
    ) -> Dict[str, Any]:
        start, end = resolve_report_range(report_type, start_date, end_date, today)

        stmt = (
            select(Attendance)
            .where(Attendance.date >= start, Attendance.date <= end)
            .order_by(Attendance.date.asc(), Attendance.created_at.asc())
        )
        if class_id:
            stmt = stmt.where(Attendance.class_id == class_id)
        if student_id:
            stmt = stmt.where(Attendance.student_id == student_id)
        records: List[Attendance] = list((await self.db.execute(stmt)).scalars().all())

        students = {}
        classes = {}
        student_ids = {r.student_id for r in records}
        class_ids = {r.class_id for r in records}
        if student_ids:
            result = await self.db.execute(select(Student).where(Student.id.in_(student_ids)))
            students = {s.id: s for s in result.scalars().all()}
        if class_ids:
            result = await self.db.execute(select(ClassModel).where(ClassModel.id.in_(class_ids)))
            classes = {c.id: c for c in result.scalars().all()}

        aggregated = summarize_attendance(
            records,
            {sid: s.name for sid, s in students.items()},
            {cid: c.name for cid, c in classes.items()},
        )

        attendance = []
        for record in records:
            student = students.get(record.student_id)
            class_obj = classes.get(record.class_id)
            attendance.append({
                **AttendanceResponse.model_validate(record).model_dump(mode="json"),
                "student": StudentResponse.model_validate(student).model_dump(mode="json") if student else None,
                "class": ClassResponse.model_validate(class_obj).model_dump(mode="json") if class_obj else None,
            })

        logger.debug(f"Report {report_type} {start}..{end}: {len(records)} record(s)")
        return {
            "type": report_type,
            "start_date": start.isoformat(),
            "end_date": end.isoformat(),
            "summary": aggregated["summary"],
            "attendance": attendance,
            "charts": aggregated["charts"],
        }
