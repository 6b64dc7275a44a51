# app/services/report_schedule_service.py
"""Recurring emailed reports: scheduling and dispatch of due schedules."""
from typing import List, Optional, Dict, Any
from datetime import datetime, time, timedelta, timezone
import calendar
import logging

from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from .base_service import BaseService
from .email_service import EmailService, render_report_email
from .report_service import ReportService
from ..core.exceptions import ValidationError
from ..models.report_schedule import ReportSchedule, ScheduleType
from ..schemas.report_schemas import ReportScheduleCreate

logger = logging.getLogger(__name__)

SEND_HOUR = time(9, 0)


def _add_month(moment: datetime) -> datetime:
    year, month = (moment.year + 1, 1) if moment.month == 12 else (moment.year, moment.month + 1)
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def compute_next_run(schedule_type: ScheduleType, now: datetime) -> datetime:
    """Weekly: the coming Sunday at 09:00 (a week out on Sundays). Monthly: the 1st of next month at 09:00"""
    if schedule_type == ScheduleType.WEEKLY:
        days_until_sunday = (6 - now.weekday()) % 7 or 7
        run_day = now.date() + timedelta(days=days_until_sunday)
    else:
        run_day = _add_month(now.replace(day=1)).date()
    return datetime.combine(run_day, SEND_HOUR, tzinfo=now.tzinfo or timezone.utc)


def advance_next_run(schedule_type: ScheduleType, current: datetime) -> datetime:
    if schedule_type == ScheduleType.WEEKLY:
        return current + timedelta(days=7)
    return _add_month(current)


class ReportScheduleService(BaseService[ReportSchedule]):
    def __init__(self, db: AsyncSession):
        super().__init__(ReportSchedule, db)

    async def schedule_report(self, data: Dict[str, Any], now: Optional[datetime] = None) -> ReportSchedule:
        if not data.get("type") or not data.get("email"):
            raise ValidationError("Type and email are required")
        if data["type"] not in [t.value for t in ScheduleType]:
            raise ValidationError("Type must be 'weekly' or 'monthly'")
        try:
            payload = ReportScheduleCreate.model_validate(data)
        except SchemaValidationError:
            raise ValidationError("Invalid schedule data")

        now = now or datetime.now(timezone.utc)
        schedule = await self.create({
            **payload.model_dump(),
            "next_run": compute_next_run(payload.type, now),
        })
        logger.info(f"Scheduled {payload.type.value} report {schedule.id} for {payload.email}")
        return schedule

    async def list_schedules(self) -> List[ReportSchedule]:
        return await self.get_multi(order_by="next_run")

    async def dispatch_due(self, now: Optional[datetime] = None) -> Dict[str, int]:
        """Email every due report and move its next run forward; failures stay due"""
        now = now or datetime.now(timezone.utc)
        result = await self.db.execute(
            select(ReportSchedule).where(ReportSchedule.next_run <= now).order_by(ReportSchedule.next_run)
        )
        due = list(result.scalars().all())
        if not due:
            return {"due": 0, "sent": 0, "failed": 0}

        reports = ReportService(self.db)
        sent = failed = 0
        for schedule in due:
            try:
                report = await reports.generate_report(
                    schedule.type.value, class_id=schedule.class_id, student_id=schedule.student_id
                )
                await EmailService().send(
                    schedule.email,
                    f"Your {schedule.type.value} attendance report",
                    render_report_email(report),
                )
            except Exception as e:
                logger.error(f"Failed to send scheduled report {schedule.id}: {e}")
                failed += 1
                continue

            next_run = schedule.next_run
            if next_run.tzinfo is None:
                # SQLite hands back naive UTC
                next_run = next_run.replace(tzinfo=timezone.utc)
            schedule.next_run = advance_next_run(schedule.type, next_run)
            schedule.last_run = now
            await self.db.commit()
            sent += 1

        logger.info(f"Report dispatch: {sent} sent, {failed} failed of {len(due)} due")
        return {"due": len(due), "sent": sent, "failed": failed}
