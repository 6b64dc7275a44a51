# app/routers/reports.py
from typing import List, Optional, Dict, Any
from uuid import UUID
from datetime import date
from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import require_approved_user
from ..models.user import User
from ..schemas.report_schemas import ReportScheduleResponse, ReportType
from ..services.report_schedule_service import ReportScheduleService
from ..services.report_service import ReportService

router = APIRouter(prefix="/api/reports", tags=["Reports"])


@router.get("")
async def get_report(
    type: str = Query(ReportType.DAILY.value),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    class_id: Optional[UUID] = Query(None),
    student_id: Optional[UUID] = Query(None),
    user: User = Depends(require_approved_user),
    db: AsyncSession = Depends(get_db)
):
    """Attendance summary and chart data for a period"""
    return await ReportService(db).generate_report(type, start_date, end_date, class_id, student_id)


@router.post("/schedule")
async def schedule_report(
    data: Dict[str, Any] = Body(...),
    user: User = Depends(require_approved_user),
    db: AsyncSession = Depends(get_db)
):
    schedule = await ReportScheduleService(db).schedule_report(data)
    return {
        "message": "Report scheduled successfully",
        "scheduled_report": ReportScheduleResponse.model_validate(schedule).model_dump(mode="json"),
    }


@router.get("/schedule")
async def list_scheduled_reports(user: User = Depends(require_approved_user), db: AsyncSession = Depends(get_db)):
    schedules = await ReportScheduleService(db).list_schedules()
    return {
        "scheduled_reports": [
            ReportScheduleResponse.model_validate(s).model_dump(mode="json") for s in schedules
        ]
    }
