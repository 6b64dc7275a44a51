# app/routers/attendance.py
from typing import List, Optional
from uuid import UUID
from datetime import date
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import require_approved_user
from ..models.user import User
from ..schemas.attendance_schemas import AttendanceCreate, AttendanceResponse, AttendanceUpdate
from ..services.attendance_service import AttendanceService

router = APIRouter(prefix="/api/attendance", tags=["Attendance"])


@router.get("", response_model=List[AttendanceResponse])
async def list_attendance(
    class_id: Optional[UUID] = Query(None),
    on: Optional[date] = Query(None, alias="date"),
    student_id: Optional[UUID] = Query(None),
    user: User = Depends(require_approved_user),
    db: AsyncSession = Depends(get_db)
):
    """Attendance for a class on a date, for a student, or everything"""
    return await AttendanceService(db).list_attendance(class_id, on, student_id)


@router.post("", response_model=AttendanceResponse, status_code=201)
async def create_attendance(
    data: AttendanceCreate,
    user: User = Depends(require_approved_user),
    db: AsyncSession = Depends(get_db)
):
    return await AttendanceService(db).create_attendance(data, user.name)


@router.put("", response_model=List[AttendanceResponse])
async def bulk_upsert_attendance(
    records: List[AttendanceCreate],
    user: User = Depends(require_approved_user),
    db: AsyncSession = Depends(get_db)
):
    """Save a whole register in one call; existing rows for the same student and day are overwritten"""
    return await AttendanceService(db).bulk_upsert(records, user.name)


@router.get("/{attendance_id}", response_model=AttendanceResponse)
async def get_attendance(
    attendance_id: UUID,
    user: User = Depends(require_approved_user),
    db: AsyncSession = Depends(get_db)
):
    return await AttendanceService(db).get_attendance(attendance_id)


@router.patch("/{attendance_id}", response_model=AttendanceResponse)
async def update_attendance(
    attendance_id: UUID,
    data: AttendanceUpdate,
    user: User = Depends(require_approved_user),
    db: AsyncSession = Depends(get_db)
):
    return await AttendanceService(db).update_attendance(attendance_id, data, user.name)


@router.delete("/{attendance_id}")
async def delete_attendance(
    attendance_id: UUID,
    user: User = Depends(require_approved_user),
    db: AsyncSession = Depends(get_db)
):
    await AttendanceService(db).delete_attendance(attendance_id, user.name)
    return {"message": "Attendance record deleted successfully"}
