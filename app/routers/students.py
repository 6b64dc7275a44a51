# app/routers/students.py
from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import require_approved_user
from ..models.user import User
from ..schemas.student_schemas import StudentCreate, StudentResponse, StudentUpdate
from ..services.student_service import StudentService

router = APIRouter(prefix="/api/students", tags=["Students"])


@router.get("")
async def list_students(
    class_id: Optional[UUID] = Query(None),
    user: User = Depends(require_approved_user),
    db: AsyncSession = Depends(get_db)
):
    """Students with the name of their class"""
    return await StudentService(db).list_students(class_id)


@router.post("", response_model=StudentResponse, status_code=201)
async def create_student(
    data: StudentCreate,
    user: User = Depends(require_approved_user),
    db: AsyncSession = Depends(get_db)
):
    return await StudentService(db).create_student(data, user.name)


@router.get("/{student_id}", response_model=StudentResponse)
async def get_student(
    student_id: UUID,
    user: User = Depends(require_approved_user),
    db: AsyncSession = Depends(get_db)
):
    return await StudentService(db).get_student(student_id)


@router.patch("/{student_id}", response_model=StudentResponse)
async def update_student(
    student_id: UUID,
    data: StudentUpdate,
    user: User = Depends(require_approved_user),
    db: AsyncSession = Depends(get_db)
):
    return await StudentService(db).update_student(student_id, data)


@router.delete("/{student_id}")
async def delete_student(
    student_id: UUID,
    user: User = Depends(require_approved_user),
    db: AsyncSession = Depends(get_db)
):
    await StudentService(db).delete_student(student_id, user.name)
    return {"message": "Student deleted successfully"}
