# app/routers/fees.py
from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import require_approved_user
from ..models.user import User
from ..schemas.fee_schemas import FeeCreate, FeeDetailResponse, FeeResponse, FeeUpdate
from ..services.fee_service import FeeService

router = APIRouter(prefix="/api/fees", tags=["Fees"])


@router.get("", response_model=List[FeeDetailResponse])
async def list_fees(
    student_id: Optional[UUID] = Query(None),
    class_id: Optional[UUID] = Query(None),
    user: User = Depends(require_approved_user),
    db: AsyncSession = Depends(get_db)
):
    return await FeeService(db).list_fees(student_id, class_id)


@router.post("", response_model=FeeResponse, status_code=201)
async def create_fee(
    data: FeeCreate,
    response: Response,
    user: User = Depends(require_approved_user),
    db: AsyncSession = Depends(get_db)
):
    """Record a fee; an existing fee for the same student and class is topped up instead (200)"""
    fee, created = await FeeService(db).create_fee(data)
    if not created:
        response.status_code = 200
    return fee


@router.get("/{fee_id}", response_model=FeeDetailResponse)
async def get_fee(
    fee_id: UUID,
    user: User = Depends(require_approved_user),
    db: AsyncSession = Depends(get_db)
):
    return await FeeService(db).get_fee_detail(fee_id)


@router.patch("/{fee_id}", response_model=FeeResponse)
async def update_fee(
    fee_id: UUID,
    data: FeeUpdate,
    user: User = Depends(require_approved_user),
    db: AsyncSession = Depends(get_db)
):
    return await FeeService(db).update_fee(fee_id, data)


@router.delete("/{fee_id}")
async def delete_fee(
    fee_id: UUID,
    user: User = Depends(require_approved_user),
    db: AsyncSession = Depends(get_db)
):
    return await FeeService(db).delete_fee(fee_id)
