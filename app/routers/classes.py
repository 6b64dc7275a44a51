# app/routers/classes.py
from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import require_admin, require_approved_user
from ..models.class_model import ClassStatus
from ..models.user import User
from ..schemas.class_schemas import (
    BulkDeleteRequest, ClassCreate, ClassResponse, ClassUpdate, ClassUpgradeRequest
)
from ..services.class_service import ClassService

router = APIRouter(prefix="/api/classes", tags=["Classes"])


@router.get("", response_model=List[ClassResponse])
async def list_classes(
    status: Optional[ClassStatus] = Query(None),
    user: User = Depends(require_approved_user),
    db: AsyncSession = Depends(get_db)
):
    return await ClassService(db).list_classes(status)


@router.post("", response_model=ClassResponse, status_code=201)
async def create_class(
    data: ClassCreate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return await ClassService(db).create_class(data, admin.name)


@router.post("/bulk-delete")
async def bulk_delete_classes(
    data: BulkDeleteRequest,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return await ClassService(db).bulk_delete(data.ids, admin.name)


@router.get("/{class_id}", response_model=ClassResponse)
async def get_class(
    class_id: UUID,
    user: User = Depends(require_approved_user),
    db: AsyncSession = Depends(get_db)
):
    return await ClassService(db).get_class(class_id)


@router.patch("/{class_id}", response_model=ClassResponse)
async def update_class(
    class_id: UUID,
    data: ClassUpdate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return await ClassService(db).update_class(class_id, data)


@router.delete("/{class_id}")
async def delete_class(
    class_id: UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    await ClassService(db).delete_class(class_id, admin.name)
    return {"message": "Class deleted successfully"}


@router.post("/{class_id}/upgrade")
async def upgrade_class(
    class_id: UUID,
    data: ClassUpgradeRequest,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Move the students of a completed class into a new or existing class"""
    result = await ClassService(db).upgrade_class(class_id, data, admin.name)
    return {
        "message": result["message"],
        "new_class": ClassResponse.model_validate(result["new_class"]).model_dump(mode="json"),
        "moved_students": result["moved_students"],
    }
