# app/routers/notifications.py
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import require_approved_user
from ..core.exceptions import NotFoundError
from ..models.user import User
from ..schemas.notification_schemas import NotificationCreate, NotificationResponse, NotificationUpdate
from ..services.notification_service import NotificationService

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


@router.get("", response_model=List[NotificationResponse])
async def list_notifications(
    limit: int = Query(100, ge=1, le=500),
    user: User = Depends(require_approved_user),
    db: AsyncSession = Depends(get_db)
):
    """Activity feed, newest first"""
    return await NotificationService(db).list_notifications(limit)


@router.get("/unread")
async def unread_count(user: User = Depends(require_approved_user), db: AsyncSession = Depends(get_db)):
    return {"count": await NotificationService(db).unread_count()}


@router.post("/mark-all-read")
async def mark_all_read(user: User = Depends(require_approved_user), db: AsyncSession = Depends(get_db)):
    updated = await NotificationService(db).mark_all_read()
    return {"message": "All notifications marked as read", "updated": updated}


@router.post("", response_model=NotificationResponse, status_code=201)
async def create_notification(
    data: NotificationCreate,
    user: User = Depends(require_approved_user),
    db: AsyncSession = Depends(get_db)
):
    return await NotificationService(db).create(data.model_dump())


@router.patch("/{notification_id}", response_model=NotificationResponse)
async def update_notification(
    notification_id: UUID,
    data: NotificationUpdate,
    user: User = Depends(require_approved_user),
    db: AsyncSession = Depends(get_db)
):
    # Only the read flag is mutable
    notification = await NotificationService(db).update(notification_id, data.model_dump(exclude_none=True))
    if not notification:
        raise NotFoundError("Notification")
    return notification


@router.delete("/{notification_id}")
async def delete_notification(
    notification_id: UUID,
    user: User = Depends(require_approved_user),
    db: AsyncSession = Depends(get_db)
):
    if not await NotificationService(db).hard_delete(notification_id):
        raise NotFoundError("Notification")
    return {"message": "Notification deleted successfully"}
