# app/routers/users.py
from typing import List, Dict, Any
from uuid import UUID
from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import get_current_user, require_admin, require_approved_user
from ..core.exceptions import NotFoundError, PermissionDenied
from ..models.user import User
from ..schemas.auth_schemas import EmailRequest
from ..schemas.user_schemas import ApprovalRequest, PreferencesPayload, UserResponse, UserUpdate
from ..services.user_service import UserService

router = APIRouter(prefix="/api/users", tags=["Users"])
preferences_router = APIRouter(prefix="/api/user/preferences", tags=["Users"])


@router.get("/count")
async def user_count(db: AsyncSession = Depends(get_db)):
    return {"count": await UserService(db).count_users()}


@router.post("/check-status")
async def check_status(data: EmailRequest, db: AsyncSession = Depends(get_db)):
    return await UserService(db).check_status(data.email)


@router.get("", response_model=List[UserResponse])
async def list_users(admin: User = Depends(require_admin), db: AsyncSession = Depends(get_db)):
    return await UserService(db).list_users()


@router.get("/pending", response_model=List[UserResponse])
async def list_pending_users(admin: User = Depends(require_admin), db: AsyncSession = Depends(get_db)):
    return await UserService(db).list_pending()


@router.post("/approve")
async def approve_user(
    data: ApprovalRequest,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Approve a pending user, or reject (delete) it"""
    return await UserService(db).set_approval(data.user_id, data.approved, admin)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: UUID,
    current: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    # Pending users can still read their own profile
    if current.id != user_id:
        raise PermissionDenied()
    user = await UserService(db).get(user_id)
    if not user:
        raise NotFoundError("User")
    return user


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    data: UserUpdate,
    current: User = Depends(require_approved_user),
    db: AsyncSession = Depends(get_db)
):
    return await UserService(db).update_profile(user_id, data, current)


@router.delete("/{user_id}")
async def delete_user(
    user_id: UUID,
    current: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await UserService(db).delete_user(user_id, current)
    return {"message": "User deleted successfully"}


@preferences_router.get("", response_model=PreferencesPayload)
async def get_preferences(current: User = Depends(require_approved_user), db: AsyncSession = Depends(get_db)):
    return await UserService(db).get_preferences(current)


@preferences_router.post("", response_model=PreferencesPayload)
async def save_preferences(
    data: Dict[str, Any] = Body(...),
    current: User = Depends(require_approved_user),
    db: AsyncSession = Depends(get_db)
):
    return await UserService(db).save_preferences(current, data)
