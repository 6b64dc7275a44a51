# app/routers/auth.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..schemas.auth_schemas import (
    EmailRequest, LoginRequest, RegisterRequest, ResetPasswordRequest, TokenResponse, VerifyCodeRequest
)
from ..schemas.user_schemas import UserResponse
from ..services.password_reset_service import PasswordResetService
from ..services.user_service import UserService

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/register", status_code=201)
async def register(data: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Create an account; the first account (or any while no admin exists) becomes an approved admin"""
    user = await UserService(db).register(data)
    message = "Account created successfully!"
    if not user.is_approved:
        message += " Please wait for admin approval."
    return {
        "message": message,
        "user": UserResponse.model_validate(user).model_dump(mode="json"),
    }


@router.post("/login", response_model=TokenResponse)
async def login(data: LoginRequest, db: AsyncSession = Depends(get_db)):
    token = await UserService(db).authenticate(data.email, data.password)
    return TokenResponse(access_token=token)


@router.post("/check-user")
async def check_user(data: EmailRequest, db: AsyncSession = Depends(get_db)):
    return await UserService(db).check_user(data.email)


@router.post("/forgot-password")
async def forgot_password(data: EmailRequest, db: AsyncSession = Depends(get_db)):
    return await PasswordResetService(db).issue_code(data.email)


@router.post("/verify-code")
async def verify_code(data: VerifyCodeRequest, db: AsyncSession = Depends(get_db)):
    return await PasswordResetService(db).verify_code(data.email, data.code)


@router.post("/reset-password")
async def reset_password(data: ResetPasswordRequest, db: AsyncSession = Depends(get_db)):
    return await PasswordResetService(db).reset_password(data.email, data.code, data.new_password)
