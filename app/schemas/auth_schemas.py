# app/schemas/auth_schemas.py
"""Pydantic schemas for registration, login and password recovery."""
from pydantic import BaseModel, EmailStr, Field

from ..models.user import UserRole


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    role: UserRole = UserRole.TEACHER


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class EmailRequest(BaseModel):
    # Left as a plain string; the services answer malformed addresses themselves
    email: str = ""


class VerifyCodeRequest(BaseModel):
    email: str = ""
    code: str = ""


class ResetPasswordRequest(BaseModel):
    email: str = ""
    code: str = ""
    new_password: str = ""
