# app/core/exceptions.py
"""Custom exceptions for the attendance application."""
from fastapi import HTTPException
from typing import Any, Dict, Optional


class AttendanceAppException(HTTPException):
    """Base exception for the attendance application."""
    def __init__(
        self,
        status_code: int,
        detail: str,
        headers: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class ValidationError(AttendanceAppException):
    """Malformed or inconsistent input; nothing was written."""
    def __init__(self, message: str):
        super().__init__(status_code=400, detail=message)


class NotFoundError(AttendanceAppException):
    """Raised when a referenced entity does not exist."""
    def __init__(self, resource: str):
        super().__init__(status_code=404, detail=f"{resource} not found")


class AuthenticationError(AttendanceAppException):
    def __init__(self, message: str = "Unauthorized"):
        super().__init__(
            status_code=401,
            detail=message,
            headers={"WWW-Authenticate": "Bearer"}
        )


class PermissionDenied(AttendanceAppException):
    def __init__(self, message: str = "Forbidden"):
        super().__init__(status_code=403, detail=message)


class ConflictError(AttendanceAppException):
    def __init__(self, message: str):
        super().__init__(status_code=409, detail=message)
