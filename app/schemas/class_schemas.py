# app/schemas/class_schemas.py
"""Pydantic schemas for classes and the upgrade operation."""
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..models.class_model import ClassStatus


class ClassCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, description="Class name")
    subject: str = Field(default="", max_length=100)
    teacher: str = Field(..., min_length=1, max_length=100)
    time: str = Field(..., min_length=1, max_length=50)
    start_date: date
    end_date: Optional[date] = None
    status: ClassStatus = ClassStatus.ACTIVE
    description: Optional[str] = None
    fee: Decimal = Field(default=Decimal("0"), ge=0, max_digits=10, decimal_places=2)

    @model_validator(mode='after')
    def validate_dates(self):
        if self.end_date and self.end_date < self.start_date:
            raise ValueError('end_date cannot be before start_date')
        return self


class ClassUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    subject: Optional[str] = Field(default=None, max_length=100)
    teacher: Optional[str] = Field(default=None, min_length=1, max_length=100)
    time: Optional[str] = Field(default=None, min_length=1, max_length=50)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[ClassStatus] = None
    description: Optional[str] = None
    fee: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)


class ClassResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    subject: str
    teacher: str
    time: str
    start_date: date
    end_date: Optional[date] = None
    status: ClassStatus
    description: Optional[str] = None
    fee: Decimal
    created_at: Optional[datetime] = None


class ClassUpgradeRequest(BaseModel):
    """Either describe a successor class or name an existing class to promote into"""
    new_class_data: Optional[ClassCreate] = None
    promote_to_class_id: Optional[UUID] = None


class BulkDeleteRequest(BaseModel):
    ids: List[UUID] = []
