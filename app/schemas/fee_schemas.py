# app/schemas/fee_schemas.py
"""Pydantic schemas for fee records."""
from typing import Optional
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

MAX_AMOUNT = Decimal("99999999.99")


def _not_in_future(value: Optional[date]) -> Optional[date]:
    if value is not None and value > date.today():
        raise ValueError('Payment date cannot be in the future')
    return value


class FeeCreate(BaseModel):
    student_id: UUID
    class_id: UUID
    fee_to_be_paid: Decimal = Field(..., ge=Decimal("0.01"), le=MAX_AMOUNT, decimal_places=2)
    fee_paid: Optional[Decimal] = Field(default=None, ge=0, le=MAX_AMOUNT, decimal_places=2)
    fee_unpaid: Optional[Decimal] = Field(default=None, ge=0, le=MAX_AMOUNT, decimal_places=2)
    payment_date: date

    _check_payment_date = field_validator('payment_date')(_not_in_future)

    @model_validator(mode='after')
    def validate_paid_amount(self):
        if self.fee_paid is not None and self.fee_paid > self.fee_to_be_paid:
            raise ValueError('Amount paid cannot exceed the fee amount')
        return self


class FeeUpdate(BaseModel):
    """Schema for updating a fee - all fields optional"""
    fee_to_be_paid: Optional[Decimal] = Field(default=None, gt=0, le=MAX_AMOUNT, decimal_places=2)
    fee_paid: Optional[Decimal] = Field(default=None, ge=0, le=MAX_AMOUNT, decimal_places=2)
    fee_unpaid: Optional[Decimal] = Field(default=None, ge=0, le=MAX_AMOUNT, decimal_places=2)
    payment_date: Optional[date] = None

    _check_payment_date = field_validator('payment_date')(_not_in_future)


class FeeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    student_id: UUID
    class_id: UUID
    fee_to_be_paid: Decimal
    fee_paid: Optional[Decimal] = None
    fee_unpaid: Optional[Decimal] = None
    payment_date: Optional[date] = None
    created_at: Optional[datetime] = None


class FeeDetailResponse(FeeResponse):
    student_name: str
    father_name: str
    class_name: str
    teacher_name: str
