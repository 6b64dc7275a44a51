# app/models/class_model.py
import enum

from sqlalchemy import Column, Date, Numeric, String, Text

from .base import Base, enum_column_type


class ClassStatus(enum.Enum):
    ACTIVE = "active"
    COMPLETED = "completed"


class ClassModel(Base):
    __tablename__ = "classes"

    name = Column(String(100), nullable=False, index=True)
    subject = Column(String(100), nullable=False, default="")
    teacher = Column(String(100), nullable=False)
    time = Column(String(50), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, index=True)
    status = Column(enum_column_type(ClassStatus), nullable=False, default=ClassStatus.ACTIVE, index=True)
    description = Column(Text)
    fee = Column(Numeric(10, 2), nullable=False, default=0)
