# app/models/fee.py
from sqlalchemy import Column, Date, Numeric, UniqueConstraint, Uuid

from .base import Base


class Fee(Base):
    __tablename__ = "fees"

    student_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    class_id = Column(Uuid(as_uuid=True), nullable=False, index=True)

    fee_to_be_paid = Column(Numeric(10, 2), nullable=False)
    fee_paid = Column(Numeric(10, 2))
    fee_unpaid = Column(Numeric(10, 2))
    payment_date = Column(Date)

    __table_args__ = (
        UniqueConstraint("student_id", "class_id", name="uq_fee_student_class"),
    )
