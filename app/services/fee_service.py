# app/services/fee_service.py
"""Fee records: one row per (student, class) with paid/unpaid bookkeeping."""
from typing import List, Optional, Dict, Any, Tuple
from uuid import UUID
from decimal import Decimal, ROUND_HALF_UP
import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from .attendance_service import check_references
from .base_service import BaseService
from .notification_service import NotificationService, templates
from ..core.exceptions import NotFoundError, ValidationError
from ..models.class_model import ClassModel
from ..models.fee import Fee
from ..models.student import Student
from ..schemas.fee_schemas import FeeCreate, FeeUpdate, FeeResponse

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def _money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def derive_fee_unpaid(
    fee_to_be_paid: Decimal,
    fee_paid: Optional[Decimal] = None,
    fee_unpaid: Optional[Decimal] = None,
) -> Decimal:
    """Caller-supplied unpaid wins; otherwise the outstanding amount to two decimals"""
    if fee_unpaid is not None:
        return _money(fee_unpaid)
    if fee_paid is not None:
        return _money(_money(fee_to_be_paid) - _money(fee_paid))
    return _money(fee_to_be_paid)


class FeeService(BaseService[Fee]):
    def __init__(self, db: AsyncSession):
        super().__init__(Fee, db)
        self.notifications = NotificationService(db)

    def _detail_query(self):
        return (
            select(Fee, Student.name, Student.father_name, ClassModel.name, ClassModel.teacher)
            .outerjoin(Student, Student.id == Fee.student_id)
            .outerjoin(ClassModel, ClassModel.id == Fee.class_id)
        )

    @staticmethod
    def _detail(row: Tuple) -> Dict[str, Any]:
        fee, student_name, father_name, class_name, teacher_name = row
        return {
            **FeeResponse.model_validate(fee).model_dump(mode="json"),
            "student_name": student_name or "Unknown",
            "father_name": father_name or "Unknown",
            "class_name": class_name or "Unknown",
            "teacher_name": teacher_name or "Unknown",
        }

    async def list_fees(self, student_id: Optional[UUID] = None, class_id: Optional[UUID] = None) -> List[Dict[str, Any]]:
        stmt = self._detail_query().order_by(Fee.created_at.desc())
        if student_id:
            stmt = stmt.where(Fee.student_id == student_id)
        if class_id:
            stmt = stmt.where(Fee.class_id == class_id)
        result = await self.db.execute(stmt)
        return [self._detail(row) for row in result.all()]

    async def get_fee_detail(self, fee_id: UUID) -> Dict[str, Any]:
        result = await self.db.execute(self._detail_query().where(Fee.id == fee_id))
        row = result.first()
        if not row:
            raise NotFoundError("Fee")
        return self._detail(row)

    async def _names(self, student_id: UUID, class_id: UUID) -> Tuple[str, str]:
        student = await self.db.get(Student, student_id)
        class_obj = await self.db.get(ClassModel, class_id)
        return (student.name if student else "Unknown", class_obj.name if class_obj else "Unknown")

    async def create_fee(self, data: FeeCreate) -> Tuple[Fee, bool]:
        """
        Record a fee. A second fee for the same student and class accumulates
        into the existing row. Returns the row and whether it was newly created.
        """
        await check_references(self.db, [data.student_id], [data.class_id])

        result = await self.db.execute(
            select(Fee).where(Fee.student_id == data.student_id, Fee.class_id == data.class_id)
        )
        existing = result.scalar_one_or_none()

        if existing:
            total_to_be_paid = _money(existing.fee_to_be_paid) + _money(data.fee_to_be_paid)
            total_paid = _money(existing.fee_paid or 0)
            if data.fee_paid is not None:
                total_paid += _money(data.fee_paid)

            existing.fee_to_be_paid = total_to_be_paid
            existing.fee_paid = total_paid
            existing.fee_unpaid = derive_fee_unpaid(total_to_be_paid, total_paid, data.fee_unpaid)
            existing.payment_date = data.payment_date
            await self.db.commit()
            await self.db.refresh(existing)
            fee, created = existing, False
        else:
            values = data.model_dump()
            values["fee_unpaid"] = derive_fee_unpaid(data.fee_to_be_paid, data.fee_paid, data.fee_unpaid)
            fee = await self.create(values)
            created = True

        student_name, class_name = await self._names(fee.student_id, fee.class_id)
        if created:
            payload = templates.fee_added(student_name, class_name, f"{_money(data.fee_to_be_paid):.2f}")
        else:
            payload = templates.fee_updated(student_name, class_name, f"{_money(fee.fee_to_be_paid):.2f}")
        await self.notifications.emit(payload, entity_id=fee.id)

        logger.info(f"{'Created' if created else 'Accumulated'} fee {fee.id}")
        return fee, created

    async def update_fee(self, fee_id: UUID, data: FeeUpdate) -> Fee:
        fee = await self.get(fee_id)
        if not fee:
            raise NotFoundError("Fee")

        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        to_be_paid = changes.get("fee_to_be_paid", fee.fee_to_be_paid)
        paid = changes.get("fee_paid", fee.fee_paid)
        if paid is not None and _money(paid) > _money(to_be_paid):
            raise ValidationError("Amount paid cannot exceed the fee amount")

        if "fee_unpaid" in changes:
            changes["fee_unpaid"] = _money(changes["fee_unpaid"])
        elif "fee_paid" in changes or "fee_to_be_paid" in changes:
            changes["fee_unpaid"] = derive_fee_unpaid(to_be_paid, paid)

        fee = await self.update(fee_id, changes)

        student_name, class_name = await self._names(fee.student_id, fee.class_id)
        await self.notifications.emit(
            templates.fee_updated(student_name, class_name, f"{_money(fee.fee_to_be_paid):.2f}"),
            entity_id=fee.id,
        )
        return fee

    async def delete_fee(self, fee_id: UUID) -> Dict[str, str]:
        if not await self.hard_delete(fee_id):
            raise NotFoundError("Fee")
        return {"message": "Fee deleted successfully"}
